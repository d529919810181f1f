from sqlalchemy import select

from telemetry_service.database import create_engine
from telemetry_service.models import Node
from telemetry_service.store import NodeStore


def sqlite_store(network: str, path) -> NodeStore:
    """A store on a SQLite file standing in for the network's database."""
    return NodeStore(network, create_engine(f"sqlite+aiosqlite:///{path}"), min_connections=2)


async def fetch_nodes(store: NodeStore) -> list[Node]:
    async with store.session_factory() as db:
        result = await db.execute(select(Node).order_by(Node.id))
        return list(result.scalars().all())
