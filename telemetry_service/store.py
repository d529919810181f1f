"""
Per-network node stores.

Each network with a backing database gets a NodeStore holding a bounded
connection pool. Writes are a single INSERT ... ON CONFLICT DO UPDATE keyed
by node id, so repeating a report is harmless and the latest one wins.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from .config import Settings
from .database import Base, create_engine, create_session_factory
from .errors import StoreError
from .models import Node
from .networks import NetworkId, store_name
from .schemas import I64_MAX, TelemetryInfo

logger = logging.getLogger(__name__)

I32_MAX = 2**31 - 1


def _as_i64(value: int) -> int:
    """Reinterpret an unsigned 64-bit value as the signed BIGINT the column holds."""
    return value - 2**64 if value > I64_MAX else value


def _as_i32(value: int | None) -> int | None:
    if value is None:
        return None
    return value - 2**32 if value > I32_MAX else value


def node_values(report: TelemetryInfo, now: datetime) -> dict:
    """Flatten a report into node columns. last_seen is always server time."""
    agent, system, chain = report.agent, report.system, report.chain
    return {
        "id": chain.node_id,
        "account_id": chain.account_id,
        "last_seen": now,
        "last_height": _as_i64(chain.latest_block_height),
        "last_hash": chain.latest_block_hash,
        "agent_name": agent.name,
        "agent_version": agent.version,
        "agent_build": agent.build,
        "peer_count": _as_i64(chain.num_peers),
        "is_validator": chain.is_validator,
        "status": chain.status,
        "bandwidth_download": _as_i64(system.bandwidth_download),
        "bandwidth_upload": _as_i64(system.bandwidth_upload),
        "cpu_usage": system.cpu_usage,
        "memory_usage": _as_i64(system.memory_usage),
        "boot_time_seconds": system.boot_time_seconds,
        "block_production_tracking_delay": chain.block_production_tracking_delay,
        "min_block_production_delay": chain.min_block_production_delay,
        "max_block_production_delay": chain.max_block_production_delay,
        "max_block_wait_delay": chain.max_block_wait_delay,
        "chain_id": chain.chain_id,
        "protocol_version": _as_i32(agent.protocol_version),
    }


def _insert_for(dialect_name: str):
    match dialect_name:
        case "postgresql":
            return postgresql.insert
        case "sqlite":
            return sqlite.insert
        case _:
            raise ValueError(f"unsupported database backend: {dialect_name}")


class NodeStore:
    def __init__(self, network: str, engine: AsyncEngine, min_connections: int = 0):
        self.network = network
        self.engine = engine
        self.session_factory = create_session_factory(engine)
        self.min_connections = min_connections

    @classmethod
    def from_url(cls, network: str, url: str, settings: Settings) -> "NodeStore":
        engine = create_engine(
            url,
            max_connections=settings.max_connections,
            pool_timeout=settings.pool_timeout_seconds,
            sslmode=settings.sslmode,
        )
        return cls(network, engine, min(settings.min_connections, settings.max_connections))

    async def upsert(self, report: TelemetryInfo) -> None:
        values = node_values(report, datetime.now(timezone.utc).replace(tzinfo=None))
        insert = _insert_for(self.engine.dialect.name)
        stmt = insert(Node).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Node.id],
            set_={name: stmt.excluded[name] for name in values if name != "id"},
        )
        try:
            async with self.session_factory() as db:
                await db.execute(stmt)
                await db.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(self.network, f"upsert of node {values['id']} failed: {e}") from e

    async def ping(self) -> None:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(self.network, f"health probe failed: {e}") from e

    async def warm_up(self) -> None:
        """Open min_connections pooled connections so the first requests don't pay for them."""
        try:
            async with AsyncExitStack() as stack:
                for _ in range(self.min_connections):
                    await stack.enter_async_context(self.engine.connect())
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(self.network, f"could not open connections: {e}") from e
        logger.info("connected to %s database (%d warm connections)", self.network, self.min_connections)

    async def create_schema(self) -> None:
        """Create the node table if missing. Never called while serving requests."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(self.network, f"schema generation failed: {e}") from e

    async def dispose(self) -> None:
        await self.engine.dispose()


class StoreRegistry:
    """Maps network names to their stores."""

    def __init__(self, stores: dict[str, NodeStore]):
        self._stores = dict(stores)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreRegistry":
        return cls({
            network: NodeStore.from_url(network, url, settings)
            for network, url in settings.database_urls().items()
        })

    def __iter__(self):
        return iter(self._stores.values())

    def __len__(self) -> int:
        return len(self._stores)

    def get(self, network: NetworkId) -> NodeStore | None:
        name = store_name(network)
        if name is None:
            return None
        return self._stores.get(name)

    async def upsert(self, network: NetworkId, report: TelemetryInfo) -> None:
        """
        Store a report for its network.

        Reports for networks without a store (any Other) are accepted and
        dropped: the call succeeds and nothing is written.
        """
        name = store_name(network)
        if name is None:
            logger.debug("discarding telemetry of node %s for unrecognized network %r",
                         report.chain.node_id, str(network))
            return
        store = self._stores.get(name)
        if store is None:
            raise StoreError(name, "no database configured for this network")
        await store.upsert(report)

    async def ping_all(self) -> dict[str, StoreError | None]:
        """Probe every store once. Maps network name to its error, or None if healthy."""
        stores = list(self._stores.values())
        results = await asyncio.gather(*(store.ping() for store in stores), return_exceptions=True)
        outcome = {}
        for store, result in zip(stores, results):
            if isinstance(result, BaseException) and not isinstance(result, StoreError):
                raise result
            outcome[store.network] = result
        return outcome

    async def warm_up(self) -> None:
        for store in self._stores.values():
            await store.warm_up()

    async def create_schema(self) -> None:
        for store in self._stores.values():
            await store.create_schema()

    async def close(self) -> None:
        for store in self._stores.values():
            await store.dispose()
