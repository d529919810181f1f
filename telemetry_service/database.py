from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def create_engine(
    url: str,
    max_connections: int = 10,
    pool_timeout: float = 30.0,
    sslmode: str | None = None,
) -> AsyncEngine:
    """Create an engine backed by a bounded connection pool."""
    connect_args = {}
    if sslmode and url.startswith("postgresql+asyncpg"):
        connect_args["ssl"] = sslmode
    return create_async_engine(
        url,
        pool_size=max_connections,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)
