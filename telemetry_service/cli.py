"""CLI entry point for the telemetry service."""

import asyncio
import logging
import math

import click
import uvicorn

from .config import Settings, settings
from .main import create_app
from .store import StoreRegistry

logger = logging.getLogger(__name__)

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)


async def create_schemas(cfg: Settings) -> None:
    stores = StoreRegistry.from_settings(cfg)
    try:
        await stores.create_schema()
    finally:
        await stores.close()


@click.command()
@click.option("--database-url", default=None, help="Database server URL, without database name.")
@click.option("--host", default=None, help="HTTP server host.")
@click.option("--port", type=int, default=None, help="HTTP server port.")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level.",
)
@click.option("--generate-schema", is_flag=True, default=False, help="Generate the database schema and exit.")
def main(
    database_url: str | None,
    host: str | None,
    port: int | None,
    log_level: str | None,
    generate_schema: bool,
) -> None:
    """Collect telemetry reports from blockchain nodes."""
    overrides = {
        "database_url": database_url,
        "host": host,
        "port": port,
        "log_level": log_level.lower() if log_level else None,
    }
    cfg = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    setup_logging(cfg.log_level)

    if generate_schema:
        asyncio.run(create_schemas(cfg))
        logger.info("generated database schema for %s - now exiting", ", ".join(cfg.networks))
        return

    logger.info("starting HTTP server on %s:%d", cfg.host, cfg.port)
    uvicorn.run(
        create_app(cfg),
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level,
        # In-flight requests get as long as their own timeout to finish.
        timeout_graceful_shutdown=math.ceil(cfg.request_timeout_seconds),
    )
