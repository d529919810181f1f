from datetime import datetime
from sqlalchemy import String, Boolean, BigInteger, Integer, Float, Double, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class Node(Base):
    """Latest known state of one reporting node. One table per network database."""
    __tablename__ = "node"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    account_id: Mapped[str | None] = mapped_column(String, nullable=True)
    # Naive UTC, matching the existing timestamp column.
    last_seen: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_height: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_hash: Mapped[str] = mapped_column(String, nullable=False)
    agent_name: Mapped[str] = mapped_column(String, nullable=False)
    agent_version: Mapped[str] = mapped_column(String, nullable=False)
    agent_build: Mapped[str] = mapped_column(String, nullable=False)
    peer_count: Mapped[int] = mapped_column(BigInteger, nullable=False)
    is_validator: Mapped[bool] = mapped_column(Boolean, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    bandwidth_download: Mapped[int] = mapped_column(BigInteger, nullable=False)
    bandwidth_upload: Mapped[int] = mapped_column(BigInteger, nullable=False)
    cpu_usage: Mapped[float] = mapped_column(Float, nullable=False)
    memory_usage: Mapped[int] = mapped_column(BigInteger, nullable=False)
    boot_time_seconds: Mapped[int] = mapped_column(BigInteger, nullable=False)
    block_production_tracking_delay: Mapped[float] = mapped_column(Double, nullable=False)
    min_block_production_delay: Mapped[float] = mapped_column(Double, nullable=False)
    max_block_production_delay: Mapped[float] = mapped_column(Double, nullable=False)
    max_block_wait_delay: Mapped[float] = mapped_column(Double, nullable=False)
    # Added by the second schema revision; null for older rows and clients.
    chain_id: Mapped[str | None] = mapped_column(String, nullable=True)
    protocol_version: Mapped[int | None] = mapped_column(Integer, nullable=True)
