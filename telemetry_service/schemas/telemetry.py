"""
Telemetry protocol sent by blockchain client nodes.

Fields introduced after the first protocol revision are optional so that
older and newer clients can share one endpoint. Integer fields are bounded
to the widths the clients send them with.
"""

from pydantic import BaseModel, Field, ValidationError

from ..errors import DecodeError

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class TelemetryAgentInfo(BaseModel):
    name: str
    version: str
    build: str
    # Added with the second protocol revision.
    protocol_version: int | None = Field(default=None, ge=0, le=U32_MAX)


class TelemetrySystemInfo(BaseModel):
    bandwidth_download: int = Field(ge=0, le=U64_MAX)
    bandwidth_upload: int = Field(ge=0, le=U64_MAX)
    cpu_usage: float
    memory_usage: int = Field(ge=0, le=U64_MAX)
    boot_time_seconds: int = Field(ge=I64_MIN, le=I64_MAX)


class TelemetryChainInfo(BaseModel):
    # Added with the second protocol revision.
    chain_id: str | None = None
    node_id: str
    account_id: str | None = None
    is_validator: bool
    status: str
    latest_block_hash: str
    latest_block_height: int = Field(ge=0, le=U64_MAX)
    num_peers: int = Field(ge=0, le=U64_MAX)
    block_production_tracking_delay: float
    min_block_production_delay: float
    max_block_production_delay: float
    max_block_wait_delay: float


class TelemetryInfo(BaseModel):
    agent: TelemetryAgentInfo
    system: TelemetrySystemInfo
    chain: TelemetryChainInfo
    # Opaque to this service.
    extra_info: str


def decode_telemetry(body: bytes) -> TelemetryInfo:
    """Decode a raw request body, raising DecodeError with the body attached."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"request body is not valid UTF-8: {e}", body) from e

    try:
        return TelemetryInfo.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"invalid telemetry payload: {e}", body) from e
