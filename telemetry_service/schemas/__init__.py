from .telemetry import (
    U32_MAX,
    U64_MAX,
    I64_MIN,
    I64_MAX,
    TelemetryAgentInfo,
    TelemetrySystemInfo,
    TelemetryChainInfo,
    TelemetryInfo,
    decode_telemetry,
)

__all__ = [
    "TelemetryAgentInfo", "TelemetrySystemInfo", "TelemetryChainInfo", "TelemetryInfo",
    "decode_telemetry", "U32_MAX", "U64_MAX", "I64_MIN", "I64_MAX",
]
