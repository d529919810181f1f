class DecodeError(Exception):
    """Request body could not be decoded into a telemetry report."""

    def __init__(self, message: str, body: bytes):
        super().__init__(message)
        self.message = message
        self.body = body

    def body_excerpt(self, limit: int = 1024) -> str:
        text = self.body[:limit].decode("utf-8", errors="replace")
        if len(self.body) > limit:
            text += "..."
        return text


class StoreError(Exception):
    """Backing store failed: connectivity, pool exhaustion or backend error."""

    def __init__(self, network: str, message: str):
        super().__init__(f"{network}: {message}")
        self.network = network
