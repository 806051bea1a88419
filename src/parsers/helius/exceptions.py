class HeliusError(Exception):
    pass


class HeliusApiError(HeliusError):
    """Non-success response (HTTP status or JSON-RPC error) from Helius."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class HeliusRateLimitError(HeliusApiError):
    pass
