class HolderReportError(Exception):
    pass


class InvalidMintError(HolderReportError):
    """Missing or malformed mint address, rejected before any I/O."""


class SourceUnavailableError(HolderReportError):
    """The token account listing failed; no report can be built."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code  # upstream HTTP status, if any


class EnrichmentFailedError(HolderReportError):
    """History lookup failed for one holder. Logged, never raised out of the pipeline."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"enrichment failed for {address}: {reason}")
        self.address = address
        self.reason = reason
