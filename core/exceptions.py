"""Custom exception hierarchy for the forward proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class InvalidTarget(ProxyError):
    """Raised when the reconstructed target does not start with "http".

    Attributes:
        target: The rejected target string
    """

    def __init__(self, target: str) -> None:
        super().__init__(f"Invalid target URL: {target!r}")
        self.target = target


class UpstreamError(ProxyError):
    """Raised when the upstream request cannot be issued or completed.

    Attributes:
        message: Error message
        target: Target URL the request was sent to (optional)
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream request times out."""


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the upstream target."""


class ResponseTooLarge(UpstreamError):
    """Upstream response body exceeds the buffering limit."""

    def __init__(self, limit: int, target: str | None = None) -> None:
        super().__init__(f"Upstream response exceeds {limit} bytes", target=target)
        self.limit = limit
