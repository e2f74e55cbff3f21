"""Shared request data types."""

from dataclasses import dataclass, field

# Values are latin-1 text, matching the ASGI server, so bytes round-trip exactly.
HeaderList = list[tuple[str, str]]


@dataclass(frozen=True)
class InboundRequest:
    """Request as received from the caller."""

    method: str
    segments: list[str]
    headers: HeaderList = field(default_factory=list)
    body: bytes = b""


@dataclass(frozen=True)
class OutboundRequest:
    """Prepared data for an upstream request."""

    method: str
    url: str
    headers: HeaderList
    body: bytes | None = None


@dataclass(frozen=True)
class UpstreamResponse:
    """Fully buffered upstream response."""

    status_code: int
    headers: HeaderList
    body: bytes


@dataclass(frozen=True)
class RelayedResponse:
    """Response sent back to the original caller."""

    status_code: int
    headers: HeaderList
    body: bytes = b""
