"""Header filtering for upstream requests and relayed responses."""

from collections.abc import Iterable

from core.request_types import HeaderList

# Describe the proxy's own inbound connection, not the caller's intent.
REQUEST_EXCLUDED = frozenset({"host", "origin", "referer", "cookie"})

# Upstream CORS policy is replaced by ours.
RESPONSE_EXCLUDED = frozenset({"access-control-allow-origin", "access-control-expose-headers"})

# Framing is recomputed by httpx (outbound) and the ASGI server (inbound).
HOP_BY_HOP_REQUEST = frozenset(
    {
        "connection",
        "keep-alive",
        "content-length",
        "transfer-encoding",
        "te",
        "upgrade",
        "proxy-connection",
    }
)

# httpx hands back a decoded body, so the upstream encoding no longer applies.
HOP_BY_HOP_RESPONSE = frozenset(
    {"connection", "keep-alive", "content-encoding", "content-length", "transfer-encoding"}
)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With, Accept",
}


class HeaderBuilder:
    """Build header sets for each relay direction."""

    def build_upstream_headers(self, headers: Iterable[tuple[str, str]]) -> HeaderList:
        """Copy inbound headers minus origin-identity and hop-by-hop headers."""
        excluded = REQUEST_EXCLUDED | HOP_BY_HOP_REQUEST
        return [(key, value) for key, value in headers if key.lower() not in excluded]

    def build_relayed_headers(self, headers: Iterable[tuple[str, str]]) -> HeaderList:
        """Copy upstream headers minus upstream CORS, then append our CORS headers."""
        excluded = RESPONSE_EXCLUDED | HOP_BY_HOP_RESPONSE | {k.lower() for k in CORS_HEADERS}
        relayed = [(key, value) for key, value in headers if key.lower() not in excluded]
        return with_cors(relayed)


def with_cors(headers: HeaderList | None = None) -> HeaderList:
    """Return headers with the CORS headers set last, replacing any existing values."""
    cors_keys = {k.lower() for k in CORS_HEADERS}
    kept = [(key, value) for key, value in headers or [] if key.lower() not in cors_keys]
    return kept + list(CORS_HEADERS.items())
