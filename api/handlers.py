"""FastAPI route handlers."""

from typing import Any
from urllib.parse import quote

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.config import RelaySettings
from core.exceptions import InvalidTarget, UpstreamError
from core.headers import with_cors
from core.request_types import InboundRequest, RelayedResponse

INVALID_TARGET_BODY = {"error": "Invalid target URL"}


def _target_segments(request: Request, relay: RelaySettings) -> list[str]:
    """Return the wildcard path segments following the route prefix.

    With ``segments_predecoded`` the runtime's decoded path parameter is used.
    Otherwise the still-encoded ``raw_path`` is sliced so the resolver can
    decode it exactly once.
    """
    decoded = request.path_params.get("target", "")
    if relay.segments_predecoded:
        return decoded.split("/") if decoded else []

    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        # quote/unquote round-trips, so the resolver still sees the decoded value
        return quote(decoded).split("/") if decoded else []

    raw = raw_path.decode("latin-1")
    root_path = request.scope.get("root_path", "")
    if root_path and raw.startswith(root_path):
        raw = raw[len(root_path):]
    marker = relay.route_prefix.rstrip("/") + "/"
    if not raw.startswith(marker):
        return []
    remainder = raw[len(marker):]
    return remainder.split("/") if remainder else []


def _json_error(status_code: int, content: dict[str, Any]) -> JSONResponse:
    """Build a JSON error response carrying the CORS headers."""
    return JSONResponse(content=content, status_code=status_code, headers=dict(with_cors()))


def _to_response(relayed: RelayedResponse) -> Response:
    """Convert a relayed response, keeping repeated headers such as Set-Cookie."""
    response = Response(content=relayed.body, status_code=relayed.status_code)
    for key, value in relayed.headers:
        response.headers.append(key, value)
    return response


async def handle_proxy(request: Request, relay: RelaySettings) -> Response:
    """Handle the wildcard proxy route for every method."""
    inbound = InboundRequest(
        method=request.method,
        segments=_target_segments(request, relay),
        headers=request.headers.items(),
        body=await request.body(),
    )

    forwarder = request.app.state.forwarder
    try:
        relayed = await forwarder.relay(inbound)
    except InvalidTarget:
        return _json_error(400, INVALID_TARGET_BODY)
    except UpstreamError as e:
        return _json_error(502, {"error": "Bad Gateway", "details": str(e)})

    return _to_response(relayed)
