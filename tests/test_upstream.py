import httpx
import pytest

from core.exceptions import (
    ResponseTooLarge,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamTimeoutError,
)
from core.request_types import OutboundRequest
from services.upstream import UpstreamClient


def make_client(handler, max_response_bytes=1024):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return http, UpstreamClient(http, max_response_bytes)


GET = OutboundRequest("GET", "https://example.com/data", [("Accept", "*/*")])


@pytest.mark.asyncio
async def test_send_buffers_response():
    http, client = make_client(
        lambda request: httpx.Response(
            200, headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")], content=b"payload"
        )
    )
    async with http:
        response = await client.send(GET)

    assert response.status_code == 200
    assert response.body == b"payload"
    assert [v for k, v in response.headers if k.lower() == "set-cookie"] == ["a=1", "b=2"]


@pytest.mark.asyncio
async def test_send_forwards_method_headers_and_body():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(204)

    http, client = make_client(handler)
    async with http:
        await client.send(
            OutboundRequest("PUT", "https://example.com/x", [("X-Trace", "1")], b"\x00\x01")
        )

    assert seen[0].method == "PUT"
    assert seen[0].headers["x-trace"] == "1"
    assert seen[0].content == b"\x00\x01"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (httpx.ConnectError("refused"), UpstreamConnectionError),
        (httpx.ConnectTimeout("slow"), UpstreamTimeoutError),
        (httpx.ReadTimeout("slow"), UpstreamTimeoutError),
        (httpx.RemoteProtocolError("bad framing"), UpstreamError),
        (httpx.UnsupportedProtocol("Request URL has an unsupported protocol"), UpstreamError),
    ],
)
async def test_transport_errors_are_translated(exc, expected):
    def handler(request):
        raise exc

    http, client = make_client(handler)
    async with http:
        with pytest.raises(expected) as exc_info:
            await client.send(GET)

    assert str(exc_info.value)
    assert exc_info.value.target == "https://example.com/data"


@pytest.mark.asyncio
async def test_declared_length_over_limit_is_rejected():
    http, client = make_client(lambda request: httpx.Response(200, content=b"x" * 11), 10)
    async with http:
        with pytest.raises(ResponseTooLarge):
            await client.send(GET)


@pytest.mark.asyncio
async def test_streamed_body_over_limit_is_rejected():
    async def chunks():
        for _ in range(4):
            yield b"xxxx"

    http, client = make_client(lambda request: httpx.Response(200, content=chunks()), 10)
    async with http:
        with pytest.raises(ResponseTooLarge) as exc_info:
            await client.send(GET)

    assert exc_info.value.limit == 10


@pytest.mark.asyncio
async def test_non_ascii_request_header_is_sent_as_original_bytes():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200)

    http, client = make_client(handler)
    async with http:
        # The ASGI server hands us header bytes decoded as latin-1.
        await client.send(OutboundRequest("GET", "https://example.com/", [("X-Name", "caf\xe9")]))

    assert (b"X-Name", b"caf\xe9") in seen[0].headers.raw


@pytest.mark.asyncio
async def test_utf8_response_header_keeps_its_bytes():
    title = "caf€".encode("utf-8")
    http, client = make_client(lambda request: httpx.Response(200, headers=[(b"X-Title", title)]))
    async with http:
        response = await client.send(GET)

    assert ("X-Title", title.decode("latin-1")) in response.headers
