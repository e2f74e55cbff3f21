"""HTTP client wrapper for upstream requests."""

import httpx

from core.exceptions import (
    ResponseTooLarge,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamTimeoutError,
)
from core.request_types import OutboundRequest, UpstreamResponse


class UpstreamClient:
    """Issue outbound requests and buffer the upstream response."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_response_bytes: int,
        timeout: float = 30.0,
    ) -> None:
        self._client = client
        self._max_response_bytes = max_response_bytes
        self._timeout = timeout

    async def send(self, outbound: OutboundRequest) -> UpstreamResponse:
        """Send the request and read the full body.

        Raises:
            UpstreamError: on any transport failure, bad URL, or oversized body
        """
        try:
            req = self._client.build_request(
                outbound.method,
                outbound.url,
                headers=_to_wire(outbound.headers),
                content=outbound.body,
                timeout=self._timeout,
            )
            response = await self._client.send(req, stream=True)
            try:
                body = await self._read_body(response, outbound.url)
            finally:
                await response.aclose()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(_describe(e), target=outbound.url) from e
        except httpx.ConnectError as e:
            raise UpstreamConnectionError(_describe(e), target=outbound.url) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise UpstreamError(_describe(e), target=outbound.url) from e

        return UpstreamResponse(
            status_code=response.status_code,
            headers=_from_wire(response.headers.raw),
            body=body,
        )

    async def _read_body(self, response: httpx.Response, target: str) -> bytes:
        """Buffer the response body, enforcing the size ceiling."""
        declared = response.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self._max_response_bytes:
            raise ResponseTooLarge(self._max_response_bytes, target=target)

        chunks: list[bytes] = []
        total = 0
        async for chunk in response.aiter_bytes():
            total += len(chunk)
            if total > self._max_response_bytes:
                raise ResponseTooLarge(self._max_response_bytes, target=target)
            chunks.append(chunk)
        return b"".join(chunks)


def _describe(exc: Exception) -> str:
    """Stringify an httpx error, never returning an empty description."""
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


def _to_wire(headers: list[tuple[str, str]]) -> list[tuple[bytes, bytes]]:
    """Encode latin-1 header text back to the exact bytes the caller sent."""
    return [(key.encode("latin-1"), value.encode("latin-1")) for key, value in headers]


def _from_wire(headers: list[tuple[bytes, bytes]]) -> list[tuple[str, str]]:
    """Decode raw upstream headers as latin-1 so any byte survives the relay."""
    return [(key.decode("latin-1"), value.decode("latin-1")) for key, value in headers]
