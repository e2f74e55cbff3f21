"""Forwarder - resolves the target, relays the request, relays the response."""

import time

from core.exceptions import InvalidTarget, UpstreamError
from core.headers import HeaderBuilder, with_cors
from core.protocols import RelayObserver
from core.request_types import InboundRequest, OutboundRequest, RelayedResponse
from core.target import TargetResolver
from services.upstream import UpstreamClient

BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class Forwarder:
    """Single-hop stateless relay for one inbound request at a time."""

    def __init__(
        self,
        resolver: TargetResolver,
        upstream: UpstreamClient,
        header_builder: HeaderBuilder,
        observer: RelayObserver,
    ) -> None:
        self._resolver = resolver
        self._upstream = upstream
        self._headers = header_builder
        self._observer = observer

    async def relay(self, inbound: InboundRequest) -> RelayedResponse:
        """Relay the inbound request to its embedded target.

        Raises:
            InvalidTarget: target does not start with "http"; nothing was sent
            UpstreamError: the upstream could not be reached or read
        """
        method = inbound.method.upper()
        raw = self._resolver.join(inbound.segments)

        if method == "OPTIONS":
            self._observer.response_relayed(method, raw, 204, 0)
            return self.preflight()

        try:
            target = self._resolver.resolve(inbound.segments)
        except InvalidTarget as e:
            self._observer.relay_failed(method, e.target, 400, str(e))
            raise
        self._observer.target_resolved(method, raw, target)

        outbound = self.build_outbound(inbound, target)
        self._observer.request_issued(method, target, outbound.headers)

        started = time.monotonic()
        try:
            upstream = await self._upstream.send(outbound)
        except UpstreamError as e:
            self._observer.relay_failed(method, target, 502, str(e))
            raise

        relayed = RelayedResponse(
            status_code=upstream.status_code,
            headers=self._headers.build_relayed_headers(upstream.headers),
            body=upstream.body,
        )
        self._observer.response_relayed(
            method,
            target,
            relayed.status_code,
            len(relayed.body),
            elapsed=time.monotonic() - started,
        )
        return relayed

    def build_outbound(self, inbound: InboundRequest, target: str) -> OutboundRequest:
        """Copy method, filtered headers, and body (except for GET/HEAD)."""
        method = inbound.method.upper()
        body = None if method in BODYLESS_METHODS else inbound.body
        return OutboundRequest(
            method=method,
            url=target,
            headers=self._headers.build_upstream_headers(inbound.headers),
            body=body,
        )

    @staticmethod
    def preflight() -> RelayedResponse:
        """Answer a CORS preflight without contacting the upstream."""
        return RelayedResponse(status_code=204, headers=with_cors(), body=b"")
