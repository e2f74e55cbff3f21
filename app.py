"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RelayObserver
from core.target import TargetResolver
from services.forwarder import Forwarder
from services.upstream import UpstreamClient

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Config,
    observer: RelayObserver,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    relay = config.relay

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=relay.timeout,
            limits=limits,
            follow_redirects=relay.follow_redirects,
            transport=transport,
        )
        app.state.forwarder = Forwarder(
            resolver=TargetResolver(relay.segments_predecoded),
            upstream=UpstreamClient(client, relay.max_response_bytes, timeout=relay.timeout),
            header_builder=HeaderBuilder(),
            observer=observer,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="CORS Forward Proxy", version="0.1.0", lifespan=lifespan)
    prefix = relay.route_prefix.rstrip("/")

    @app.api_route(prefix + "/{target:path}", methods=PROXY_METHODS)
    async def proxy_target(request: Request):
        return await handle_proxy(request, relay)

    @app.api_route(prefix, methods=PROXY_METHODS)
    async def proxy_empty(request: Request):
        return await handle_proxy(request, relay)

    return app
