"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.handlers import handle_root
from auth import resolve_proxy_key
from core.config import Config
from core.exceptions import MethodNotAllowed, RelayError, UpstreamTransportFailure
from core.headers import JSON_CONTENT_TYPE, SECURITY_HEADERS, HeaderBuilder
from core.origin import OriginPolicy
from core.protocols import RequestLogger
from services.relay_service import RelayService
from services.upstream import UpstreamClient, build_client

RELAY_METHODS = ["GET", "POST", "OPTIONS", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"]


def create_app(
    config: Config,
    logger: RequestLogger,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the upstream client,
    which is how tests stand in for the scripting backend.
    """
    header_builder = HeaderBuilder(config.security.allowed_origins)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = build_client(config.upstream, transport=transport)
        app.state.upstream_client = UpstreamClient(client, config.upstream, header_builder)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="GAS Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.header_builder = header_builder
    app.state.relay_service = RelayService(
        config,
        proxy_key=resolve_proxy_key(config),
        origin_policy=OriginPolicy(config.security.allowed_origins),
    )

    def render(request: Request, exc: RelayError) -> JSONResponse:
        headers = header_builder.build_response_headers(
            request.method, request.headers.get("origin", "")
        )
        return JSONResponse(
            exc.envelope(),
            status_code=exc.status_code,
            headers=headers,
            media_type=JSON_CONTENT_TYPE,
        )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        if not isinstance(exc, UpstreamTransportFailure):
            logger.log_rejection(request.method, exc.status_code, exc.message)
        return render(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Router-level failures: unknown verbs on the relay path, unknown paths
        if exc.status_code == 405:
            error = MethodNotAllowed()
        else:
            error = RelayError(str(exc.detail))
            error.status_code = exc.status_code
        logger.log_rejection(request.method, error.status_code, error.message)
        return render(request, error)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.log_error("relay", 500, f"{type(exc).__name__}: {exc}")
        return JSONResponse(
            {"success": False, "error": "Internal error"},
            status_code=500,
            headers=dict(SECURITY_HEADERS),
            media_type=JSON_CONTENT_TYPE,
        )

    @app.api_route(config.proxy.path, methods=RELAY_METHODS, include_in_schema=False)
    async def relay_root(request: Request):
        return await handle_root(request, logger)

    return app
