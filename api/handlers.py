"""FastAPI route handlers."""

import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.exceptions import MethodNotAllowed, UpstreamTransportFailure
from core.headers import JSON_CONTENT_TYPE
from core.protocols import RequestLogger
from core.request_types import InboundRequest

ALIVE_MESSAGE = "gas_proxy alive"


def inbound_from(request: Request) -> InboundRequest:
    """Pull the admission-relevant headers off a request."""
    headers = request.headers
    return InboundRequest(
        method=request.method,
        origin=headers.get("origin", ""),
        referer=headers.get("referer", ""),
        proxy_key=headers.get("x-proxy-key", ""),
        content_length=InboundRequest.parse_content_length(headers.get("content-length")),
    )


async def handle_root(request: Request, logger: RequestLogger) -> Response:
    """Dispatch on method: GET is liveness, OPTIONS preflight, POST relay."""
    if request.method == "GET":
        return handle_alive(request)
    if request.method == "OPTIONS":
        return handle_preflight(request)
    if request.method == "POST":
        return await handle_relay(request, logger)
    raise MethodNotAllowed()


def handle_alive(request: Request) -> Response:
    headers = request.app.state.header_builder.build_response_headers(
        "GET", request.headers.get("origin", "")
    )
    return JSONResponse(
        {"success": True, "message": ALIVE_MESSAGE},
        headers=headers,
        media_type=JSON_CONTENT_TYPE,
    )


def handle_preflight(request: Request) -> Response:
    headers = request.app.state.header_builder.build_response_headers(
        "OPTIONS", request.headers.get("origin", "")
    )
    return Response(status_code=204, headers=headers)


async def handle_relay(request: Request, logger: RequestLogger) -> Response:
    """Admit, read, forward, and mirror the upstream reply byte-for-byte."""
    inbound = inbound_from(request)
    relay = request.app.state.relay_service
    relay.admit(inbound)
    body = await relay.read_body(request.stream())

    logger.log_incoming(request.method, request.url.path, dict(request.headers), body)

    upstream = request.app.state.upstream_client
    started = time.monotonic()
    try:
        reply = await upstream.forward(body)
    except UpstreamTransportFailure as e:
        # Detail stays server-side; the caller only sees the generic envelope
        logger.log_error("upstream", e.status_code, e.detail)
        raise

    logger.log_relay(
        reply.status_code,
        len(body),
        len(reply.body),
        elapsed=time.monotonic() - started,
    )

    headers = request.app.state.header_builder.build_response_headers("POST", inbound.origin)
    headers["Content-Type"] = reply.content_type or JSON_CONTENT_TYPE
    return Response(content=reply.body, status_code=reply.status_code, headers=headers)
