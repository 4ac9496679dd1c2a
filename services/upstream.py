"""HTTP client for the single fixed upstream."""

import asyncio

import httpx

from core.config import UpstreamSettings
from core.exceptions import UpstreamTransportFailure
from core.headers import HeaderBuilder
from core.request_types import UpstreamReply


def build_client(
    settings: UpstreamSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared AsyncClient with the redirect and timeout policy applied."""
    connect = settings.connect_timeout or settings.total_timeout
    timeout = httpx.Timeout(settings.total_timeout, connect=connect)
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=settings.follow_redirects,
        max_redirects=settings.max_redirects,
        event_hooks={"request": [_require_https]},
        transport=transport,
    )


async def _require_https(request: httpx.Request) -> None:
    """Runs for the first hop and every redirect hop."""
    if request.url.scheme != "https":
        raise httpx.UnsupportedProtocol(
            f"Refusing non-https hop to {request.url}",
            request=request,
        )


class UpstreamClient:
    """Forward raw bodies to the upstream and hand back its reply untouched."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: UpstreamSettings,
        header_builder: HeaderBuilder,
    ) -> None:
        self._client = client
        self._url = settings.url
        self._total_timeout = settings.total_timeout
        self._headers = header_builder

    async def forward(self, body: bytes) -> UpstreamReply:
        """POST ``body`` upstream. Any transport failure becomes UpstreamTransportFailure."""
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self._url,
                    content=body,
                    headers=self._headers.build_upstream_headers(),
                ),
                timeout=self._total_timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTransportFailure(f"timeout: {e!r}") from e
        except httpx.RequestError as e:
            raise UpstreamTransportFailure(f"{type(e).__name__}: {e}") from e

        return UpstreamReply(
            status_code=response.status_code,
            content_type=response.headers.get("content-type") or None,
            body=response.content,
        )
