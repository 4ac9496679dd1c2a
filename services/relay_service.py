"""Admission checks for relayed POST requests."""

from collections.abc import AsyncIterator

from auth import verify_proxy_key
from core.config import Config
from core.exceptions import EmptyBody, Forbidden, PayloadTooLarge, Unauthorized
from core.origin import OriginPolicy
from core.request_types import InboundRequest


class RelayService:
    """Run the guard checks a POST must pass before it is forwarded."""

    def __init__(
        self,
        config: Config,
        proxy_key: str | None = None,
        origin_policy: OriginPolicy | None = None,
    ) -> None:
        self._enforce_origin = config.security.enforce_origin_check
        self._max_body_bytes = config.security.max_body_bytes
        self._proxy_key = proxy_key
        self._origins = origin_policy or OriginPolicy(config.security.allowed_origins)

    @property
    def max_body_bytes(self) -> int:
        return self._max_body_bytes

    def admit(self, inbound: InboundRequest) -> None:
        """Apply origin, key and declared-size checks in that order."""
        if self._enforce_origin:
            decision = self._origins.decide(inbound.origin, inbound.referer)
            if not decision.allowed:
                raise Forbidden()

        if self._proxy_key and not verify_proxy_key(self._proxy_key, inbound.proxy_key):
            raise Unauthorized()

        if inbound.content_length > self._max_body_bytes:
            raise PayloadTooLarge()

    async def read_body(self, chunks: AsyncIterator[bytes]) -> bytes:
        """Collect the body, stopping as soon as it passes the size cap.

        Content-Length is only what the client claims, so the actual bytes
        are counted here as well.
        """
        buffer = bytearray()
        async for chunk in chunks:
            buffer.extend(chunk)
            if len(buffer) > self._max_body_bytes:
                raise PayloadTooLarge()
        if not buffer:
            raise EmptyBody()
        return bytes(buffer)
