"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InboundRequest:
    """Admission-relevant view of a browser request."""

    method: str
    origin: str = ""
    referer: str = ""
    proxy_key: str = ""
    content_length: int = 0

    @staticmethod
    def parse_content_length(value: str | None) -> int:
        """Declared length, 0 when absent or unparseable."""
        try:
            return max(int(value or 0), 0)
        except ValueError:
            return 0


@dataclass(frozen=True)
class UpstreamReply:
    """Status, content type and body returned by the upstream."""

    status_code: int
    content_type: str | None
    body: bytes
