"""Header construction for relay responses and upstream requests."""

UPSTREAM_CONTENT_TYPE = "text/plain; charset=utf-8"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}

CORS_METHODS = {"GET", "OPTIONS", "POST"}


class HeaderBuilder:
    """Build response and upstream headers."""

    def __init__(self, allowed_origins: list[str]):
        self._allowed = frozenset(allowed_origins)

    def build_response_headers(self, method: str, origin: str) -> dict[str, str]:
        """Security headers, plus CORS when method and origin qualify."""
        headers = dict(SECURITY_HEADERS)
        if method in CORS_METHODS:
            headers.update(self.build_cors_headers(origin))
        return headers

    def build_cors_headers(self, origin: str) -> dict[str, str]:
        """Echo an allow-listed origin; anything else gets nothing."""
        if not origin or origin not in self._allowed:
            return {}
        return {
            "Access-Control-Allow-Origin": origin,
            "Vary": "Origin",
            "Access-Control-Allow-Methods": "POST, OPTIONS, GET",
            "Access-Control-Allow-Headers": "Content-Type, X-Proxy-Key",
        }

    def build_upstream_headers(self) -> dict[str, str]:
        return {"Content-Type": UPSTREAM_CONTENT_TYPE}
