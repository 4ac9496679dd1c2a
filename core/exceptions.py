"""Custom exception hierarchy for the relay."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class RelayError(ProxyError):
    """A terminal, caller-visible failure of one relayed request.

    Attributes:
        message: Text placed in the ``error`` field of the JSON envelope
        status_code: HTTP status returned to the caller
    """

    status_code: int = 500
    message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def envelope(self) -> dict[str, object]:
        return {"success": False, "error": self.message}


class MethodNotAllowed(RelayError):
    status_code = 405
    message = "Method not allowed"


class Forbidden(RelayError):
    """Origin or Referer is not on the allow-list."""

    status_code = 403
    message = "Forbidden"


class Unauthorized(RelayError):
    """X-Proxy-Key missing or wrong."""

    status_code = 401
    message = "Unauthorized"


class PayloadTooLarge(RelayError):
    status_code = 413
    message = "Payload too large"


class EmptyBody(RelayError):
    status_code = 400
    message = "Empty body"


class UpstreamTransportFailure(RelayError):
    """Raised when the upstream call fails before a response arrives.

    ``detail`` holds the transport error text for server-side logs; it is
    never part of the envelope.
    """

    status_code = 502
    message = "Upstream request failed"

    def __init__(self, detail: str = "") -> None:
        super().__init__()
        self.detail = detail
