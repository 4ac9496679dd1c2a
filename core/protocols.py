"""Shared protocol definitions."""

from typing import Any, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_incoming(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: bytes,
    ) -> None: ...
    def log_relay(
        self,
        status: int,
        request_bytes: int,
        response_bytes: int,
        *,
        elapsed: float,
    ) -> None: ...
    def log_rejection(self, method: str, status: int, message: str, **extra: Any) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
