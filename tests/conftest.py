"""Shared fixtures: configs, a recording logger, and a fake upstream."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, preset

UPSTREAM_URL = "https://script.example.com/macros/s/abc/exec"
ALLOWED_ORIGIN = "https://app.example.com"


class RecordingLogger:
    """RequestLogger that keeps every call in memory."""

    def __init__(self):
        self.incoming: list[tuple[str, str, bytes]] = []
        self.relayed: list[int] = []
        self.rejections: list[tuple[str, int, str]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_incoming(self, method: str, path: str, headers: dict[str, str], body: bytes) -> None:
        self.incoming.append((method, path, body))

    def log_relay(self, status: int, request_bytes: int, response_bytes: int, *, elapsed: float) -> None:
        self.relayed.append(status)

    def log_rejection(self, method: str, status: int, message: str, **extra: Any) -> None:
        self.rejections.append((method, status, message))

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


@pytest.fixture(autouse=True)
def _no_ambient_key(monkeypatch):
    monkeypatch.delenv("GAS_PROXY_KEY", raising=False)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_config() -> Callable[..., Config]:
    def _make(variant: str = "hardened", **security: Any) -> Config:
        overrides = {"security": {"allowed_origins": [ALLOWED_ORIGIN], **security}}
        return preset(variant, upstream={"url": UPSTREAM_URL}, **overrides)

    return _make


@pytest.fixture
def upstream_calls() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(logger, upstream_calls):
    """Build a TestClient whose upstream is answered by ``handler``."""
    clients = []

    def _make(config: Config, handler: Callable[[httpx.Request], httpx.Response] | None = None):
        def record(request: httpx.Request) -> httpx.Response:
            upstream_calls.append(request)
            if handler is None:
                return httpx.Response(200, json={"success": True})
            return handler(request)

        app = create_app(config, logger, transport=httpx.MockTransport(record))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
