"""Plain console logger for running without the live dashboard."""

from typing import Any

from rich.console import Console

from core.config import Config
from ui.log_utils import write_cli_log, write_incoming_log

console = Console()


class ConsoleLogger:
    """Print one line per event and mirror it to the CLI log file."""

    def __init__(self, config: Config, out: Console | None = None):
        self.config = config
        self._console = out or console

    def log_incoming(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: bytes,
    ) -> None:
        if self.config.logging.log_requests:
            write_incoming_log(method, path, headers, body, log_root=self.config.log_root)

    def log_relay(
        self,
        status: int,
        request_bytes: int,
        response_bytes: int,
        *,
        elapsed: float,
    ) -> None:
        summary = f"{request_bytes} B -> {response_bytes} B in {elapsed:.2f}s"
        self._console.print(f"[green]RELAY[/green] {status} {summary}")
        write_cli_log("RELAY", summary, log_root=self.config.log_root, status=status)

    def log_rejection(self, method: str, status: int, message: str, **extra: Any) -> None:
        self._console.print(f"[yellow]REJECT[/yellow] {method} {status} {message}")
        write_cli_log(
            "REJECT",
            message,
            log_root=self.config.log_root,
            method=method,
            status=status,
            **extra,
        )

    def log_error(self, route: str, status: int, message: str) -> None:
        self._console.print(f"[red]ERROR[/red] {route} {status}: {message}")
        write_cli_log(
            "ERROR",
            message[:200],
            log_root=self.config.log_root,
            route=route,
            status=status,
        )
