"""Real-time CLI dashboard for relay monitoring."""

from datetime import datetime
from threading import Lock
from typing import Any

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_incoming_log

console = Console()


class RelayEvent:
    """Info about a single handled request."""

    def __init__(self, method: str, status: int, summary: str, timestamp: datetime):
        self.method = method
        self.status = status
        self.summary = summary[:60] + "..." if len(summary) > 60 else summary
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing relayed and rejected requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._events: list[RelayEvent] = []
        self._max_events = 8
        self._counts = {"relayed": 0, "rejected": 0, "failed": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_incoming(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: bytes,
    ) -> None:
        """Persist the request when per-request logging is enabled."""
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
        """Log a request that reached the upstream and got a reply."""
        with self._lock:
            self._counts["relayed"] += 1
            summary = f"{request_bytes} B -> {response_bytes} B in {elapsed:.2f}s"
            self._push(RelayEvent("POST", status, summary, datetime.now()))
            write_cli_log(
                "RELAY",
                summary,
                log_root=self.config.log_root,
                status=status,
            )

    def log_rejection(self, method: str, status: int, message: str, **extra: Any) -> None:
        """Log a request refused by an admission check."""
        with self._lock:
            self._counts["rejected"] += 1
            self._push(RelayEvent(method, status, message, datetime.now()))
            write_cli_log(
                "REJECT",
                message,
                log_root=self.config.log_root,
                method=method,
                status=status,
                **extra,
            )

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._counts["failed"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log(
                "ERROR",
                message[:200],
                log_root=self.config.log_root,
                route=route,
                status=status,
            )

    def _push(self, event: RelayEvent) -> None:
        self._events.insert(0, event)
        self._events = self._events[: self._max_events]
        self._refresh()

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=4),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_events_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("GAS Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Relayed: {self._counts['relayed']}", style="green")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._counts['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Failed: {self._counts['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_events_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._events:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=8)
            table.add_column("Status", width=6)
            table.add_column("Detail", ratio=1)

            for event in self._events:
                style = "green" if event.status < 400 else "yellow"
                table.add_row(
                    event.timestamp.strftime("%H:%M:%S"),
                    event.method,
                    Text(str(event.status), style=style),
                    event.summary,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            upstream = self.config.upstream.url or "(not configured)"
            content = Text(f"Relaying to {upstream}", style="dim")

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
