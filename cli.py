"""CLI entry point for gas-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from auth import check_auth
from core.config import CONFIG_ENV, Config, config_path, load_config
from core.exceptions import ConfigurationError
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_NAME, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    headless = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--check":
            check_auth(config)
            console.print(f"[bold]Upstream:[/bold] {config.upstream.url or '[red](not set)[/red]'}")
            return

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {config_path()}")
            console.print(f"[bold]Log:[/bold] {config.log_root / CLI_LOG_NAME}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--headless":
            headless = True
        else:
            console.print(f"[red][ERROR][/red] Unknown option: {arg}")
            _print_help()
            sys.exit(2)

    try:
        _validate(config)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Edit {config_path()}[/dim]")
        sys.exit(1)

    clear_logs(config.log_root)
    logger = ConsoleLogger(config) if headless else Dashboard(config)

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if isinstance(logger, Dashboard):
        logger.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", log_root=config.log_root, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", log_root=config.log_root, duration=str(duration))
        if isinstance(logger, Dashboard):
            logger.stop()


def _validate(config: Config) -> None:
    """Fail fast on settings the relay cannot run without."""
    if not config.upstream.url:
        raise ConfigurationError("Upstream URL not configured (upstream.url)")
    if config.security.enforce_origin_check and not config.security.allowed_origins:
        console.print(
            "[yellow]Warning:[/yellow] origin check enabled with an empty allow-list; "
            "browser requests carrying Origin will be refused"
        )


def _print_help():
    """Print help message."""
    help_text = f"""
[bold cyan]GAS Proxy[/bold cyan]

Relays browser POSTs to a fixed Apps Script endpoint and adds CORS headers.

[bold]Usage:[/bold]
    gas-proxy              Start with live dashboard
    gas-proxy --headless   Start with plain console logging
    gas-proxy --check      Show X-Proxy-Key and upstream status
    gas-proxy --config     Show config locations
    gas-proxy --help       Show this help

[bold]Configuration:[/bold]
    JSON file at {config_path()} (override with ${CONFIG_ENV}).
    Shared secret from security.proxy_key or $GAS_PROXY_KEY.
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
