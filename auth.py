"""Shared-secret authentication for relay callers via X-Proxy-Key."""

import hmac
import os

from rich.console import Console

from core.config import Config, load_config

console = Console()


def resolve_proxy_key(config: Config) -> str | None:
    """Return the configured shared secret, or None when the check is disabled.

    ``security.proxy_key`` wins; otherwise the environment variable named by
    ``security.proxy_key_env`` is consulted.
    """
    key = config.security.proxy_key
    if not key and config.security.proxy_key_env:
        key = os.environ.get(config.security.proxy_key_env, "")
    return key or None


def verify_proxy_key(expected: str, supplied: str | None) -> bool:
    """Constant-time comparison of the caller's key against the secret."""
    if not supplied:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def check_auth(config: Config) -> bool:
    """Print whether callers must present a key. Returns True when one is configured."""
    key = resolve_proxy_key(config)
    if key:
        source = "config" if config.security.proxy_key else f"${config.security.proxy_key_env}"
        console.print(f"[green]X-Proxy-Key required[/green] (from {source})")
        return True
    console.print("[yellow]X-Proxy-Key check disabled[/yellow]")
    console.print(
        f"\n[dim]Set security.proxy_key or export {config.security.proxy_key_env} to enable it.[/dim]"
    )
    return False


def main():
    """CLI entry point for auth check."""
    check_auth(load_config())


if __name__ == "__main__":
    main()
