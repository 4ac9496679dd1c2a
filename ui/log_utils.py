"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_NAME = "proxy.log"
BODY_PREVIEW_CHARS = 200
REDACTED = "***"


def describe_body(body: bytes) -> tuple[int, str]:
    """Return (size, short single-line preview) of a relayed body."""
    text = body[: BODY_PREVIEW_CHARS * 4].decode("utf-8", errors="replace")
    preview = text.replace("\n", " ").strip()
    if len(preview) > BODY_PREVIEW_CHARS:
        preview = preview[:BODY_PREVIEW_CHARS] + "..."
    return len(body), preview


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    body: bytes,
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single incoming request log entry."""
    size, preview = describe_body(body)
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": _redact_headers(headers),
        "body_bytes": size,
        "body_preview": preview,
    }
    return _write_json(log_root / "incoming", payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_root: Path = LOG_ROOT,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_root / CLI_LOG_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> int:
    """Remove per-request JSON logs from a previous run."""
    incoming = log_root / "incoming"
    if not incoming.exists():
        return 0

    deleted = 0
    for old_file in incoming.glob("*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if "key" in key.lower() or "authorization" in key.lower() or key.lower() == "cookie":
            redacted[key] = REDACTED
        else:
            redacted[key] = value
    return redacted


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
