"""Configuration models and loading."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_DIR = Path.home() / ".config" / "gas-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV = "GAS_PROXY_CONFIG"

MAX_BODY_BYTES = 25 * 1024 * 1024  # 25MB, base64 PDFs go through here


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    path: str = "/"

    @field_validator("path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"


class UpstreamSettings(BaseModel):
    url: str = ""
    follow_redirects: bool = True
    max_redirects: int = Field(default=3, ge=0)
    connect_timeout: float | None = 10.0  # None: only the total budget applies
    total_timeout: float = Field(default=30.0, gt=0)

    @field_validator("connect_timeout")
    @classmethod
    def _positive_or_none(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("connect_timeout must be positive")
        return value

    @field_validator("url")
    @classmethod
    def _https_only(cls, value: str) -> str:
        value = value.strip()
        if value and not value.lower().startswith("https://"):
            raise ValueError("upstream url must use https")
        return value


class SecuritySettings(BaseModel):
    allowed_origins: list[str] = Field(default_factory=list)
    enforce_origin_check: bool = True
    proxy_key: str = ""
    proxy_key_env: str = "GAS_PROXY_KEY"
    max_body_bytes: int = Field(default=MAX_BODY_BYTES, gt=0)

    @field_validator("allowed_origins")
    @classmethod
    def _clean_origins(cls, value: list[str]) -> list[str]:
        return [origin.strip() for origin in value if origin.strip()]


class LogSettings(BaseModel):
    dir: str = "logs"
    log_requests: bool = False


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    logging: LogSettings = Field(default_factory=LogSettings)

    @property
    def log_root(self) -> Path:
        return Path(self.logging.dir)


def preset(name: Literal["hardened", "simple"], **overrides) -> Config:
    """Build a config matching one of the two historical relay scripts.

    ``hardened`` checks Origin/Referer, follows up to 3 HTTPS redirects and
    uses a 10s connect / 30s total budget. ``simple`` skips the origin check,
    never follows redirects and only has the 30s total budget.
    """
    if name == "hardened":
        upstream = UpstreamSettings(follow_redirects=True, connect_timeout=10.0)
        security = SecuritySettings(enforce_origin_check=True)
    elif name == "simple":
        upstream = UpstreamSettings(follow_redirects=False, connect_timeout=None)
        security = SecuritySettings(enforce_origin_check=False)
    else:
        raise ValueError(f"Unknown preset: {name}")

    data = Config(upstream=upstream, security=security).model_dump()
    for section, values in overrides.items():
        data[section].update(values)
    return Config.model_validate(data)


def config_path() -> Path:
    """Return the config file location, honouring GAS_PROXY_CONFIG."""
    override = os.environ.get(CONFIG_ENV)
    return Path(override).expanduser() if override else CONFIG_FILE


def load_config(path: Path | None = None) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    path = path or config_path()
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        path.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(path.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = path.with_suffix(".json.bak")
        path.rename(backup)
        default = Config()
        path.write_text(default.model_dump_json(indent=2))
        return default
