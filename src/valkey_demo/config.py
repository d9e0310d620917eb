from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    log_dir: str | None = Field(
        default=None,
        description="Optional directory for a rolling log file; stream logging only if omitted.",
    )
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class Settings(BaseModel):
    """Process configuration, snapshotted once from the environment at startup.

    The Valkey values are kept as raw strings: validating them is the credential
    resolver's job, so that a bad value fails a request instead of the process.
    """

    vcap_services: str | None = Field(
        default=None,
        description="Platform service-binding payload (JSON). Presence selects platform mode.",
    )
    valkey_host: str | None = None
    valkey_port: str | None = None
    valkey_username: str | None = None
    valkey_password: str | None = None

    port: int = Field(default=9090, ge=1, le=65535, description="HTTP listen port.")
    bind_host: str = Field(default="0.0.0.0")
    home: str | None = None
    app_dir: str | None = Field(
        default=None,
        description="Base directory for static assets; overrides HOME and /app.",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def platform_managed(self) -> bool:
        return bool(self.vcap_services)


_ENV_FIELDS: dict[str, str] = {
    "VCAP_SERVICES": "vcap_services",
    "VALKEY_HOST": "valkey_host",
    "VALKEY_PORT": "valkey_port",
    "VALKEY_USERNAME": "valkey_username",
    "VALKEY_PASSWORD": "valkey_password",
    "PORT": "port",
    "BIND_HOST": "bind_host",
    "HOME": "home",
    "APP_DIR": "app_dir",
}

_LOGGING_ENV_FIELDS: dict[str, str] = {
    "LOG_LEVEL": "level",
    "LOG_DIR": "log_dir",
    "LOG_MAX_SIZE_MB": "max_size_mb",
    "LOG_BACKUP_COUNT": "backup_count",
}


def _pick(env: Mapping[str, str], fields: Mapping[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for env_name, field_name in fields.items():
        raw = env.get(env_name)
        # Empty means unset, matching how the platform clears variables.
        if raw is None or raw == "":
            continue
        out[field_name] = raw
    return out


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the process environment (or an explicit mapping).

    - Unset and empty variables fall back to defaults.
    - Validation is performed by Pydantic.
    """

    env = os.environ if environ is None else environ

    raw = _pick(env, _ENV_FIELDS)
    logging_raw = _pick(env, _LOGGING_ENV_FIELDS)
    if logging_raw:
        raw["logging"] = logging_raw
    return Settings.model_validate(raw)
