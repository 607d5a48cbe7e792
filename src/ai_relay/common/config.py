"""Process-wide settings.

Values come from an optional YAML file (``AI_RELAY_CONFIG``), then the
environment (a ``.env`` file in the working directory is loaded first).
Environment variables win over the file.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from ai_relay.common.errors import ConfigError

DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024

@dataclass(frozen=True)
class Settings:
    provider: str = "gemini"
    gemini_api_key: str | None = None
    text_model: str = "gemini-1.5-flash"
    vision_model: str = "gemini-1.5-flash-001"
    openai_base_url: str = "http://localhost:8001"
    openai_api_key: str = "not-required"
    upstream_timeout: float = 120.0
    host: str = "0.0.0.0"
    port: int = 3000
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    log_level: str = "INFO"

# settings field -> environment variable
ENV_VARS = {
    "provider": "AI_RELAY_PROVIDER",
    "gemini_api_key": "GEMINI_API_KEY",
    "text_model": "TEXT_MODEL_NAME",
    "vision_model": "VISION_MODEL_NAME",
    "openai_base_url": "OPENAI_BASE_URL",
    "openai_api_key": "OPENAI_API_KEY",
    "upstream_timeout": "UPSTREAM_TIMEOUT",
    "host": "HOST",
    "port": "PORT",
    "max_body_bytes": "MAX_BODY_BYTES",
    "log_level": "LOG_LEVEL",
}

_CASTS = {
    "upstream_timeout": float,
    "port": int,
    "max_body_bytes": int,
}

def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data

def load_settings(environ: Mapping[str, str] | None = None, dotenv: bool = True) -> Settings:
    """
    Build settings from the YAML file and environment.

    Args:
        environ: Environment mapping; defaults to ``os.environ``.
        dotenv: Load ``.env`` into the process environment first.

    Raises:
        ConfigError: If the file is malformed or a value has the wrong type.
    """
    if dotenv:
        load_dotenv()
    env = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    cfg_path = env.get("AI_RELAY_CONFIG")
    if cfg_path:
        for key, value in load_cfg(cfg_path).items():
            if key not in ENV_VARS:
                raise ConfigError(f"Unknown config key: {key}")
            values[key] = value

    for key, var in ENV_VARS.items():
        if env.get(var):
            values[key] = env[var]

    for key, cast in _CASTS.items():
        if key in values:
            try:
                values[key] = cast(values[key])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for {ENV_VARS[key]}: {values[key]!r}") from e

    values["provider"] = str(values.get("provider", Settings.provider)).lower()
    return Settings(**values)
