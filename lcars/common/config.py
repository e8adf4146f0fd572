"""Load and validate LCARS Console configuration from config.yaml."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("lcars")

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml"

DEFAULTS: dict[str, Any] = {
    "default_city": "New York",
    "log_dir": "logs",
    "log_level": "INFO",
    "message_limit": 1000,
    "chat": {
        "provider": "anthropic",
        "model": "claude-3-5-sonnet-20241022",
        "max_tokens": 1024,
        "temperature": 0.3,
        "system_prompt": (
            "You are a helpful AI assistant in a Star Trek LCARS interface. "
            "Be concise and helpful. Use a professional but friendly tone."
        ),
    },
    "rate_limits": {
        "chat": {"max_calls": 5, "time_window": 60},
        "voice": {"max_calls": 30, "time_window": 60},
    },
    "timeouts": {"http": 10},
}


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from YAML file, with env-var overrides.

    Keys missing from the file fall back to ``DEFAULTS``.

    Environment variable overrides (if set):
        LCARS_DEFAULT_CITY   -> default_city
        LCARS_LOG_DIR        -> log_dir
        LCARS_LOG_LEVEL      -> log_level
        LCARS_CHAT_PROVIDER  -> chat.provider
        LCARS_CHAT_MODEL     -> chat.model
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    cfg = _merge(DEFAULTS, raw)

    # Apply env-var overrides
    _env_override(cfg, "LCARS_DEFAULT_CITY", "default_city")
    _env_override(cfg, "LCARS_LOG_DIR", "log_dir")
    _env_override(cfg, "LCARS_LOG_LEVEL", "log_level")
    _env_override(cfg, "LCARS_CHAT_PROVIDER", "chat", "provider")
    _env_override(cfg, "LCARS_CHAT_MODEL", "chat", "model")

    _validate(cfg)
    return cfg


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay ``override`` onto a copy of ``base``."""
    out: dict[str, Any] = {}
    for key, value in base.items():
        out[key] = _merge(value, {}) if isinstance(value, dict) else value
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        elif value is not None:
            out[key] = value
    return out


def _env_override(cfg: dict, env_key: str, *keys: str) -> None:
    """Override a nested config value from an environment variable."""
    val = os.environ.get(env_key)
    if val is None:
        return
    target = cfg
    for k in keys[:-1]:
        target = target.setdefault(k, {})
    target[keys[-1]] = val


def _validate(cfg: dict[str, Any]) -> None:
    """Reject values the rest of the app cannot work with."""
    limit = cfg.get("message_limit")
    if not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"message_limit must be a positive integer, got {limit!r}")

    for name, preset in cfg["rate_limits"].items():
        if int(preset.get("max_calls", 0)) <= 0 or float(preset.get("time_window", 0)) <= 0:
            raise ValueError(f"Invalid rate limit preset '{name}': {preset}")

    if not str(cfg.get("default_city", "")).strip():
        logger.warning("default_city is empty -- falling back to New York")
        cfg["default_city"] = "New York"


def setup_logging(cfg: dict[str, Any]) -> None:
    """Configure root logging: stderr + rotating file."""
    log_dir = Path(cfg["log_dir"])
    log_dir.mkdir(parents=True, exist_ok=True)

    from logging.handlers import RotatingFileHandler

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root = logging.getLogger("lcars")
    root.setLevel(getattr(logging, str(cfg.get("log_level", "INFO")).upper(), logging.INFO))

    if root.handlers:
        return

    # stderr
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    root.addHandler(sh)

    # rotating file
    fh = RotatingFileHandler(log_dir / "lcars.log", maxBytes=5_000_000, backupCount=3)
    fh.setFormatter(fmt)
    root.addHandler(fh)
