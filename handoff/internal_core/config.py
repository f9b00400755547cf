from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _package_root() -> Path:
    # handoff/internal_core/config.py -> handoff
    return Path(__file__).resolve().parents[1]


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_opt_timeout(name: str, default: float) -> Optional[float]:
    # Zero or negative disables the timeout.
    value = _getenv_float(name, default)
    return value if value > 0 else None


@dataclass(frozen=True)
class HandoffConfig:
    HANDOFF_PARSE_WORKER_ENABLED: bool
    HANDOFF_PARSE_TIMEOUT_SECONDS: Optional[float]
    HANDOFF_PARSE_CACHE_SIZE: int
    HANDOFF_PARSE_CACHE_TTL_SECONDS: float
    HANDOFF_TEMPLATE_DIR: str
    HANDOFF_DATE_FORMAT: str
    HANDOFF_TIME_FORMAT: str
    HANDOFF_LOG_LEVEL: str

    def template_dir_path(self) -> Path:
        return Path(self.HANDOFF_TEMPLATE_DIR).expanduser().resolve()


def load_config() -> HandoffConfig:
    default_template_dir = str(_package_root() / "note" / "templates")

    return HandoffConfig(
        HANDOFF_PARSE_WORKER_ENABLED=_getenv_bool("HANDOFF_PARSE_WORKER_ENABLED", True),
        HANDOFF_PARSE_TIMEOUT_SECONDS=_getenv_opt_timeout("HANDOFF_PARSE_TIMEOUT_SECONDS", 10.0),
        HANDOFF_PARSE_CACHE_SIZE=_getenv_int("HANDOFF_PARSE_CACHE_SIZE", 50),
        HANDOFF_PARSE_CACHE_TTL_SECONDS=_getenv_float("HANDOFF_PARSE_CACHE_TTL_SECONDS", 300.0),
        HANDOFF_TEMPLATE_DIR=_getenv_str("HANDOFF_TEMPLATE_DIR", default_template_dir),
        HANDOFF_DATE_FORMAT=_getenv_str("HANDOFF_DATE_FORMAT", "%x"),
        HANDOFF_TIME_FORMAT=_getenv_str("HANDOFF_TIME_FORMAT", "%H:%M"),
        HANDOFF_LOG_LEVEL=_getenv_str("HANDOFF_LOG_LEVEL", "INFO"),
    )
