from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean flag, got '{raw}'.")


def _env_bytes(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number of bytes, got '{raw}'.") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive.")
    return value


def _env_origins(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = _env(name)
    if raw is None:
        return default
    return tuple(origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    log_level: str
    sentry_dsn: str | None
    upload_rate_limit: str
    upload_rate_limit_enabled: bool
    cors_origins: tuple[str, ...]
    cv_db_path: str
    max_upload_bytes: int
    rubric_path: str | None


settings = Settings(
    api_key=_env("API_KEY"),
    log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    sentry_dsn=_env("SENTRY_DSN"),
    # Analysis persists a record per call, so uploads are throttled per caller.
    upload_rate_limit=_env("UPLOAD_RATE_LIMIT") or "30/minute",
    upload_rate_limit_enabled=_env_flag("UPLOAD_RATE_LIMIT_ENABLED", True),
    cors_origins=_env_origins("CORS_ORIGINS", ("http://localhost:3000",)),
    cv_db_path=_env("CV_DB_PATH") or "data/cvs.db",
    max_upload_bytes=_env_bytes("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    rubric_path=_env("RUBRIC_PATH"),
)
