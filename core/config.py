"""Runtime configuration accessors.

All settings come from environment variables so the CLI, the API and the
tests can share one source of truth without a settings file.
"""
from __future__ import annotations

import os

from core.utils.http import RetryPolicy

DEFAULT_DATABASE_URL = "sqlite:///sffvektor.db"
DEFAULT_MOLY_BASE_URL = "https://moly.hu"
DEFAULT_MAX_CONCURRENCY = 5
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRIES = 5
DEFAULT_RETRY_DELAY_MS = 100
DEFAULT_ERROR_POLICY = "fail_fast"
DEFAULT_LOG_LEVEL = "INFO"


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None and val.strip() != "" else default


def _int_env(name: str, default: int) -> int:
    raw = _raw_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = _raw_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def database_url() -> str:
    return _raw_env("DATABASE_URL", DEFAULT_DATABASE_URL)  # type: ignore[return-value]


def moly_base_url() -> str:
    return _raw_env("MOLY_BASE_URL", DEFAULT_MOLY_BASE_URL).rstrip("/")  # type: ignore[union-attr]


def max_concurrency() -> int:
    return max(1, _int_env("MOLY_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY))


def http_timeout() -> float:
    return _float_env("MOLY_TIMEOUT", DEFAULT_TIMEOUT)


def retry_policy() -> RetryPolicy:
    """Retry settings for every request sent to the external site."""
    retries = _int_env("MOLY_RETRIES", DEFAULT_RETRIES)
    return RetryPolicy(
        retries=retries,
        no_response_retries=retries,
        delay=_int_env("MOLY_RETRY_DELAY_MS", DEFAULT_RETRY_DELAY_MS) / 1000,
    )


def error_policy_name() -> str:
    return _raw_env("SYNC_ERROR_POLICY", DEFAULT_ERROR_POLICY).lower()  # type: ignore[union-attr]


def log_level_name() -> str:
    return _raw_env("SFFVEKTOR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


__all__ = [
    "database_url",
    "moly_base_url",
    "max_concurrency",
    "http_timeout",
    "retry_policy",
    "error_policy_name",
    "log_level_name",
]
