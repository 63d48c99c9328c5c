from __future__ import annotations

from contextvars import ContextVar, Token
import logging
import os

logger = logging.getLogger(__name__)

_VERBOSE_LOGGING: ContextVar[bool] = ContextVar(
    "appcache_verbose_logging", default=False
)

BUILD_JOBS_ENV = "APPCACHE_BUILD_JOBS"
_DEFAULT_BUILD_JOBS = 1
_MAX_BUILD_JOBS = 64


def get_verbose_logging() -> bool:
    return _VERBOSE_LOGGING.get()


def set_verbose_logging(enabled: bool) -> Token[bool]:
    return _VERBOSE_LOGGING.set(bool(enabled))


def reset_verbose_logging(token: Token[bool]) -> None:
    _VERBOSE_LOGGING.reset(token)


def get_build_jobs() -> int:
    """Worker count from $APPCACHE_BUILD_JOBS, clamped to 1..64; 1 when unset."""
    raw = os.environ.get(BUILD_JOBS_ENV, "").strip()
    if not raw:
        return _DEFAULT_BUILD_JOBS
    if not raw.isdecimal() or int(raw) == 0:
        logger.warning(
            "ignoring %s=%r, expected a positive integer", BUILD_JOBS_ENV, raw
        )
        return _DEFAULT_BUILD_JOBS
    return min(int(raw), _MAX_BUILD_JOBS)
