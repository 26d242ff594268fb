"""
Configuration for sysmon.

Every setting can be overridden through an environment variable; malformed
values fall back to the default.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from sysmon.cache import PROCESSES_TTL, USAGE_TTL
from sysmon.refresher import REFRESH_INTERVAL

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
CPU_SAMPLE_INTERVAL = 1.0  # seconds between the two tick snapshots

# Names understood by both logging and uvicorn
LOG_LEVELS = frozenset(
    logging.getLevelName(level)
    for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL)
)


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except ValueError:
        return default


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(env.get(key, default))
    except ValueError:
        return default


def _env_log_level(env: Mapping[str, str], key: str, default: str) -> str:
    level = env.get(key, default).upper()
    if level not in LOG_LEVELS:
        return default
    return level


@dataclass(slots=True, frozen=True)
class Settings:
    """Runtime settings."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    environment: str = "production"
    log_level: str = "INFO"
    usage_ttl: float = USAGE_TTL
    processes_ttl: float = PROCESSES_TTL
    refresh_interval: float = REFRESH_INTERVAL
    cpu_sample_interval: float = CPU_SAMPLE_INTERVAL

    @property
    def is_development(self) -> bool:
        """Error details are only exposed in development."""
        return self.environment.lower() == "development"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables."""
        if env is None:
            env = os.environ
        return cls(
            host=env.get("SYSMON_HOST", DEFAULT_HOST),
            port=_env_int(env, "PORT", DEFAULT_PORT),
            environment=env.get("SYSMON_ENV", "production"),
            log_level=_env_log_level(env, "SYSMON_LOG_LEVEL", "INFO"),
            usage_ttl=_env_float(env, "SYSMON_USAGE_TTL", USAGE_TTL),
            processes_ttl=_env_float(env, "SYSMON_PROCESSES_TTL", PROCESSES_TTL),
            refresh_interval=_env_float(env, "SYSMON_REFRESH_INTERVAL", REFRESH_INTERVAL),
            cpu_sample_interval=_env_float(env, "SYSMON_CPU_INTERVAL", CPU_SAMPLE_INTERVAL),
        )
