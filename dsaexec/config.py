"""Configuration for dsaexec, loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dsaexec.errors import ConfigurationError

_FLAVORS = ("ce", "extra")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def _millis_to_seconds(value: str) -> float:
    return float(value) / 1000.0


@dataclass
class Config:
    judge_url: str = "http://localhost:2358"
    judge_auth_token: str = ""
    judge_host: str = ""  # set for RapidAPI-hosted judges
    judge_flavor: str = "ce"  # "ce" or "extra"
    request_timeout: float = 10.0  # seconds, per HTTP call
    cpu_time_limit: float = 2
    wall_time_limit: float = 5
    memory_limit_kb: int = 128000
    poll_interval: float = 1.0
    max_poll_attempts: int = 10
    batch_poll_interval: float = 1.5
    batch_max_poll_attempts: int = 20
    quick_run_limit: int = 2
    use_batch: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides) -> Config:
        env_map: dict[str, tuple[str, object]] = {
            "JUDGE0_API_URL": ("judge_url", str),
            "JUDGE0_AUTH_TOKEN": ("judge_auth_token", str),
            "JUDGE0_HOST": ("judge_host", str),
            "JUDGE0_FLAVOR": ("judge_flavor", str),
            "JUDGE0_TIMEOUT": ("request_timeout", _millis_to_seconds),
            "DSAEXEC_CPU_TIME_LIMIT": ("cpu_time_limit", float),
            "DSAEXEC_WALL_TIME_LIMIT": ("wall_time_limit", float),
            "DSAEXEC_MEMORY_LIMIT_KB": ("memory_limit_kb", int),
            "DSAEXEC_POLL_INTERVAL": ("poll_interval", float),
            "DSAEXEC_MAX_POLLS": ("max_poll_attempts", int),
            "DSAEXEC_BATCH_POLL_INTERVAL": ("batch_poll_interval", float),
            "DSAEXEC_BATCH_MAX_POLLS": ("batch_max_poll_attempts", int),
            "DSAEXEC_QUICK_RUN_LIMIT": ("quick_run_limit", int),
            "DSAEXEC_USE_BATCH": ("use_batch", _parse_bool),
            "DSAEXEC_LOG_LEVEL": ("log_level", str),
        }
        kwargs: dict = {}
        for env_var, (field_name, conv) in env_map.items():
            val = os.environ.get(env_var)
            if val is None or val == "":
                continue
            try:
                kwargs[field_name] = conv(val)  # type: ignore[operator]
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {env_var}: {val!r}", details={"variable": env_var}
                ) from e
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)

    def validate(self) -> Config:
        """Check the configuration once at process start; returns self."""
        if not self.judge_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"JUDGE0_API_URL must be an http(s) URL, got {self.judge_url!r}")
        if self.judge_flavor not in _FLAVORS:
            raise ConfigurationError(
                f"JUDGE0_FLAVOR must be one of {', '.join(_FLAVORS)}, got {self.judge_flavor!r}"
            )
        for name in ("request_timeout", "cpu_time_limit", "wall_time_limit"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        for name in ("memory_limit_kb", "max_poll_attempts", "batch_max_poll_attempts", "quick_run_limit"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be at least 1")
        if self.poll_interval < 0 or self.batch_poll_interval < 0:
            raise ConfigurationError("poll intervals must not be negative")
        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL,
        ):
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")
        return self

    def judge_headers(self) -> dict[str, str]:
        """Auth headers for the judge: RapidAPI style when a host is configured."""
        headers = {"Content-Type": "application/json"}
        if self.judge_host:
            if self.judge_auth_token:
                headers["X-RapidAPI-Key"] = self.judge_auth_token
            headers["X-RapidAPI-Host"] = self.judge_host
        elif self.judge_auth_token:
            headers["X-Auth-Token"] = self.judge_auth_token
        return headers
