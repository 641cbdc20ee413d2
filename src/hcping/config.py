# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for hcping."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"hcping/{__version__}"
DEFAULT_PING_URL = "https://hc-ping.com"
# Sourced from the healthchecks.io analysis of which cURL options improve
# ping reliability the most (--retry 20 over a lossy link).
MAX_RETRIES = 20


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


@dataclass
class PingSettings:
    """Ping client defaults."""

    ping_url: str = DEFAULT_PING_URL
    timeout: float = 5.0
    max_retries: int = MAX_RETRIES
    initial_delay: float = 0.0
    backoff_factor: float = 2.0
    max_delay: float = 1.0
    retry_budget: float | None = None
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "PingSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            ping_url=os.getenv("HCPING_PING_URL", cls.ping_url),
            timeout=_float_env("HCPING_HTTP_TIMEOUT", cls.timeout),
            max_retries=_int_env("HCPING_MAX_RETRIES", cls.max_retries),
            initial_delay=_float_env("HCPING_RETRY_INITIAL_DELAY", cls.initial_delay),
            backoff_factor=_float_env("HCPING_RETRY_BACKOFF", cls.backoff_factor),
            max_delay=_float_env("HCPING_RETRY_MAX_DELAY", cls.max_delay),
            retry_budget=_optional_float_env("HCPING_RETRY_BUDGET", cls.retry_budget),
            user_agent=os.getenv("HCPING_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("HCPING_HTTP_VERIFY_SSL", cls.verify_ssl),
        )


def load_ping_settings() -> PingSettings:
    """Load ping settings from environment with sensible defaults."""
    return PingSettings.from_env()
