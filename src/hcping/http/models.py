# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response models shared by HttpClient implementations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import MAX_RETRIES, PingSettings
from ..errors import categorize_exception

Headers = dict[str, str]


@dataclass(frozen=True)
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | str | None = None
    timeout: float | None = None


@dataclass
class HttpResponse:
    """Normalized HTTP response; `ok` is True only for 2xx statuses."""

    ok: bool
    status_code: int | None = None
    text: str = ""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_transport_failure(self) -> bool:
        return not self.ok and self.status_code is None

    @classmethod
    def from_status(cls, status_code: int, *, text: str = "", url: str | None = None) -> HttpResponse:
        ok = 200 <= status_code < 300
        return cls(
            ok=ok,
            status_code=status_code,
            text=text,
            url=url,
            error_message=None if ok else f"HTTP {status_code}",
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> HttpResponse:
        """Collapse a transport exception into a failed response without a status code."""
        return cls(
            ok=False,
            error_message=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
            meta={"failure_kind": categorize_exception(exc)},
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for ping requests derived from PingSettings."""

    max_attempts: int = MAX_RETRIES
    initial_delay: float = 0.0
    backoff_factor: float = 2.0
    max_delay: float = 1.0
    budget: float | None = None

    def __post_init__(self) -> None:
        # At least one attempt is always made.
        if self.max_attempts < 1:
            object.__setattr__(self, "max_attempts", 1)

    @classmethod
    def from_settings(cls, settings: PingSettings) -> RetryConfig:
        """Build a retry config from the shared PingSettings."""
        return cls(
            max_attempts=max(1, settings.max_retries),
            initial_delay=max(0.0, settings.initial_delay),
            backoff_factor=settings.backoff_factor,
            max_delay=settings.max_delay,
            budget=settings.retry_budget,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay to sleep after the given (1-based) failed attempt."""
        if self.initial_delay <= 0:
            return 0.0
        delay = self.initial_delay * (self.backoff_factor ** max(0, attempt - 1))
        if self.max_delay > 0:
            delay = min(delay, self.max_delay)
        return delay
