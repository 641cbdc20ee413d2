# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Reporting to the healthchecks.io ping API.

A PingReporter is bound to one check UUID and turns lifecycle events (timer start,
success, failure, failure with logs) into requests against the ping endpoint:

    GET  {base}/{check}          success
    GET  {base}/{check}/start    start timer
    GET  {base}/{check}/fail     failure
    POST {base}/{check}/fail     failure, request body carries the logs

Each report is retried until the service acknowledges it or the attempt ceiling is hit,
and the result is collapsed to a boolean. Reporting never raises on network or service
failures so a monitored job cannot be brought down by its own monitoring.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from .config import DEFAULT_PING_URL, DEFAULT_USER_AGENT, PingSettings, load_ping_settings
from .errors import EmptyBaseUrl, EmptyUserAgent, FailureKind, InvalidIdentifier, categorize_response
from .http.client import HttpClient, create_default_http_client
from .http.models import HttpRequest, HttpResponse, RetryConfig
from .http.retry import send_with_retries

logger = logging.getLogger(__name__)

RunId = uuid.UUID | str


class PingEvent(str, Enum):
    START = "start"
    SUCCESS = "success"
    FAIL = "fail"
    FAIL_WITH_LOGS = "fail_with_logs"


# event -> (HTTP method, path suffix)
_ROUTES: dict[PingEvent, tuple[str, str]] = {
    PingEvent.START: ("GET", "/start"),
    PingEvent.SUCCESS: ("GET", ""),
    PingEvent.FAIL: ("GET", "/fail"),
    PingEvent.FAIL_WITH_LOGS: ("POST", "/fail"),
}


_HYPHENATED = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
_CHECK_ID_RE = re.compile(
    rf"{_HYPHENATED}|[0-9a-fA-F]{{32}}|\{{{_HYPHENATED}\}}|urn:uuid:{_HYPHENATED}",
    re.IGNORECASE,
)


def new_run_id() -> uuid.UUID:
    """Mint a run ID used to pair a start ping with its success/failure ping."""
    return uuid.uuid4()


def parse_check_id(value: Any) -> str:
    """
    Validate a check UUID and return its canonical hyphenated form.

    Accepted forms: hyphenated 8-4-4-4-12, 32 hex digits, `{hyphenated}` and
    `urn:uuid:hyphenated`. `uuid.UUID` alone strips stray hyphens and braces, so the
    layout is checked first.
    """
    if isinstance(value, uuid.UUID):
        return str(value)
    text = value if isinstance(value, str) else str(value)
    if not _CHECK_ID_RE.fullmatch(text):
        raise InvalidIdentifier(text)
    try:
        return str(uuid.UUID(text))
    except ValueError as exc:
        raise InvalidIdentifier(text) from exc


@dataclass(frozen=True)
class PingOutcome:
    """What happened to one report; truthy when the service acknowledged it."""

    event: PingEvent
    succeeded: bool
    attempts: int
    status_code: int | None = None
    failure: FailureKind = FailureKind.NONE
    error_message: str | None = None

    def __bool__(self) -> bool:
        return self.succeeded

    @classmethod
    def from_response(cls, event: PingEvent, response: HttpResponse) -> PingOutcome:
        return cls(
            event=event,
            succeeded=response.ok,
            attempts=int(response.meta.get("attempts", 1)),
            status_code=response.status_code,
            failure=categorize_response(response),
            error_message=None if response.ok else response.error_message,
        )


@dataclass(frozen=True)
class BasePingReporter:
    """Identity, URL building and request shaping shared by the sync and async reporters."""

    check_id: str
    http_client: Any = field(repr=False, compare=False)
    user_agent: str = DEFAULT_USER_AGENT
    base_url: str = DEFAULT_PING_URL
    retry_config: RetryConfig = field(default_factory=RetryConfig)
    timeout: float | None = 5.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "check_id", parse_check_id(self.check_id))
        if not self.base_url:
            raise EmptyBaseUrl()
        normalized = self.base_url.strip().rstrip("/")
        if not normalized:
            raise EmptyBaseUrl()
        object.__setattr__(self, "base_url", normalized)

    @classmethod
    def _default_client(cls, settings: PingSettings) -> Any:
        raise NotImplementedError

    @classmethod
    def create(
        cls,
        check_id: str | uuid.UUID,
        base_url: str | None = None,
        *,
        http_client: Any | None = None,
        user_agent: str | None = None,
        retry_config: RetryConfig | None = None,
        settings: PingSettings | None = None,
    ):
        """
        Build a reporter for one check.

        Raises InvalidIdentifier when `check_id` is not a UUID and EmptyBaseUrl when
        `base_url` is an empty string. Unset arguments fall back to PingSettings, which
        reads HCPING_* environment variables.
        """
        settings = settings or load_ping_settings()
        check = parse_check_id(check_id)
        url = settings.ping_url if base_url is None else base_url
        if not url:
            raise EmptyBaseUrl()
        return cls(
            check_id=check,
            http_client=http_client if http_client is not None else cls._default_client(settings),
            user_agent=settings.user_agent if user_agent is None else user_agent,
            base_url=url,
            retry_config=retry_config or RetryConfig.from_settings(settings),
            timeout=settings.timeout,
        )

    def with_user_agent(self, value: str, *, require: bool = False):
        """
        Return a copy of this reporter sending `value` as its User-Agent header.

        An empty value is sent as-is unless `require` is set, in which case EmptyUserAgent is raised.
        """
        if require and not value:
            raise EmptyUserAgent()
        return replace(self, user_agent=value)

    def url_for(self, event: PingEvent, run_id: RunId | None = None) -> str:
        _, suffix = _ROUTES[PingEvent(event)]
        url = f"{self.base_url}/{self.check_id}{suffix}"
        rid = "" if run_id is None else str(run_id)
        if rid:
            url = f"{url}?{urlencode({'rid': rid})}"
        return url

    def build_request(self, event: PingEvent, *, run_id: RunId | None = None, data: str | None = None) -> HttpRequest:
        event = PingEvent(event)
        method, _ = _ROUTES[event]
        body = (data or "") if event is PingEvent.FAIL_WITH_LOGS else None
        return HttpRequest(
            url=self.url_for(event, run_id),
            method=method,
            headers={"User-Agent": self.user_agent},
            body=body,
            timeout=self.timeout,
        )

    def _outcome(self, event: PingEvent, response: HttpResponse) -> PingOutcome:
        outcome = PingOutcome.from_response(event, response)
        if not outcome.succeeded:
            logger.warning(
                "%s ping for check %s not acknowledged after %d attempt(s): %s (status=%s, error=%s)",
                event.value,
                self.check_id,
                outcome.attempts,
                outcome.failure.value,
                outcome.status_code,
                outcome.error_message,
            )
        return outcome


@dataclass(frozen=True)
class PingReporter(BasePingReporter):
    """
    Blocking reporter. Each attempt blocks the caller for at most `timeout` seconds.

    Instances are immutable and may be shared across threads; so may the HTTP client.
    """

    @classmethod
    def _default_client(cls, settings: PingSettings) -> HttpClient:
        return create_default_http_client(settings)

    def ping(self, event: PingEvent, *, run_id: RunId | None = None, data: str | None = None) -> PingOutcome:
        """Send one report through the retry loop and describe the result."""
        event = PingEvent(event)
        request = self.build_request(event, run_id=run_id, data=data)
        response = send_with_retries(self.http_client, request, retry_config=self.retry_config)
        return self._outcome(event, response)

    def start_timer(self, run_id: RunId | None = None) -> bool:
        """Start a timer on healthchecks.io to measure the job's run time."""
        return self.ping(PingEvent.START, run_id=run_id).succeeded

    def report_success(self, run_id: RunId | None = None) -> bool:
        return self.ping(PingEvent.SUCCESS, run_id=run_id).succeeded

    def report_failure(self, run_id: RunId | None = None) -> bool:
        return self.ping(PingEvent.FAIL, run_id=run_id).succeeded

    def report_failure_with_logs(self, data: str, run_id: RunId | None = None) -> bool:
        """Report failure with a log snippet attached to help debug it on healthchecks.io."""
        return self.ping(PingEvent.FAIL_WITH_LOGS, run_id=run_id, data=data).succeeded

    def start_timer_with_run_id(self, run_id: RunId | None) -> bool:
        return self.start_timer(run_id=run_id)

    def report_success_with_run_id(self, run_id: RunId | None) -> bool:
        return self.report_success(run_id=run_id)

    def report_failure_with_run_id(self, run_id: RunId | None) -> bool:
        return self.report_failure(run_id=run_id)

    def report_failure_with_logs_and_run_id(self, data: str, run_id: RunId | None) -> bool:
        return self.report_failure_with_logs(data, run_id=run_id)

    def close(self) -> None:
        close = getattr(self.http_client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> PingReporter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


def get_reporter(check_id: str | uuid.UUID, **kwargs: Any) -> PingReporter:
    """Create a PingReporter against the default ping URL."""
    return PingReporter.create(check_id, **kwargs)


def get_reporter_with_url(check_id: str | uuid.UUID, base_url: str, **kwargs: Any) -> PingReporter:
    """Create a PingReporter against a self-hosted or alternate ping URL."""
    return PingReporter.create(check_id, base_url, **kwargs)


__all__ = [
    "BasePingReporter",
    "PingEvent",
    "PingOutcome",
    "PingReporter",
    "RunId",
    "get_reporter",
    "get_reporter_with_url",
    "new_run_id",
    "parse_check_id",
]
