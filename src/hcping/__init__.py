# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
hcping package entrypoint.

Client for the healthchecks.io ping API. Reports (timer start, success, failure,
failure with logs) are retried a bounded number of times and collapse to a boolean
so a monitoring side-channel can never crash the job it monitors. HTTP behavior is
abstracted behind an injectable client interface.
"""

from .aio import AsyncPingReporter, get_async_reporter
from .config import DEFAULT_PING_URL, DEFAULT_USER_AGENT, MAX_RETRIES, PingSettings, load_ping_settings
from .errors import EmptyBaseUrl, EmptyUserAgent, FailureKind, HealthchecksConfigError, InvalidIdentifier
from .http import (
    AsyncHttpClient,
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryConfig,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .ping import PingEvent, PingOutcome, PingReporter, get_reporter, get_reporter_with_url, new_run_id
from .runtime import Healthchecks
from .version import __version__

__all__ = [
    "AsyncHttpClient",
    "AsyncPingReporter",
    "DEFAULT_PING_URL",
    "DEFAULT_USER_AGENT",
    "EmptyBaseUrl",
    "EmptyUserAgent",
    "FailureKind",
    "Healthchecks",
    "HealthchecksConfigError",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "InvalidIdentifier",
    "MAX_RETRIES",
    "PingEvent",
    "PingOutcome",
    "PingReporter",
    "PingSettings",
    "RetryConfig",
    "StubHttpClient",
    "__version__",
    "create_default_http_client",
    "get_async_reporter",
    "get_reporter",
    "get_reporter_with_url",
    "load_ping_settings",
    "new_run_id",
    "setup_logging",
]
