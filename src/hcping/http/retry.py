# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Bounded retry loop for ping requests.

Every failure is treated the same way: a transport error, an exception raised by the
client, and a non-2xx status all lead to another attempt until `max_attempts` is reached.
The first successful attempt ends the loop. By default attempts are issued back to back;
a positive `initial_delay` switches to capped exponential backoff without changing the
attempt ceiling.
"""

from __future__ import annotations

import asyncio
import logging
import time

from ..config import load_ping_settings
from .client import AsyncHttpClient, HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed PingSettings."""
    return RetryConfig.from_settings(load_ping_settings())


def _deadline(cfg: RetryConfig) -> float | None:
    if cfg.budget is None or cfg.budget <= 0:
        return None
    return time.monotonic() + cfg.budget


def _out_of_budget(deadline: float | None) -> bool:
    return deadline is not None and time.monotonic() >= deadline


def _sleep_time(cfg: RetryConfig, attempt: int, deadline: float | None) -> float:
    delay = cfg.delay_for(attempt)
    if delay > 0 and deadline is not None:
        delay = min(delay, max(0.0, deadline - time.monotonic()))
    return delay


def _log_failure(request: HttpRequest, response: HttpResponse, attempt: int, cfg: RetryConfig) -> None:
    logger.debug(
        "%s %s failed (attempt %d/%d): status=%s error=%s",
        request.method,
        request.url,
        attempt,
        cfg.max_attempts,
        response.status_code,
        response.error_message,
    )


def _finish(response: HttpResponse | None, attempts: int) -> HttpResponse:
    if response is None:
        response = HttpResponse(ok=False, error_message="Retry budget exhausted")
    response.meta["attempts"] = attempts
    response.meta["retry_count"] = max(0, attempts - 1)
    if not response.ok:
        response.meta["retry_exhausted"] = True
    return response


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> HttpResponse:
    """Execute a request until it succeeds or the attempt ceiling is reached."""
    cfg = retry_config or build_default_retry_config()
    deadline = _deadline(cfg)

    attempt = 0
    last_response: HttpResponse | None = None
    while attempt < cfg.max_attempts:
        if attempt and _out_of_budget(deadline):
            break
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse.from_exception(exc)
        attempt += 1
        last_response = response

        if response.ok:
            return _finish(response, attempt)

        _log_failure(request, response, attempt, cfg)
        if attempt >= cfg.max_attempts:
            break
        delay = _sleep_time(cfg, attempt, deadline)
        if delay > 0:
            time.sleep(delay)

    return _finish(last_response, attempt)


async def send_with_retries_async(
    client: AsyncHttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> HttpResponse:
    """Awaitable send_with_retries; task cancellation is not swallowed."""
    cfg = retry_config or build_default_retry_config()
    deadline = _deadline(cfg)

    attempt = 0
    last_response: HttpResponse | None = None
    while attempt < cfg.max_attempts:
        if attempt and _out_of_budget(deadline):
            break
        try:
            response = await client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse.from_exception(exc)
        attempt += 1
        last_response = response

        if response.ok:
            return _finish(response, attempt)

        _log_failure(request, response, attempt, cfg)
        if attempt >= cfg.max_attempts:
            break
        delay = _sleep_time(cfg, attempt, deadline)
        if delay > 0:
            await asyncio.sleep(delay)

    return _finish(last_response, attempt)
