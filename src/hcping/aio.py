# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""asyncio flavour of the ping reporter."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from .config import PingSettings
from .http.client import AsyncHttpClient, create_default_async_http_client
from .http.retry import send_with_retries_async
from .ping import BasePingReporter, PingEvent, PingOutcome, RunId


@dataclass(frozen=True)
class AsyncPingReporter(BasePingReporter):
    """
    Same contract as PingReporter with every report awaited.

    Cancelling the awaiting task aborts the retry loop; other failures still collapse to False.
    """

    @classmethod
    def _default_client(cls, settings: PingSettings) -> AsyncHttpClient:
        return create_default_async_http_client(settings)

    async def ping(self, event: PingEvent, *, run_id: RunId | None = None, data: str | None = None) -> PingOutcome:
        event = PingEvent(event)
        request = self.build_request(event, run_id=run_id, data=data)
        response = await send_with_retries_async(self.http_client, request, retry_config=self.retry_config)
        return self._outcome(event, response)

    async def start_timer(self, run_id: RunId | None = None) -> bool:
        return (await self.ping(PingEvent.START, run_id=run_id)).succeeded

    async def report_success(self, run_id: RunId | None = None) -> bool:
        return (await self.ping(PingEvent.SUCCESS, run_id=run_id)).succeeded

    async def report_failure(self, run_id: RunId | None = None) -> bool:
        return (await self.ping(PingEvent.FAIL, run_id=run_id)).succeeded

    async def report_failure_with_logs(self, data: str, run_id: RunId | None = None) -> bool:
        return (await self.ping(PingEvent.FAIL_WITH_LOGS, run_id=run_id, data=data)).succeeded

    async def aclose(self) -> None:
        aclose = getattr(self.http_client, "aclose", None)
        if callable(aclose):
            await aclose()

    async def __aenter__(self) -> AsyncPingReporter:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()


def get_async_reporter(check_id: str | uuid.UUID, base_url: str | None = None, **kwargs: Any) -> AsyncPingReporter:
    """Create an AsyncPingReporter; `base_url` defaults to the configured ping URL."""
    return AsyncPingReporter.create(check_id, base_url, **kwargs)


__all__ = ["AsyncPingReporter", "get_async_reporter"]
