# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory HttpClient implementations."""

from __future__ import annotations

from collections.abc import Iterable

from .client import HttpClient
from .models import HttpRequest, HttpResponse

Reply = HttpResponse | BaseException


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests and dry runs.

    Replies are consumed in order; the last one repeats once the queue is drained.
    Exceptions in the queue are raised from `request` to simulate misbehaving adapters.
    """

    def __init__(self, replies: Iterable[Reply] | None = None):
        self._replies: list[Reply] = list(replies or [])
        self.requests: list[HttpRequest] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    def add(self, reply: Reply) -> None:
        self._replies.append(reply)

    def _next_reply(self) -> HttpResponse:
        if not self._replies:
            return HttpResponse(ok=False, status_code=None, error_message="No stubbed response configured")
        index = min(len(self.requests) - 1, len(self._replies) - 1)
        reply = self._replies[index]
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        return self._next_reply()

    def close(self) -> None:
        self.closed = True


class AsyncStubHttpClient(StubHttpClient):
    """Awaitable StubHttpClient."""

    async def request(self, request: HttpRequest) -> HttpResponse:  # type: ignore[override]
        self.requests.append(request)
        return self._next_reply()

    async def aclose(self) -> None:
        self.closed = True
