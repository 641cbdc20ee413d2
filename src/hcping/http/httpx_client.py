# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementations."""

from __future__ import annotations

import httpx

from ..config import PingSettings, load_ping_settings
from .client import AsyncHttpClient, HttpClient
from .models import HttpRequest, HttpResponse


def _prepare(request: HttpRequest, settings: PingSettings) -> tuple[dict[str, str], float]:
    headers = dict(request.headers or {})
    headers.setdefault("User-Agent", settings.user_agent)
    timeout = request.timeout if request.timeout is not None else settings.timeout
    return headers, timeout


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper."""

    def __init__(self, settings: PingSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_ping_settings()
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers, timeout = _prepare(request, self.settings)
        try:
            resp = self._client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse.from_exception(exc)
        return HttpResponse.from_status(resp.status_code, text=resp.text, url=str(resp.url))

    def close(self) -> None:
        self._client.close()


class AsyncHttpxClient(AsyncHttpClient):
    """Asynchronous httpx client wrapper."""

    def __init__(self, settings: PingSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_ping_settings()
        self._client = client or httpx.AsyncClient(
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    async def request(self, request: HttpRequest) -> HttpResponse:
        headers, timeout = _prepare(request, self.settings)
        try:
            resp = await self._client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse.from_exception(exc)
        return HttpResponse.from_status(resp.status_code, text=resp.text, url=str(resp.url))

    async def aclose(self) -> None:
        await self._client.aclose()
