# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade sharing one HTTP client across many checks."""

from __future__ import annotations

import uuid
from contextlib import suppress

from .config import PingSettings, load_ping_settings
from .http.client import HttpClient, create_default_http_client
from .http.models import RetryConfig
from .ping import PingReporter


class Healthchecks:
    """
    Convenience wrapper that wires a shared HTTP client into every reporter it hands out.

    Reporters hold no per-call mutable state, so one connection pool can serve every
    monitored job in the process.
    """

    def __init__(self, http_client: HttpClient | None = None, settings: PingSettings | None = None):
        self.settings = settings or load_ping_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.retry_config = RetryConfig.from_settings(self.settings)

    def reporter(
        self,
        check_id: str | uuid.UUID,
        base_url: str | None = None,
        *,
        user_agent: str | None = None,
    ) -> PingReporter:
        return PingReporter.create(
            check_id,
            base_url,
            http_client=self.http_client,
            user_agent=user_agent,
            retry_config=self.retry_config,
            settings=self.settings,
        )

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> "Healthchecks":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
