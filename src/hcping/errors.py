# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .http.models import HttpResponse


class HealthchecksConfigError(ValueError):
    """Raised when a reporter is built from invalid input."""


class InvalidIdentifier(HealthchecksConfigError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid UUID: {value}")


class EmptyBaseUrl(HealthchecksConfigError):
    def __init__(self) -> None:
        super().__init__("ping URL must not be empty")


class EmptyUserAgent(HealthchecksConfigError):
    def __init__(self) -> None:
        super().__init__("User Agent must not be empty")


class FailureKind(str, Enum):
    NONE = "NONE"
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    SSL_ERROR = "SSL_ERROR"
    DNS_ERROR = "DNS_ERROR"
    SERVICE_REJECTION = "SERVICE_REJECTION"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_ERROR_TYPE_KINDS = {
    "TimeoutException": FailureKind.TIMEOUT,
    "ConnectTimeout": FailureKind.TIMEOUT,
    "ReadTimeout": FailureKind.TIMEOUT,
    "WriteTimeout": FailureKind.TIMEOUT,
    "PoolTimeout": FailureKind.TIMEOUT,
    "TimeoutError": FailureKind.TIMEOUT,
    "ConnectError": FailureKind.CONNECTION_ERROR,
    "RemoteProtocolError": FailureKind.CONNECTION_ERROR,
    "NetworkError": FailureKind.CONNECTION_ERROR,
    "ProxyError": FailureKind.CONNECTION_ERROR,
    "ConnectionError": FailureKind.CONNECTION_ERROR,
    "ConnectionRefusedError": FailureKind.CONNECTION_ERROR,
    "ConnectionResetError": FailureKind.CONNECTION_ERROR,
    "SSLError": FailureKind.SSL_ERROR,
    "SSLCertVerificationError": FailureKind.SSL_ERROR,
    "gaierror": FailureKind.DNS_ERROR,
    "herror": FailureKind.DNS_ERROR,
}


def categorize_exception(exc: BaseException) -> FailureKind:
    """
    Map Python/httpx exceptions to FailureKind.
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return FailureKind.TIMEOUT

    if isinstance(exc, httpx.ConnectError):
        # httpx wraps resolver failures in ConnectError; the cause keeps the detail.
        cause = exc.__cause__ or exc.__context__
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return FailureKind.DNS_ERROR
        if isinstance(cause, ssl_module.SSLError):
            return FailureKind.SSL_ERROR
        return FailureKind.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return FailureKind.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return FailureKind.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return FailureKind.DNS_ERROR

    if isinstance(exc, ConnectionError):
        return FailureKind.CONNECTION_ERROR

    return FailureKind.UNKNOWN_ERROR


def categorize_response(response: HttpResponse | None) -> FailureKind:
    """Classify a normalized response; a status code on a failed response means the service rejected it."""
    if response is None:
        return FailureKind.UNKNOWN_ERROR
    if response.ok:
        return FailureKind.NONE
    if not response.is_transport_failure:
        return FailureKind.SERVICE_REJECTION
    recorded = response.meta.get("failure_kind")
    if isinstance(recorded, FailureKind):
        return recorded
    return _ERROR_TYPE_KINDS.get(response.error_type or "", FailureKind.UNKNOWN_ERROR)


def failure_kind_to_reason(kind: FailureKind | None) -> str:
    """User-facing reason string."""
    mapping = {
        FailureKind.TIMEOUT: "Network timeout while pinging",
        FailureKind.CONNECTION_ERROR: "Network connectivity issue",
        FailureKind.SSL_ERROR: "TLS/certificate issue",
        FailureKind.DNS_ERROR: "DNS resolution failure",
        FailureKind.SERVICE_REJECTION: "Ping endpoint rejected the request",
        FailureKind.UNKNOWN_ERROR: "Network error while pinging",
        FailureKind.NONE: "",
        None: "",
    }
    return mapping.get(kind, "Ping failed due to network error")
