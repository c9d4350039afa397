# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, (httpx.TimeoutException, socket.timeout, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        # httpx (via httpcore) wraps the socket-level cause; surface DNS and TLS failures distinctly.
        inner = _root_cause_category(exc)
        if inner in {ErrorCategory.DNS_ERROR, ErrorCategory.SSL_ERROR}:
            return inner
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def _root_cause_category(exc: BaseException) -> ErrorCategory:
    seen: set[int] = set()
    current = exc.__cause__ or exc.__context__
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR
        if isinstance(current, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        current = current.__cause__ or current.__context__
    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during probe",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")


class SiteProbeError(Exception):
    """Base class for per-target failures."""


class TransportError(SiteProbeError):
    """HTTP fetch failed (DNS, refused connection, handshake, ...)."""

    def __init__(self, url: str, message: str | None = None, category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        self.url = url
        self.category = category
        reason = message or error_category_to_reason(category)
        super().__init__(f"error fetching URL {url}: {reason}")


class ProbeTimeoutError(TransportError):
    """Every attempt timed out."""

    def __init__(self, url: str, message: str | None = None, attempts: int = 0):
        self.attempts = attempts
        super().__init__(url, message, ErrorCategory.TIMEOUT)


class TlsError(SiteProbeError):
    """TLS connection or certificate retrieval failed."""

    def __init__(self, host: str, message: str | None = None, category: ErrorCategory = ErrorCategory.SSL_ERROR):
        self.host = host
        self.category = category
        super().__init__(f"TLS check failed for {host}: {message or error_category_to_reason(category)}")


class CertificateExpiredError(TlsError):
    """The peer presented an expired certificate."""

    def __init__(self, host: str, message: str | None = None):
        super().__init__(host, message or "certificate is expired", ErrorCategory.SSL_ERROR)


class RegistryError(SiteProbeError):
    """Version registry lookup failed or returned data outside its contract."""

    def __init__(self, product: str, message: str):
        self.product = product
        super().__init__(f"registry lookup failed for {product}: {message}")


class ProbeCancelled(Exception):
    """Raised when a batch is cancelled at a suspension point."""


__all__ = [
    "CertificateExpiredError",
    "ErrorCategory",
    "ProbeCancelled",
    "ProbeTimeoutError",
    "RegistryError",
    "SiteProbeError",
    "TlsError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
