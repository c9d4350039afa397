# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
SiteProbe package entrypoint.

This package probes websites for time-to-first-byte, server and CMS version
markers and TLS certificate validity, then classifies the detected software
against an end-of-life registry. HTTP behavior is abstracted behind an
injectable client interface, the registry behind a `VersionRegistry`
protocol, and results are modeled with frozen dataclasses.
"""

from .config import ProbeSettings, load_probe_settings
from .errors import (
    CertificateExpiredError,
    ErrorCategory,
    ProbeCancelled,
    ProbeTimeoutError,
    RegistryError,
    SiteProbeError,
    TlsError,
    TransportError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryConfig,
    create_default_http_client,
)
from .log import setup_logging
from .models import CSV_HEADER, ProbeResult, SiteMetadata, SslStatus, SupportStatus, VersionRecord
from .probe import LatencyProber, SupportClassifier, TlsValidator, extract_metadata, extract_wordpress_version
from .registry import CachingVersionRegistry, EndOfLifeRegistry, VersionRegistry
from .runtime import SiteProbe
from .scan import ProbeEngine
from .utils import CancellationToken
from .version import __version__

__all__ = [
    "CSV_HEADER",
    "CachingVersionRegistry",
    "CancellationToken",
    "CertificateExpiredError",
    "EndOfLifeRegistry",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "LatencyProber",
    "ProbeCancelled",
    "ProbeEngine",
    "ProbeResult",
    "ProbeSettings",
    "ProbeTimeoutError",
    "RegistryError",
    "RetryConfig",
    "SiteMetadata",
    "SiteProbe",
    "SiteProbeError",
    "SslStatus",
    "SupportClassifier",
    "SupportStatus",
    "TlsError",
    "TlsValidator",
    "TransportError",
    "VersionRecord",
    "VersionRegistry",
    "create_default_http_client",
    "extract_metadata",
    "extract_wordpress_version",
    "load_probe_settings",
    "setup_logging",
    "__version__",
]
