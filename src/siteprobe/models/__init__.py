# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for SiteProbe."""

from ..http.models import Headers, HttpRequest, HttpResponse, RetryConfig
from .registry import VersionRecord
from .result import CSV_HEADER, ProbeResult, SiteMetadata, SslStatus, SupportStatus

__all__ = [
    "CSV_HEADER",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeResult",
    "RetryConfig",
    "SiteMetadata",
    "SslStatus",
    "SupportStatus",
    "VersionRecord",
]
