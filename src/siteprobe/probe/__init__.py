# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-target probes: latency, TLS, metadata and support status."""

from .classifier import SupportClassifier, SupportReport, is_supported
from .latency import LatencyProbe, LatencyProber
from .metadata import extract_metadata, extract_wordpress_version
from .tls import TlsValidator, certificate_in_window

__all__ = [
    "LatencyProbe",
    "LatencyProber",
    "SupportClassifier",
    "SupportReport",
    "TlsValidator",
    "certificate_in_window",
    "extract_metadata",
    "extract_wordpress_version",
    "is_supported",
]
