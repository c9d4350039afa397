# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for per-site probe results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SupportStatus(str, Enum):
    SUPPORTED = "Supported"
    OUTDATED = "Outdated"
    UNKNOWN = "Unknown"


class SslStatus(str, Enum):
    VALID = "true"
    INVALID = "false"
    EXPIRED = "Expired"

    @classmethod
    def from_bool(cls, valid: bool) -> SslStatus:
        return cls.VALID if valid else cls.INVALID


CSV_HEADER: tuple[str, ...] = (
    "URL",
    "PHP Version",
    "MySQL Version",
    "WordPress Version",
    "Caching",
    "Cache Control",
    "Web Server",
    "Web Server Version",
    "SSL Valid",
    "TTFB1 - Longest (ms)",
    "TTFB2 (ms)",
    "TTFB3 - Shortest (ms)",
    "Average TTFB (ms)",
    "X-Powered-By",
    "PHP Status",
    "MySQL Status",
    "Web Server Status",
    "WordPress Status",
)


def format_ms(seconds: float | None) -> str:
    """Render a duration in seconds as milliseconds with 3 decimals."""
    if seconds is None:
        return ""
    return f"{seconds * 1000:.3f}"


@dataclass(frozen=True)
class SiteMetadata:
    """Server identity and cache behavior read from response headers."""

    php_version: str = ""
    # Never populated: no header or body signal carries the database version.
    mysql_version: str = ""
    caching: bool = False
    web_server: str = ""
    web_server_version: str = ""
    cache_control: str = ""
    x_powered_by: str = ""


@dataclass(frozen=True)
class ProbeResult:
    """
    One record per successfully probed target.

    `latencies` holds the TTFB samples in seconds, longest first. An expired
    certificate yields a record with only `url` and `ssl_valid` set.
    """

    url: str
    ssl_valid: SslStatus
    php_version: str = ""
    mysql_version: str = ""
    wordpress_version: str = ""
    caching: bool = False
    cache_control: str = ""
    web_server: str = ""
    web_server_version: str = ""
    latencies: tuple[float, ...] = field(default_factory=tuple)
    average_latency: float | None = None
    x_powered_by: str = ""
    php_status: SupportStatus | None = None
    mysql_status: SupportStatus | None = None
    web_server_status: SupportStatus | None = None
    wordpress_status: SupportStatus | None = None

    @classmethod
    def expired(cls, url: str) -> ProbeResult:
        return cls(url=url, ssl_valid=SslStatus.EXPIRED)

    @property
    def is_short_circuit(self) -> bool:
        return self.ssl_valid == SslStatus.EXPIRED

    def to_row(self) -> list[str]:
        """Flatten into the column layout of `CSV_HEADER`."""
        samples = [format_ms(value) for value in self.latencies[:3]]
        samples += [""] * (3 - len(samples))
        return [
            self.url,
            self.php_version,
            self.mysql_version,
            self.wordpress_version,
            "true" if self.caching else "false",
            self.cache_control,
            self.web_server,
            self.web_server_version,
            self.ssl_valid.value,
            *samples,
            format_ms(self.average_latency),
            self.x_powered_by,
            _status_text(self.php_status),
            _status_text(self.mysql_status),
            _status_text(self.web_server_status),
            _status_text(self.wordpress_status),
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "php_version": self.php_version,
            "mysql_version": self.mysql_version,
            "wordpress_version": self.wordpress_version,
            "caching": self.caching,
            "cache_control": self.cache_control,
            "web_server": self.web_server,
            "web_server_version": self.web_server_version,
            "ssl_valid": self.ssl_valid.value,
            "latencies_ms": [round(value * 1000, 3) for value in self.latencies],
            "average_latency_ms": None if self.average_latency is None else round(self.average_latency * 1000, 3),
            "x_powered_by": self.x_powered_by,
            "php_status": _status_text(self.php_status) or None,
            "mysql_status": _status_text(self.mysql_status) or None,
            "web_server_status": _status_text(self.web_server_status) or None,
            "wordpress_status": _status_text(self.wordpress_status) or None,
        }


def _status_text(status: SupportStatus | None) -> str:
    return status.value if status is not None else ""
