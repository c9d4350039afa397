# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across SiteProbe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import ProbeSettings
from ..errors import ErrorCategory

Headers = dict[str, str]
HeaderItems = list[tuple[str, str]]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | str | None = None
    timeout: float | None = None
    allow_redirects: bool = True


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    `header_items` keeps every header line (repeated names included) in arrival
    order; `headers` is the collapsed view. `ttfb` is the time from dispatch to
    the arrival of the response head, in seconds.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    header_items: HeaderItems = field(default_factory=list)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    ttfb: float | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_timeout(self) -> bool:
        return not self.ok and self.error_category == ErrorCategory.TIMEOUT

    @classmethod
    def from_exception(cls, exc: BaseException, category: ErrorCategory) -> HttpResponse:
        return cls(
            ok=False,
            error_message=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
            error_category=category,
        )


@dataclass
class RetryConfig:
    """Retry policy: attempt count, pause between attempts and pause growth."""

    max_attempts: int = 5
    delay: float = 2.0
    backoff_factor: float = 1.0

    @classmethod
    def from_settings(cls, settings: ProbeSettings) -> RetryConfig:
        """Build a retry config from the shared ProbeSettings."""
        return cls(
            max_attempts=max(1, settings.max_attempts),
            delay=max(0.0, settings.retry_delay),
        )
