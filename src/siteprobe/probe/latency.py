# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Timed GET requests with retry-on-timeout."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from ..config import ProbeSettings, load_probe_settings
from ..errors import ProbeTimeoutError, TransportError
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse, RetryConfig
from ..http.retry import retry_on_timeout, send_with_retries
from ..http.url import ensure_scheme
from ..utils.cancel import CancellationToken


@dataclass(frozen=True)
class LatencyProbe:
    response: HttpResponse
    latency: float


class LatencyProber:
    """
    Fetch a target once and report its time-to-first-byte.

    Targets without a scheme are fetched over plain HTTP; certificate checks
    are the TLS validator's job.
    """

    def __init__(
        self,
        http_client: HttpClient,
        settings: ProbeSettings | None = None,
        *,
        retry_config: RetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        cancel: CancellationToken | None = None,
    ):
        self.http_client = http_client
        self.settings = settings or load_probe_settings()
        self.retry_config = retry_config or RetryConfig.from_settings(self.settings)
        self.sleep = sleep
        self.cancel = cancel

    def probe(self, target: str) -> LatencyProbe:
        url = ensure_scheme(target, "http")
        request = HttpRequest(
            url=url,
            headers={"User-Agent": self.settings.user_agent},
            timeout=self.settings.timeout,
            allow_redirects=self.settings.allow_redirects,
        )
        response = send_with_retries(
            self.http_client,
            request,
            retry_config=self.retry_config,
            retryable=retry_on_timeout,
            sleep=self.sleep,
            cancel=self.cancel,
        )

        if response.is_timeout:
            raise ProbeTimeoutError(url, response.error_message, attempts=self.retry_config.max_attempts)
        if not response.ok:
            raise TransportError(url, response.error_message, response.error_category)
        if response.ttfb is None:
            raise TransportError(url, "no response head received")
        return LatencyProbe(response=response, latency=response.ttfb)


__all__ = ["LatencyProbe", "LatencyProber"]
