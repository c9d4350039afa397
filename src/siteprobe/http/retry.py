# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper for HttpClient implementations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import load_probe_settings
from ..errors import categorize_exception
from ..utils.cancel import CancellationToken
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)

RetryPredicate = Callable[[HttpResponse], bool]


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed ProbeSettings."""
    return RetryConfig.from_settings(load_probe_settings())


def retry_on_timeout(response: HttpResponse) -> bool:
    """Only transport timeouts are worth another attempt."""
    return response.is_timeout


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
    retryable: RetryPredicate = retry_on_timeout,
    sleep: Callable[[float], None] = time.sleep,
    cancel: CancellationToken | None = None,
) -> HttpResponse:
    """
    Execute a request, retrying while `retryable(response)` holds.

    Returns the first non-retryable response, or the last response once
    `max_attempts` is used up.
    """
    cfg = retry_config or build_default_retry_config()
    max_attempts = max(1, cfg.max_attempts)
    pause = cancel.sleep if cancel is not None else sleep

    attempt = 0
    delay = cfg.delay
    last_response: HttpResponse | None = None

    while attempt < max_attempts:
        if cancel is not None:
            cancel.raise_if_cancelled()
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse.from_exception(exc, categorize_exception(exc))
        last_response = response
        attempt += 1

        if response.ok or not retryable(response):
            if attempt > 1:
                response.meta["retry_count"] = attempt - 1
            return response

        if attempt >= max_attempts:
            break
        logger.info("Retrying %d/%d for URL: %s", attempt, max_attempts, request.url)
        pause(delay)
        delay *= cfg.backoff_factor

    if last_response is not None:
        last_response.meta.setdefault("retry_count", attempt - 1)
        last_response.meta.setdefault("retry_exhausted", True)
        return last_response

    return HttpResponse(ok=False, error_message="No attempts made", meta={"retry_count": 0, "retry_exhausted": True})


__all__ = ["build_default_retry_config", "retry_on_timeout", "send_with_retries"]
