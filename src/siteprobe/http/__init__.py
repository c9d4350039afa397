# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .deadline import DEADLINE_EXTENSION, DeadlineTransport
from .headers import iter_header_items
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, RetryConfig
from .retry import build_default_retry_config, retry_on_timeout, send_with_retries
from .url import ensure_scheme, target_host

__all__ = [
    "DEADLINE_EXTENSION",
    "DeadlineTransport",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "RetryConfig",
    "StubHttpClient",
    "build_default_retry_config",
    "create_default_http_client",
    "ensure_scheme",
    "iter_header_items",
    "retry_on_timeout",
    "send_with_retries",
    "target_host",
]
