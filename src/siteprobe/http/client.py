# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction shared by the latency prober and the version registry."""

from typing import Protocol

from ..config import ProbeSettings, load_probe_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """
    One HTTP exchange per call, reported as an `HttpResponse`.

    Implementations do not raise for network failures: they return
    `ok=False` with `error_category` set, so `TIMEOUT` stays distinguishable
    for the retry policy. `request.timeout` bounds the whole exchange, and a
    successful response carries `ttfb`, the seconds from dispatch until the
    response head arrived.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_http_client(settings: ProbeSettings | None = None) -> HttpClient:
    """httpx client with whole-request deadlines, configured from `settings` or the environment."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_probe_settings())
