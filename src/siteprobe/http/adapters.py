# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

from collections.abc import Iterable

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests and offline runs.

    A URL may be registered with a single response or with a sequence that is
    replayed in order (the last entry repeats once the sequence is used up).
    """

    def __init__(self, responses: dict[str, HttpResponse | Iterable[HttpResponse]] | None = None):
        self._responses: dict[str, list[HttpResponse]] = {}
        self.requests: list[HttpRequest] = []
        for url, response in (responses or {}).items():
            self.add(url, response)

    def add(self, url: str, response: HttpResponse | Iterable[HttpResponse]) -> None:
        if isinstance(response, HttpResponse):
            self._responses[url] = [response]
        else:
            self._responses[url] = list(response)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self._responses.get(request.url)
        if not queue:
            return HttpResponse(ok=False, status_code=None, error_message="No stubbed response configured")
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def close(self) -> None:
        return None
