# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import time
from collections.abc import Callable

import httpx

from ..config import ProbeSettings, load_probe_settings
from ..errors import categorize_exception
from .client import HttpClient
from .deadline import DEADLINE_EXTENSION, DeadlineTransport
from .models import HttpRequest, HttpResponse


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper.

    Responses are streamed so the response head can be timestamped before the
    body is downloaded; that timestamp is reported as `HttpResponse.ttfb`.
    The request timeout bounds the whole exchange, head and body together.
    """

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        client: httpx.Client | None = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        self.settings = settings or load_probe_settings()
        self._timer = timer
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            transport=DeadlineTransport(verify=self.settings.verify_ssl, clock=timer),
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)

        try:
            max_body_bytes = self.settings.max_body_bytes
            if max_body_bytes <= 0:
                max_body_bytes = 16 * 1024 * 1024

            timeout = request.timeout if request.timeout is not None else self.settings.timeout

            started = self._timer()
            deadline = started + timeout if timeout else None
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
                extensions={DEADLINE_EXTENSION: deadline},
            ) as resp:
                head_at = self._timer()
                ttfb = head_at - started
                self._check_deadline(deadline, head_at, resp.request)
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    self._check_deadline(deadline, self._timer(), resp.request)
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(content)
                    if remaining <= 0:
                        truncated = True
                        break
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                header_items=list(resp.headers.multi_items()),
                text=text,
                content=bytes(content),
                url=str(resp.url),
                ttfb=ttfb,
                meta={
                    "body_truncated": truncated,
                    "body_bytes_read": len(content),
                    "body_bytes_limit": max_body_bytes,
                },
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse.from_exception(exc, categorize_exception(exc))

    @staticmethod
    def _check_deadline(deadline: float | None, now: float, request: httpx.Request) -> None:
        if deadline is not None and now > deadline:
            raise httpx.ReadTimeout("request deadline exceeded", request=request)

    def close(self) -> None:
        self._client.close()
