# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Whole-request deadlines for httpx.

httpx applies its timeout to each connect, read and write on its own, so a
peer that trickles bytes can hold a request open for as long as it likes.
`DeadlineTransport` reads an absolute deadline from the request extensions
and hands every socket operation only the time left before it, across
redirect hops and the streamed body.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

import httpcore
import httpx

DEADLINE_EXTENSION = "siteprobe.deadline"


class RequestDeadline(threading.local):
    """Absolute deadline of the request currently in flight on this thread."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.clock = clock
        self.expires_at: float | None = None

    def budget(self, timeout: float | None, timeout_error: type[httpcore.TimeoutException]) -> float | None:
        """Shrink a per-operation timeout to the time remaining."""
        if self.expires_at is None:
            return timeout
        remaining = self.expires_at - self.clock()
        if remaining <= 0:
            raise timeout_error("request deadline exceeded")
        return remaining if timeout is None else min(timeout, remaining)


class DeadlineStream(httpcore.NetworkStream):
    def __init__(self, stream: httpcore.NetworkStream, deadline: RequestDeadline):
        self._stream = stream
        self._deadline = deadline

    def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        return self._stream.read(max_bytes, self._deadline.budget(timeout, httpcore.ReadTimeout))

    def write(self, buffer: bytes, timeout: float | None = None) -> None:
        self._stream.write(buffer, self._deadline.budget(timeout, httpcore.WriteTimeout))

    def close(self) -> None:
        self._stream.close()

    def start_tls(self, ssl_context, server_hostname: str | None = None, timeout: float | None = None):  # noqa: ANN001
        stream = self._stream.start_tls(
            ssl_context,
            server_hostname,
            self._deadline.budget(timeout, httpcore.ConnectTimeout),
        )
        return DeadlineStream(stream, self._deadline)

    def get_extra_info(self, info: str) -> Any:
        return self._stream.get_extra_info(info)


class DeadlineBackend(httpcore.NetworkBackend):
    """Sync socket backend whose streams honour a `RequestDeadline`."""

    def __init__(self, deadline: RequestDeadline, backend: httpcore.NetworkBackend | None = None):
        self._deadline = deadline
        self._backend = backend or httpcore.SyncBackend()

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.NetworkStream:
        stream = self._backend.connect_tcp(
            host,
            port,
            timeout=self._deadline.budget(timeout, httpcore.ConnectTimeout),
            local_address=local_address,
            socket_options=socket_options,
        )
        return DeadlineStream(stream, self._deadline)

    def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.NetworkStream:  # pragma: no cover - no unix sockets in use
        stream = self._backend.connect_unix_socket(
            path,
            timeout=self._deadline.budget(timeout, httpcore.ConnectTimeout),
            socket_options=socket_options,
        )
        return DeadlineStream(stream, self._deadline)

    def sleep(self, seconds: float) -> None:
        self._backend.sleep(seconds)


class DeadlineTransport(httpx.HTTPTransport):
    """
    `httpx.HTTPTransport` over a deadline-aware connection pool.

    Requests without the `siteprobe.deadline` extension run with httpx's
    per-operation timeouts only.
    """

    def __init__(
        self,
        verify: bool = True,
        clock: Callable[[], float] = time.perf_counter,
        limits: httpx.Limits | None = None,
    ):
        limits = limits or httpx.Limits(max_connections=100, max_keepalive_connections=20)
        self.deadline = RequestDeadline(clock)
        # HTTPTransport keeps its connection pool in `_pool`; build it here with our backend.
        self._pool = httpcore.ConnectionPool(
            ssl_context=httpx.create_ssl_context(verify=verify),
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
            keepalive_expiry=limits.keepalive_expiry,
            network_backend=DeadlineBackend(self.deadline),
        )

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        # Stays set while the caller streams the body; the next request replaces it.
        self.deadline.expires_at = request.extensions.get(DEADLINE_EXTENSION)
        return super().handle_request(request)


__all__ = ["DEADLINE_EXTENSION", "DeadlineBackend", "DeadlineStream", "DeadlineTransport", "RequestDeadline"]
