# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import contextlib
import itertools
import logging
import socket
import threading
import time

import httpcore
import httpx
import pytest

from siteprobe.config import ProbeSettings
from siteprobe.errors import ErrorCategory, ProbeCancelled, ProbeTimeoutError
from siteprobe.http.adapters import StubHttpClient
from siteprobe.http.deadline import DEADLINE_EXTENSION, DeadlineStream, DeadlineTransport, RequestDeadline
from siteprobe.http.headers import iter_header_items
from siteprobe.http.httpx_client import HttpxClient
from siteprobe.http.models import HttpRequest, HttpResponse, RetryConfig
from siteprobe.http.retry import build_default_retry_config, send_with_retries
from siteprobe.http.url import ensure_scheme, target_host
from siteprobe.probe.latency import LatencyProber
from siteprobe.utils.cancel import CancellationToken


def timeout_response():
    return HttpResponse(ok=False, error_message="timed out", error_category=ErrorCategory.TIMEOUT)


class SequenceHttpClient:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        self.calls += 1
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]

    def close(self) -> None:  # pragma: no cover
        return None


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


def fake_timer(*values):
    ticks = itertools.chain(values, itertools.repeat(values[-1]))
    return lambda: next(ticks)


def test_retry_config_from_settings_clamps_minimum():
    retry = RetryConfig.from_settings(ProbeSettings(max_attempts=0, retry_delay=-1))
    assert retry.max_attempts == 1
    assert retry.delay == 0.0


def test_build_default_retry_config_matches_fixed_policy():
    cfg = build_default_retry_config()
    assert cfg.max_attempts == 5
    assert cfg.delay == 2.0
    assert cfg.backoff_factor == 1.0


def test_send_with_retries_succeeds_on_fifth_attempt():
    sleep = SleepRecorder()
    client = SequenceHttpClient([timeout_response()] * 4 + [HttpResponse(ok=True, status_code=200, ttfb=0.1)])
    result = send_with_retries(client, HttpRequest(url="http://example.com"), retry_config=RetryConfig(), sleep=sleep)
    assert result.ok is True
    assert result.meta["retry_count"] == 4
    assert client.calls == 5
    assert sleep.delays == [2.0, 2.0, 2.0, 2.0]


def test_send_with_retries_returns_last_timeout_when_exhausted():
    sleep = SleepRecorder()
    client = SequenceHttpClient([timeout_response()])
    result = send_with_retries(client, HttpRequest(url="http://example.com"), retry_config=RetryConfig(), sleep=sleep)
    assert result.is_timeout
    assert result.meta["retry_exhausted"] is True
    assert client.calls == 5
    assert len(sleep.delays) == 4


def test_send_with_retries_does_not_retry_other_transport_errors():
    sleep = SleepRecorder()
    refused = HttpResponse(ok=False, error_message="refused", error_category=ErrorCategory.CONNECTION_ERROR)
    client = SequenceHttpClient([refused, HttpResponse(ok=True)])
    result = send_with_retries(client, HttpRequest(url="http://example.com"), retry_config=RetryConfig(), sleep=sleep)
    assert result.ok is False
    assert result.error_category == ErrorCategory.CONNECTION_ERROR
    assert client.calls == 1
    assert sleep.delays == []


def test_send_with_retries_converts_raised_timeouts():
    class RaiseThenSucceed:
        def __init__(self):
            self.calls = 0

        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            self.calls += 1
            if self.calls == 1:
                raise httpx.ReadTimeout("slow")
            return HttpResponse(ok=True, status_code=200)

    client = RaiseThenSucceed()
    result = send_with_retries(client, HttpRequest(url="http://example.com"), sleep=lambda _: None)
    assert result.ok is True
    assert client.calls == 2


def test_send_with_retries_applies_backoff_factor():
    sleep = SleepRecorder()
    client = SequenceHttpClient([timeout_response()])
    send_with_retries(
        client,
        HttpRequest(url="http://example.com"),
        retry_config=RetryConfig(max_attempts=3, delay=1.0, backoff_factor=2.0),
        sleep=sleep,
    )
    assert sleep.delays == [1.0, 2.0]


def test_send_with_retries_logs_each_retry(caplog):
    client = SequenceHttpClient([timeout_response(), HttpResponse(ok=True)])
    with caplog.at_level(logging.INFO, logger="siteprobe.http.retry"):
        send_with_retries(client, HttpRequest(url="http://example.com"), sleep=lambda _: None)
    assert "Retrying 1/5 for URL: http://example.com" in caplog.text


def test_send_with_retries_honors_cancellation():
    token = CancellationToken()
    token.cancel()
    client = SequenceHttpClient([HttpResponse(ok=True)])
    with pytest.raises(ProbeCancelled):
        send_with_retries(client, HttpRequest(url="http://example.com"), cancel=token)
    assert client.calls == 0


def test_cancellation_interrupts_retry_pause():
    token = CancellationToken()

    class CancelOnRequest:
        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            token.cancel()
            return timeout_response()

    with pytest.raises(ProbeCancelled):
        send_with_retries(CancelOnRequest(), HttpRequest(url="http://example.com"), cancel=token)


def test_httpx_client_reports_ttfb_and_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers.get("user-agent")
        return httpx.Response(
            200,
            headers=[("Server", "nginx/1.18.0"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            text="<html>hello</html>",
        )

    transport_client = httpx.Client(transport=httpx.MockTransport(handler))
    client = HttpxClient(ProbeSettings(user_agent="UA/1.0"), client=transport_client, timer=fake_timer(1.0, 1.25))
    resp = client.request(HttpRequest(url="http://example.com/"))

    assert resp.ok is True
    assert resp.status_code == 200
    assert resp.ttfb == pytest.approx(0.25)
    assert resp.text == "<html>hello</html>"
    assert seen["user_agent"] == "UA/1.0"
    cookies = [value for name, value in iter_header_items(resp.header_items) if name == "set-cookie"]
    assert cookies == ["a=1", "b=2"]
    client.close()


def test_httpx_client_truncates_large_bodies():
    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, content=b"x" * 100)

    client = HttpxClient(
        ProbeSettings(max_body_bytes=10),
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        timer=fake_timer(0.0, 0.0),
    )
    resp = client.request(HttpRequest(url="http://example.com/"))
    assert resp.content == b"x" * 10
    assert resp.meta["body_truncated"] is True


def test_httpx_client_categorizes_failures():
    def timeout_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("connect timed out", request=request)

    client = HttpxClient(ProbeSettings(), client=httpx.Client(transport=httpx.MockTransport(timeout_handler)))
    resp = client.request(HttpRequest(url="http://example.com/"))
    assert resp.ok is False
    assert resp.is_timeout
    assert resp.error_type == "ConnectTimeout"

    def dns_handler(request: httpx.Request) -> httpx.Response:
        try:
            raise socket.gaierror(-2, "Name or service not known")
        except socket.gaierror as exc:
            raise httpx.ConnectError("dns failure", request=request) from exc

    client = HttpxClient(ProbeSettings(), client=httpx.Client(transport=httpx.MockTransport(dns_handler)))
    resp = client.request(HttpRequest(url="http://example.com/"))
    assert resp.ok is False
    assert resp.is_timeout is False
    assert resp.error_category == ErrorCategory.DNS_ERROR


class ManualClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class DripBody(httpx.SyncByteStream):
    """Response body whose every chunk costs `step` seconds on the clock."""

    def __init__(self, clock, step, chunks):
        self.clock = clock
        self.step = step
        self.chunks = chunks

    def __iter__(self):
        for _ in range(self.chunks):
            self.clock.now += self.step
            yield b"x"


def test_httpx_client_times_out_slow_body_against_request_deadline():
    clock = ManualClock()
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["deadline"] = request.extensions.get(DEADLINE_EXTENSION)
        return httpx.Response(200, stream=DripBody(clock, step=0.4, chunks=10))

    client = HttpxClient(
        ProbeSettings(timeout=1.0),
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        timer=clock,
    )
    resp = client.request(HttpRequest(url="http://example.com/"))

    assert seen["deadline"] == pytest.approx(1.0)
    assert resp.ok is False
    assert resp.is_timeout
    assert resp.error_type == "ReadTimeout"


def test_httpx_client_times_out_when_head_arrives_after_deadline():
    clock = ManualClock()

    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        clock.now += 2.5
        return httpx.Response(200, text="late")

    client = HttpxClient(
        ProbeSettings(timeout=1.0),
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        timer=clock,
    )
    resp = client.request(HttpRequest(url="http://example.com/"))
    assert resp.is_timeout
    assert resp.error_category == ErrorCategory.TIMEOUT


class RecordingStream(httpcore.NetworkStream):
    def __init__(self, clock, step):
        self.clock = clock
        self.step = step
        self.timeouts = []

    def read(self, max_bytes, timeout=None):  # noqa: ARG002
        self.timeouts.append(timeout)
        self.clock.now += self.step
        return b"x"


def test_deadline_stream_shrinks_each_read_to_time_left():
    clock = ManualClock()
    deadline = RequestDeadline(clock)
    deadline.expires_at = 1.0
    inner = RecordingStream(clock, step=0.3)
    stream = DeadlineStream(inner, deadline)

    with pytest.raises(httpcore.ReadTimeout):
        for _ in range(10):
            stream.read(1024, timeout=5.0)
    assert inner.timeouts == pytest.approx([1.0, 0.7, 0.4, 0.1])


def test_deadline_stream_without_deadline_keeps_operation_timeout():
    clock = ManualClock()
    inner = RecordingStream(clock, step=100.0)
    stream = DeadlineStream(inner, RequestDeadline(clock))
    stream.read(1024, timeout=5.0)
    stream.read(1024, timeout=5.0)
    assert inner.timeouts == [5.0, 5.0]


def test_deadline_transport_reads_deadline_from_request_extensions():
    transport = DeadlineTransport(verify=False)
    with pytest.raises(httpx.UnsupportedProtocol):
        transport.handle_request(
            httpx.Request("GET", "unsupported://example.com/", extensions={DEADLINE_EXTENSION: 42.0})
        )
    assert transport.deadline.expires_at == 42.0
    transport.close()


def start_drip_server(interval, lines):
    """Serve one response whose header lines trickle in every `interval` seconds."""
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)

    def serve():
        with listener:
            conn, _ = listener.accept()
            with conn, contextlib.suppress(OSError):
                conn.recv(65536)
                conn.sendall(b"HTTP/1.1 200 OK\r\n")
                for index in range(lines):
                    time.sleep(interval)
                    conn.sendall(f"X-Drip-{index}: {index}\r\n".encode())
                conn.sendall(b"Content-Length: 0\r\n\r\n")

    threading.Thread(target=serve, daemon=True).start()
    return listener.getsockname()[1]


def test_trickled_response_head_is_cut_off_at_timeout(monkeypatch):
    for name in ("HTTP_PROXY", "http_proxy", "ALL_PROXY", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    port = start_drip_server(interval=0.1, lines=40)
    settings = ProbeSettings(timeout=0.5, max_attempts=1)
    client = HttpxClient(settings)
    prober = LatencyProber(client, settings)

    started = time.perf_counter()
    with pytest.raises(ProbeTimeoutError):
        prober.probe(f"127.0.0.1:{port}")
    elapsed = time.perf_counter() - started
    client.close()

    assert elapsed < 2.0


def test_stub_http_client_replays_sequences():
    stub = StubHttpClient()
    stub.add("http://example.com", [timeout_response(), HttpResponse(ok=True, text="second")])
    assert stub.request(HttpRequest(url="http://example.com")).is_timeout
    assert stub.request(HttpRequest(url="http://example.com")).text == "second"
    assert stub.request(HttpRequest(url="http://example.com")).text == "second"
    missing = stub.request(HttpRequest(url="http://missing"))
    assert missing.ok is False
    assert [req.url for req in stub.requests][-1] == "http://missing"


def test_iter_header_items_accepts_common_shapes():
    assert list(iter_header_items({"Server": ["a", "b"]})) == [("server", "a"), ("server", "b")]
    assert list(iter_header_items({"X-Powered-By": "PHP/8.1.2"})) == [("x-powered-by", "PHP/8.1.2")]
    assert list(iter_header_items([("Cache-Control", "no-cache")])) == [("cache-control", "no-cache")]
    assert list(iter_header_items(httpx.Headers({"Server": "nginx"}))) == [("server", "nginx")]
    assert list(iter_header_items(None)) == []


def test_url_helpers_default_schemes():
    assert ensure_scheme("example.com") == "http://example.com"
    assert ensure_scheme("example.com", "https") == "https://example.com"
    assert ensure_scheme("https://example.com/a") == "https://example.com/a"
    assert ensure_scheme("HTTP://Example.com") == "HTTP://Example.com"
    assert target_host("example.com") == "example.com"
    assert target_host("http://Example.com:8080/path?q=1") == "example.com"
    assert target_host("https://user@example.com./") == "example.com"
