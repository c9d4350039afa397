# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level SiteProbe facade for batch probing."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import suppress

from .config import ProbeSettings, load_probe_settings
from .http.client import HttpClient, create_default_http_client
from .models import ProbeResult
from .probe.classifier import SupportClassifier
from .probe.latency import LatencyProber
from .probe.tls import TlsValidator
from .registry import CachingVersionRegistry, EndOfLifeRegistry, VersionRegistry
from .scan.engine import ProbeEngine
from .utils.cancel import CancellationToken


class SiteProbe:
    """
    Convenience wrapper that wires one HTTP client through every probe.

    The same client serves the timed fetches and the registry lookups, and is
    closed with the facade.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        settings: ProbeSettings | None = None,
        registry: VersionRegistry | None = None,
        cancel: CancellationToken | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self.cancel = cancel or CancellationToken()
        if registry is None:
            registry = EndOfLifeRegistry(self.http_client, self.settings)
            if self.settings.registry_cache:
                registry = CachingVersionRegistry(registry)
        self.registry = registry
        self.engine = ProbeEngine(
            LatencyProber(self.http_client, self.settings, cancel=self.cancel),
            TlsValidator(self.settings, cancel=self.cancel),
            SupportClassifier(self.registry, cancel=self.cancel),
            cancel=self.cancel,
        )

    def probe(self, target: str) -> ProbeResult:
        """Probe one target, raising SiteProbeError on failure."""
        return self.engine.probe_target(target)

    def run(self, targets: Iterable[str]) -> list[ProbeResult]:
        return self.engine.run(targets)

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> SiteProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
