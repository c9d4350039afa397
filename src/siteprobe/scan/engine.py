# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe engine: latency samples, metadata fetch, TLS check and classification per target."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..errors import CertificateExpiredError, SiteProbeError
from ..models import ProbeResult, SslStatus
from ..models.result import format_ms
from ..probe.classifier import SupportClassifier
from ..probe.latency import LatencyProber
from ..probe.metadata import extract_metadata, extract_wordpress_version
from ..probe.tls import TlsValidator
from ..utils.cancel import CancellationToken

logger = logging.getLogger(__name__)

LATENCY_SAMPLES = 3


class ProbeEngine:
    """
    Coordinates the probes for a single target and folds a batch of targets.

    A target either yields one complete record, an expired-certificate record
    carrying only its URL and SSL status, or nothing at all.
    """

    def __init__(
        self,
        prober: LatencyProber,
        tls_validator: TlsValidator,
        classifier: SupportClassifier,
        *,
        cancel: CancellationToken | None = None,
    ):
        self.prober = prober
        self.tls_validator = tls_validator
        self.classifier = classifier
        self.cancel = cancel

    def probe_target(self, target: str) -> ProbeResult:
        samples = [self.prober.probe(target).latency for _ in range(LATENCY_SAMPLES)]
        # Mean of the raw samples; ordering is only for presentation.
        average = sum(samples) / len(samples)
        latencies = tuple(sorted(samples, reverse=True))
        logger.info(
            "Fetching site info for URL: %s - TTFB1: %sms, TTFB2: %sms, TTFB3: %sms, Average TTFB: %sms",
            target,
            *(format_ms(value) for value in latencies),
            format_ms(average),
        )

        response = self.prober.probe(target).response
        metadata = extract_metadata(response.header_items or response.headers)
        wordpress_version = extract_wordpress_version(response.text)

        try:
            ssl_valid = self.tls_validator.validate(target)
        except CertificateExpiredError as exc:
            logger.warning("Certificate expired for %s: %s", target, exc)
            return ProbeResult.expired(target)

        support = self.classifier.classify_site(
            php_version=metadata.php_version,
            mysql_version=metadata.mysql_version,
            wordpress_version=wordpress_version,
            web_server=metadata.web_server,
            web_server_version=metadata.web_server_version,
        )

        return ProbeResult(
            url=target,
            ssl_valid=SslStatus.from_bool(ssl_valid),
            php_version=metadata.php_version,
            mysql_version=metadata.mysql_version,
            wordpress_version=wordpress_version,
            caching=metadata.caching,
            cache_control=metadata.cache_control,
            web_server=metadata.web_server,
            web_server_version=metadata.web_server_version,
            latencies=latencies,
            average_latency=average,
            x_powered_by=metadata.x_powered_by,
            php_status=support.php,
            mysql_status=support.mysql,
            web_server_status=support.web_server,
            wordpress_status=support.wordpress,
        )

    def run(self, targets: Iterable[str]) -> list[ProbeResult]:
        """Probe targets in order; failed targets are logged and left out."""
        results: list[ProbeResult] = []
        for target in targets:
            if self.cancel is not None:
                self.cancel.raise_if_cancelled()
            try:
                results.append(self.probe_target(target))
            except SiteProbeError as exc:
                logger.error("Error fetching site info for %s: %s", target, exc)
        return results


__all__ = ["LATENCY_SAMPLES", "ProbeEngine"]
