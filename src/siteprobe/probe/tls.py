# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Leaf certificate date checks over a raw TLS connection."""

from __future__ import annotations

import logging
import socket
import ssl
from collections.abc import Callable
from datetime import datetime, timezone

from cryptography import x509

from ..config import ProbeSettings, load_probe_settings
from ..errors import CertificateExpiredError, TlsError, categorize_exception
from ..http.url import target_host
from ..utils.cancel import CancellationToken

logger = logging.getLogger(__name__)

TLS_PORT = 443
# OpenSSL X509_V_ERR_CERT_HAS_EXPIRED
CERT_HAS_EXPIRED = 10

CertificateFetcher = Callable[[str, int, float, bool], bytes]


def fetch_leaf_certificate(host: str, port: int, timeout: float, verify: bool) -> bytes:
    """Open a TLS connection and return the peer's leaf certificate in DER form."""
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    with socket.create_connection((host, port), timeout=timeout) as sock:
        with context.wrap_socket(sock, server_hostname=host) as ssock:
            der_cert = ssock.getpeercert(binary_form=True)
    if not der_cert:
        raise ssl.SSLError("no certificate presented by peer")
    return der_cert


def certificate_in_window(cert: x509.Certificate, now: datetime) -> bool:
    """True iff not_before < now < not_after; the boundaries themselves are invalid."""
    return cert.not_valid_before_utc < now < cert.not_valid_after_utc


class TlsValidator:
    """Connects to port 443 and checks the leaf certificate's validity window."""

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        *,
        fetcher: CertificateFetcher = fetch_leaf_certificate,
        clock: Callable[[], datetime] | None = None,
        cancel: CancellationToken | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self.fetcher = fetcher
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.cancel = cancel

    def validate(self, target: str) -> bool:
        host = target_host(target)
        if not host:
            raise TlsError(str(target), "no host in target")
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()

        try:
            der_cert = self.fetcher(host, TLS_PORT, self.settings.tls_timeout, self.settings.tls_verify)
        except ssl.SSLCertVerificationError as exc:
            if getattr(exc, "verify_code", None) == CERT_HAS_EXPIRED:
                raise CertificateExpiredError(host, getattr(exc, "verify_message", None) or None) from exc
            raise TlsError(host, str(exc), categorize_exception(exc)) from exc
        except OSError as exc:
            raise TlsError(host, str(exc) or type(exc).__name__, categorize_exception(exc)) from exc

        try:
            cert = x509.load_der_x509_certificate(der_cert)
        except ValueError as exc:
            raise TlsError(host, f"unreadable certificate: {exc}") from exc

        valid = certificate_in_window(cert, self.clock())
        logger.debug("Certificate for %s valid=%s (not_after=%s)", host, valid, cert.not_valid_after_utc)
        return valid


__all__ = ["CERT_HAS_EXPIRED", "TLS_PORT", "TlsValidator", "certificate_in_window", "fetch_leaf_certificate"]
