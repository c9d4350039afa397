# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Support-status classification against an end-of-life registry."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from ..errors import RegistryError
from ..models.registry import VersionRecord
from ..models.result import SupportStatus
from ..registry import VersionRegistry
from ..utils.cancel import CancellationToken

logger = logging.getLogger(__name__)

PHP_PRODUCT = "php"
MYSQL_PRODUCT = "mysql"
WORDPRESS_PRODUCT = "wordpress"


def is_supported(version: str, records: Iterable[VersionRecord], now: datetime) -> bool:
    """
    Decide support from the first cycle that prefixes `version`.

    Registry order decides ties; no matching cycle means unsupported.
    """
    for record in records:
        if record.matches(version):
            return record.is_maintained(now)
    return False


@dataclass(frozen=True)
class SupportReport:
    php: SupportStatus = SupportStatus.UNKNOWN
    mysql: SupportStatus = SupportStatus.UNKNOWN
    wordpress: SupportStatus = SupportStatus.UNKNOWN
    web_server: SupportStatus = SupportStatus.UNKNOWN


class SupportClassifier:
    def __init__(
        self,
        registry: VersionRegistry,
        *,
        clock: Callable[[], datetime] | None = None,
        cancel: CancellationToken | None = None,
    ):
        self.registry = registry
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.cancel = cancel

    def classify(self, product: str, version: str) -> SupportStatus:
        """Unknown when there is nothing to look up or the registry is unavailable."""
        if not version or not product:
            return SupportStatus.UNKNOWN
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()
        try:
            records = self.registry.fetch(product)
        except RegistryError as exc:
            logger.warning("%s", exc)
            return SupportStatus.UNKNOWN
        if is_supported(version, records, self.clock()):
            return SupportStatus.SUPPORTED
        return SupportStatus.OUTDATED

    def classify_site(
        self,
        *,
        php_version: str,
        mysql_version: str,
        wordpress_version: str,
        web_server: str,
        web_server_version: str,
    ) -> SupportReport:
        web_server_status = SupportStatus.UNKNOWN
        if web_server and web_server_version:
            web_server_status = self.classify(web_server, web_server_version)
        return SupportReport(
            php=self.classify(PHP_PRODUCT, php_version),
            mysql=self.classify(MYSQL_PRODUCT, mysql_version),
            wordpress=self.classify(WORDPRESS_PRODUCT, wordpress_version),
            web_server=web_server_status,
        )


__all__ = ["SupportClassifier", "SupportReport", "is_supported"]
