# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
End-of-life registry access.

The classifier only depends on the `VersionRegistry` protocol. The default
implementation reads the endoflife.date JSON API through the shared HttpClient;
tests and offline runs substitute their own.
"""

from __future__ import annotations

import json
import logging
from typing import Protocol
from urllib.parse import quote

from .config import ProbeSettings, load_probe_settings
from .errors import RegistryError
from .http.client import HttpClient
from .http.models import HttpRequest
from .models.registry import VersionRecord

logger = logging.getLogger(__name__)


class VersionRegistry(Protocol):
    def fetch(self, product: str) -> list[VersionRecord]: ...


def product_slug(product: str) -> str:
    """endoflife.date product identifiers are lowercase path segments."""
    return quote(str(product or "").strip().lower(), safe="-_.")


class EndOfLifeRegistry(VersionRegistry):
    """Fetches the release-cycle table of a product on every call."""

    def __init__(self, http_client: HttpClient, settings: ProbeSettings | None = None):
        self.http_client = http_client
        self.settings = settings or load_probe_settings()

    def url_for(self, product: str) -> str:
        return self.settings.registry_url.format(product=product_slug(product))

    def fetch(self, product: str) -> list[VersionRecord]:
        if not product_slug(product):
            raise RegistryError(str(product), "empty product name")
        url = self.url_for(product)
        response = self.http_client.request(
            HttpRequest(url=url, headers={"Accept": "application/json"}, timeout=self.settings.registry_timeout)
        )
        if not response.ok:
            raise RegistryError(product, response.error_message or "request failed")
        if response.status_code is None or not 200 <= response.status_code < 300:
            raise RegistryError(product, f"unexpected status {response.status_code}")

        try:
            payload = json.loads(response.text)
        except ValueError as exc:
            raise RegistryError(product, f"invalid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise RegistryError(product, f"expected a JSON array, got {type(payload).__name__}")

        records: list[VersionRecord] = []
        for entry in payload:
            try:
                records.append(VersionRecord.from_mapping(entry))
            except ValueError as exc:
                raise RegistryError(product, f"malformed entry: {exc}") from exc
        logger.debug("Fetched %d cycles for %s", len(records), product)
        return records


class CachingVersionRegistry(VersionRegistry):
    """
    Memoizes another registry per product for the lifetime of this object.

    Failures are not cached, so a transient error is retried on the next lookup.
    """

    def __init__(self, inner: VersionRegistry):
        self.inner = inner
        self._cache: dict[str, list[VersionRecord]] = {}

    def fetch(self, product: str) -> list[VersionRecord]:
        key = product_slug(product)
        if key not in self._cache:
            self._cache[key] = list(self.inner.fetch(product))
        return list(self._cache[key])

    def clear(self) -> None:
        self._cache.clear()


__all__ = ["CachingVersionRegistry", "EndOfLifeRegistry", "VersionRegistry", "product_slug"]
