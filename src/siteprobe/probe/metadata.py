# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Server, PHP, WordPress and caching markers from a single response."""

from __future__ import annotations

import re
from typing import Any

from ..http.headers import iter_header_items
from ..models.result import SiteMetadata

WORDPRESS_GENERATOR_RE = re.compile(r'content="WordPress (\d+\.\d+(?:\.\d+)?)"')


def extract_metadata(headers: Any) -> SiteMetadata:
    """
    Read Server, X-Powered-By and Cache-Control.

    Every value of every header is visited in order, so a repeated header
    resolves to its last occurrence.
    """
    php_version = ""
    caching = False
    web_server = ""
    web_server_version = ""
    cache_control = ""
    x_powered_by = ""

    for name, value in iter_header_items(headers):
        if name == "server":
            web_server, _, web_server_version = value.partition("/")
        elif name == "x-powered-by":
            x_powered_by = value
            if "PHP" in value:
                _, sep, version = value.partition("/")
                if sep:
                    php_version = version
        elif name == "cache-control":
            cache_control = value
            if "max-age=0" in value:
                caching = False
            elif "max-age" in value:
                caching = True

    return SiteMetadata(
        php_version=php_version,
        caching=caching,
        web_server=web_server,
        web_server_version=web_server_version,
        cache_control=cache_control,
        x_powered_by=x_powered_by,
    )


def extract_wordpress_version(body: str | None) -> str:
    match = WORDPRESS_GENERATOR_RE.search(body or "")
    return match.group(1) if match else ""


__all__ = ["WORDPRESS_GENERATOR_RE", "extract_metadata", "extract_wordpress_version"]
