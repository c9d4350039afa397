# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared across probes."""

from __future__ import annotations

from urllib.parse import urlsplit

_SCHEMES = ("http://", "https://")


def ensure_scheme(target: str, default_scheme: str = "http") -> str:
    """
    Prefix `default_scheme://` when the target carries no http(s) scheme.

    Example:
      example.com/blog -> http://example.com/blog
    """
    raw = str(target or "").strip()
    if raw.lower().startswith(_SCHEMES):
        return raw
    return f"{default_scheme}://{raw}"


def target_host(target: str) -> str:
    """Return the bare hostname of a target (scheme, port, path and userinfo dropped)."""
    parsed = urlsplit(ensure_scheme(target, "https"))
    host = parsed.hostname or ""
    return host.rstrip(".")


__all__ = ["ensure_scheme", "target_host"]
