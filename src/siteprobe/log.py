# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for SiteProbe."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# httpx logs every request at INFO; below DEBUG these would interleave with
# the per-target progress lines.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(level: str | None = None) -> int:
    """Level name from the argument or SITEPROBE_LOG_LEVEL; unknown names mean INFO."""
    name = (level or os.getenv("SITEPROBE_LOG_LEVEL") or "INFO").strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None) -> int:
    """Configure root logging for the CLI and return the effective level."""
    effective_level = resolve_log_level(level)
    logging.basicConfig(level=effective_level, format=LOG_FORMAT)
    library_level = logging.DEBUG if effective_level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
    return effective_level


__all__ = ["LOG_FORMAT", "resolve_log_level", "setup_logging"]
