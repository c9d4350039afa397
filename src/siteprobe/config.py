# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for SiteProbe."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"SiteProbe/{__version__}"
DEFAULT_REGISTRY_URL = "https://endoflife.date/api/{product}.json"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ProbeSettings:
    """Network defaults for probing, TLS checks and registry lookups."""

    timeout: float = 10.0
    max_attempts: int = 5
    retry_delay: float = 2.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024
    tls_timeout: float = 10.0
    tls_verify: bool = True
    registry_url: str = DEFAULT_REGISTRY_URL
    registry_timeout: float = 10.0
    registry_cache: bool = False

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("SITEPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        registry_url = os.getenv("SITEPROBE_REGISTRY_URL", cls.registry_url)
        if "{product}" not in registry_url:
            registry_url = cls.registry_url
        return cls(
            timeout=_float_env("SITEPROBE_HTTP_TIMEOUT", cls.timeout),
            max_attempts=_int_env("SITEPROBE_HTTP_ATTEMPTS", cls.max_attempts),
            retry_delay=_float_env("SITEPROBE_HTTP_RETRY_DELAY", cls.retry_delay),
            user_agent=os.getenv("SITEPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("SITEPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("SITEPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
            tls_timeout=_float_env("SITEPROBE_TLS_TIMEOUT", cls.tls_timeout),
            tls_verify=_bool_env("SITEPROBE_TLS_VERIFY", cls.tls_verify),
            registry_url=registry_url,
            registry_timeout=_float_env("SITEPROBE_REGISTRY_TIMEOUT", cls.registry_timeout),
            registry_cache=_bool_env("SITEPROBE_REGISTRY_CACHE", cls.registry_cache),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
