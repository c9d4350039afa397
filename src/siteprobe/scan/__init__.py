# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch orchestration over the per-target probes."""

from .engine import ProbeEngine

__all__ = ["ProbeEngine"]
