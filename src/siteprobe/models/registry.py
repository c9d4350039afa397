# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Version-cycle records from an end-of-life registry."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any


@dataclass(frozen=True)
class VersionRecord:
    """
    A release cycle and its end-of-life marker.

    `eol` is False when the cycle has no announced end, True when it ended on an
    unpublished date, or the end date itself.
    """

    cycle: str
    eol: date | bool

    def is_maintained(self, now: datetime) -> bool:
        if self.eol is False:
            return True
        if isinstance(self.eol, bool):
            return False
        eol_at = datetime(self.eol.year, self.eol.month, self.eol.day, tzinfo=timezone.utc)
        return eol_at > now

    def matches(self, version: str) -> bool:
        return bool(self.cycle) and version.startswith(self.cycle)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> VersionRecord:
        """
        Parse one registry entry.

        Raises ValueError for entries outside the `{"cycle": str, "eol": false|true|"YYYY-MM-DD"}` shape.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        cycle = data.get("cycle")
        if isinstance(cycle, bool) or not isinstance(cycle, (str, int, float)):
            raise ValueError(f"invalid cycle: {cycle!r}")
        raw_eol = data.get("eol")
        if isinstance(raw_eol, bool):
            eol: date | bool = raw_eol
        elif isinstance(raw_eol, str):
            eol = datetime.strptime(raw_eol, "%Y-%m-%d").date()
        else:
            raise ValueError(f"invalid eol: {raw_eol!r}")
        return cls(cycle=str(cycle), eol=eol)
