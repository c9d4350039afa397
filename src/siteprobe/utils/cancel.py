# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cooperative cancellation for probe batches.

A token is checked before every network call and interrupts retry pauses, so a
long batch can stop between suspension points instead of only at process exit.
"""

from __future__ import annotations

import threading

from ..errors import ProbeCancelled


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ProbeCancelled("probe batch cancelled")

    def sleep(self, seconds: float) -> None:
        """Sleep up to `seconds`, returning early (and raising) on cancellation."""
        if seconds > 0 and self._event.wait(seconds):
            raise ProbeCancelled("probe batch cancelled")
        self.raise_if_cancelled()


__all__ = ["CancellationToken"]
