# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared utilities."""

from .cancel import CancellationToken

__all__ = ["CancellationToken"]
