# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110) and a name may repeat.
Callers hand us plain dicts, dicts of lists, httpx.Headers or lists of pairs, so
everything is flattened into lowercase `(name, value)` pairs before use.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


def iter_header_items(headers: Any) -> Iterator[tuple[str, str]]:
    """
    Yield `(lowercase name, value)` for every header value.

    Accepted shapes:
    - objects exposing `multi_items()` (httpx.Headers)
    - mappings whose values are strings or sequences of strings
    - iterables of `(name, value)` pairs
    """
    if not headers:
        return

    multi_items = getattr(headers, "multi_items", None)
    if callable(multi_items):
        pairs: Any = multi_items()
    elif isinstance(headers, Mapping):
        pairs = headers.items()
    else:
        pairs = headers

    for key, value in pairs:
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                yield name, "" if item is None else str(item)
        else:
            yield name, "" if value is None else str(value)


__all__ = ["iter_header_items"]
