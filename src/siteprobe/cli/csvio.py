# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""CSV input/output for batch runs."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from ..models import CSV_HEADER, ProbeResult

logger = logging.getLogger(__name__)

OUTPUT_NAME_FORMAT = "site_info_%Y%m%d_%H%M%S.csv"


def read_targets(path: str | Path, column: int, *, skip_header: bool = False) -> list[str]:
    """Return the non-empty values of `column`; rows too short for it are skipped."""
    logger.info("Reading CSV file: %s", path)
    targets: list[str] = []
    with open(path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.reader(handle)
        for index, row in enumerate(reader):
            if skip_header and index == 0:
                continue
            if column < len(row):
                value = row[column].strip()
                if value:
                    targets.append(value)
    return targets


def default_output_path(now: datetime | None = None) -> Path:
    return Path((now or datetime.now()).strftime(OUTPUT_NAME_FORMAT))


def write_results(path: str | Path, results: Iterable[ProbeResult]) -> None:
    logger.info("Writing results to CSV file: %s", path)
    with open(path, "w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        for result in results:
            writer.writerow(result.to_row())


__all__ = ["OUTPUT_NAME_FORMAT", "default_output_path", "read_targets", "write_results"]
