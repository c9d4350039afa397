# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""SiteProbe CLI."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..config import ProbeSettings, load_probe_settings
from ..errors import ProbeCancelled
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import ProbeResult
from ..runtime import SiteProbe
from ..utils.cancel import CancellationToken
from .csvio import default_output_path, read_targets, write_results

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Probe websites for latency, TLS validity and end-of-life server software"
    )
    parser.add_argument("csv_path", help="CSV file listing the sites to probe")
    parser.add_argument(
        "-c",
        "--column",
        type=int,
        default=0,
        help="Zero-based column holding the URLs (default: 0)",
    )
    parser.add_argument(
        "--skip-header",
        action="store_true",
        help="Ignore the first row of the CSV file",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Result CSV path (default: site_info_<timestamp>.csv)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of writing a CSV file",
    )
    parser.add_argument(
        "--cache-registry",
        action="store_true",
        help="Reuse end-of-life lookups across sites within this run",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip certificate verification on the HTTP fetches",
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


def _print_json(results: list[ProbeResult]) -> None:
    payload: list[dict[str, Any]] = [result.to_dict() for result in results]
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


@contextmanager
def _cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Turn the first Ctrl-C into a batch cancellation; a second one interrupts as usual."""

    def handle_interrupt(_signum, _frame) -> None:  # noqa: ANN001
        signal.signal(signal.SIGINT, signal.default_int_handler)
        token.cancel()

    previous = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.default_int_handler)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.column < 0:
        parser.error("--column must be zero or greater")

    try:
        targets = read_targets(args.csv_path, args.column, skip_header=args.skip_header)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error reading CSV file: %s", exc)
        return 1

    settings: ProbeSettings = load_probe_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.cache_registry:
        settings.registry_cache = True

    http_client = create_default_http_client(settings)

    with SiteProbe(http_client=http_client, settings=settings) as probe:
        try:
            with _cancel_on_interrupt(probe.cancel):
                results = probe.run(targets)
        except (ProbeCancelled, KeyboardInterrupt):
            logger.error("Probe batch cancelled")
            return 130

    if args.json:
        _print_json(results)
        return 0

    output = args.output or str(default_output_path())
    try:
        write_results(output, results)
    except OSError as exc:
        logger.error("Error writing CSV file: %s", exc)
        return 1

    logger.info("Site information written to %s", output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
