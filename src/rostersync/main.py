#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from rostersync.app import import_roster
from rostersync.config import ConfigurationError, configure_logging, get_reconcile_config
from rostersync.domain.errors import SourceError
from rostersync.domain.reconciliation import BatchReport, CancellationToken

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_CANCELLATION = CancellationToken()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile a user roster with identity and profile stores"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    roster = subparsers.add_parser("import", help="Import users from a CSV roster")
    roster.add_argument("csv_path", type=Path, help="Path to the roster CSV file")
    roster.add_argument(
        "--backend",
        choices=("firebase", "sql"),
        default="firebase",
        help="Stores to reconcile against (default: %(default)s)",
    )
    roster.add_argument(
        "--delimiter",
        type=str,
        default=",",
        help="Field delimiter of the roster file (default: %(default)r)",
    )
    roster.add_argument(
        "--skip-unchanged",
        action="store_true",
        help="Do not re-write identities whose uid, email and name already match",
    )
    roster.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URI for the sql backend (defaults to DATABASE_URI or the data dir)",
    )
    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if len(args.delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {args.delimiter!r}")
    if args.database_uri and args.backend != "sql":
        raise ValueError("--database-uri only applies to --backend sql")


def _log_report(report: BatchReport) -> None:
    log.info(
        "Processed %s records: %s succeeded, %s failed%s",
        report.attempted,
        report.succeeded,
        report.failed,
        " (cancelled)" if report.cancelled else "",
    )
    for failure in report.failures:
        log.error(
            "Record %s failed [%s] %s: %s",
            failure.index,
            failure.kind,
            failure.email or "<no email>",
            failure.message,
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate_args(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(verbose=parsed_args.verbose)

    try:
        report = import_roster(
            parsed_args.csv_path,
            backend=parsed_args.backend,
            config=get_reconcile_config(skip_unchanged=parsed_args.skip_unchanged),
            delimiter=parsed_args.delimiter,
            database_uri=parsed_args.database_uri,
            cancellation=_CANCELLATION,
        )
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except SourceError:
        log.exception("Cannot read roster")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)

    _log_report(report)
    if not report.ok:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Stop at the next record boundary; a second Ctrl+C aborts immediately."""
    if _CANCELLATION.cancelled:
        raise KeyboardInterrupt
    log.info("Stop requested (Ctrl+C); finishing the current record")
    _CANCELLATION.cancel()


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
