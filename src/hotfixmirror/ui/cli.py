# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from hotfixmirror.app import list_versions, sync_hotfixes
from hotfixmirror.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from hotfixmirror.domain.model import RunReport

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mirror upstream hotfixes into a database and a GitHub repository"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log step attempts and skipped writes",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Run one reconciliation")
    sync.add_argument(
        "--json",
        action="store_true",
        help="Print the run report as JSON on stdout",
    )

    subparsers.add_parser("versions", help="List the recorded upstream versions")

    return parser.parse_args(list(argv))


def _log_report(report: RunReport) -> None:
    for outcome in report.outcomes:
        if outcome.success:
            log.info("%s: %s", outcome.filename, outcome.status.value)
        else:
            log.error("%s: failed (%s)", outcome.filename, outcome.reason)
    if not report.success:
        log.error("Run aborted: %s", report.reason)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "sync":
            report = sync_hotfixes()
            _log_report(report)
            if parsed_args.json:
                print(json.dumps(report.to_dict(), indent=2))
            exit_code = EXIT_OK if report.all_succeeded else EXIT_FAILURE
        elif parsed_args.command == "versions":
            for version in list_versions():
                print(version)
            exit_code = EXIT_OK
        else:
            log.error("Unsupported command: %s", parsed_args.command)
            sys.exit(EXIT_USAGE)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(EXIT_USAGE)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(EXIT_FAILURE)

    if exit_code != EXIT_OK:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
