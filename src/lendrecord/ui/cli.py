# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from lendrecord.adapters.files import InputError
from lendrecord.app import audit_fidelity, detect_conflicts, resolve_sources
from lendrecord.common import configure_logging
from lendrecord.config import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve canonical loan application records")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Build the canonical record from sources")
    resolve.add_argument(
        "sources",
        nargs="+",
        type=Path,
        help="JSON source documents, highest precedence first",
    )
    resolve.add_argument(
        "--require",
        action="append",
        default=[],
        metavar="FIELD",
        help="Canonical field that must be present (repeatable)",
    )

    conflicts = subparsers.add_parser("conflicts", help="Group observations and flag conflicts")
    conflicts.add_argument(
        "observations",
        type=Path,
        help="JSON array of field observations",
    )
    conflicts.add_argument(
        "--only-conflicts",
        action="store_true",
        help="Only print columns whose observations disagree",
    )

    audit = subparsers.add_parser("audit", help="Diff accepted fields against the record")
    audit.add_argument(
        "sources",
        nargs="+",
        type=Path,
        help="JSON source documents, highest precedence first",
    )
    audit.add_argument(
        "--accepted",
        action="append",
        required=True,
        metavar="FIELD",
        help="Field accepted by the record schema (repeatable)",
    )

    return parser.parse_args(list(argv))


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=False, default=str))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "resolve":
            result = resolve_sources(parsed_args.sources, required=parsed_args.require)
            _emit(result.to_json())
            if result.missing:
                log.warning("Missing required fields: %s", ", ".join(result.missing))
        elif parsed_args.command == "conflicts":
            report = detect_conflicts(parsed_args.observations)
            _emit(report.to_json(only_conflicts=parsed_args.only_conflicts))
        elif parsed_args.command == "audit":
            fidelity = audit_fidelity(parsed_args.sources, accepted=parsed_args.accepted)
            _emit(
                {
                    "accepted": list(fidelity.accepted),
                    "reachable": list(fidelity.reachable),
                    "unreachable": list(fidelity.unreachable),
                    "unexpected": list(fidelity.unexpected),
                    "complete": fidelity.complete,
                }
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (InputError, ConfigurationError):
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


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
