# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from traitmix.adapters.description import DescriptionError, load_description
from traitmix.app import describe_chains, list_demos, run_demo, run_description
from traitmix.config import (
    ConfigurationError,
    configure_logging,
    get_description_path,
    get_runtime_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Linearize and run trait compositions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List the built-in demos")

    demo = subparsers.add_parser("demo", help="Run built-in demos")
    demo.add_argument(
        "name",
        nargs="?",
        help="Demo to run (see `list`)",
    )
    demo.add_argument(
        "--all",
        action="store_true",
        help="Run every built-in demo in turn",
    )

    run = subparsers.add_parser("run", help="Compose a JSON description and invoke operations")
    run.add_argument(
        "file",
        nargs="?",
        help="Path to the description (defaults to $TRAITMIX_DESCRIPTION)",
    )
    run.add_argument(
        "--op",
        action="append",
        dest="ops",
        help="Operation to invoke; repeat for several (defaults to the description's list)",
    )

    chains = subparsers.add_parser("chains", help="Print the resolution chain of each operation")
    chains.add_argument(
        "file",
        nargs="?",
        help="Path to the description (defaults to $TRAITMIX_DESCRIPTION)",
    )

    args = parser.parse_args(list(argv))
    if args.command == "demo" and not args.all and args.name is None:
        parser.error("demo requires a NAME or --all")
    return args


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        config = get_runtime_config()
    except ConfigurationError:
        configure_logging()
        log.exception("Invalid configuration")
        sys.exit(2)
    configure_logging(level=config.log_level, trace_dispatch=config.trace_dispatch)

    parsed_args = _parse_args(args_list)
    try:
        description = None
        if parsed_args.command in {"run", "chains"}:
            description = load_description(get_description_path(parsed_args.file))
        elif parsed_args.command == "demo" and not parsed_args.all:
            if parsed_args.name not in list_demos():
                raise ValueError(f"Unknown demo {parsed_args.name!r}")  # noqa: TRY301
    except (ConfigurationError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "list":
            lines = list_demos()
        elif parsed_args.command == "demo":
            names = list_demos() if parsed_args.all else [parsed_args.name]
            lines = [line for name in names for line in run_demo(name, config=config)]
        elif parsed_args.command == "run" and description is not None:
            lines = run_description(description, ops=parsed_args.ops, config=config)
        elif parsed_args.command == "chains" and description is not None:
            lines = describe_chains(description, config=config)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except DescriptionError:
        # Dangling references only surface once the description is translated.
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error while running %s", parsed_args.command)
        sys.exit(1)

    for line in lines:
        print(line)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
