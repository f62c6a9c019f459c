# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Entry point for the `devflow` command.

Exit codes:
    0: success, a declined confirmation, or a prompt cancelled with Ctrl+C/Ctrl+D.
    1: a devflow error (bad git state, missing gh, ...) or an unexpected failure.
"""
import asyncio
import logging
import sys
from argparse import Namespace
from typing import Any

from rich.markup import escape

from devflow.commands import branch_command, commit_command, fixup_command, pr_command
from devflow.console import console
from devflow.exceptions import DevflowError
from devflow.logger import logger
from devflow.parsers import (
    branch_options,
    commit_options,
    fixup_options,
    get_parsers,
    pr_options,
)
from devflow.signals import CancelSignal
from devflow.themes import OneColors
from devflow.utils import setup_logging
from devflow.version import __version__


async def run_command(args: Namespace) -> Any:
    hooks = args.debug_hooks
    if args.command == "branch":
        return await branch_command(branch_options(args), logging_hooks=hooks)
    if args.command == "commit":
        return await commit_command(commit_options(args), logging_hooks=hooks)
    if args.command == "fixup":
        return await fixup_command(fixup_options(args), logging_hooks=hooks)
    if args.command == "pr":
        return await pr_command(pr_options(args), logging_hooks=hooks)
    raise DevflowError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    root_parser, _ = get_parsers()
    args = root_parser.parse_args(argv)

    if args.version:
        console.print(f"[{OneColors.GREEN_b}]devflow v{__version__}[/]")
        sys.exit(0)
    if not args.command:
        root_parser.print_help()
        sys.exit(1)

    setup_logging(
        log_filename=args.log_file,
        json_log_to_file=args.json_log_file,
        console_log_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        asyncio.run(run_command(args))
    except (CancelSignal, KeyboardInterrupt):
        logger.info("[CancelSignal] <- Exiting %s.", args.command)
        console.print("\nCancelled.")
        sys.exit(0)
    except DevflowError as error:
        logger.debug("%s failed: %s", args.command, error)
        console.print(f"[{OneColors.DARK_RED}]❌ Error: {escape(str(error))}[/]")
        sys.exit(1)
    except Exception as error:
        logger.exception("Unexpected error in %s: %s", args.command, error)
        console.print(f"[{OneColors.DARK_RED}]❌ Unexpected error: {escape(str(error))}[/]")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
