# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""parsers.py"""
from argparse import ArgumentParser, BooleanOptionalAction, Namespace, _SubParsersAction

from devflow.commands import BranchOptions, CommitOptions, FixupOptions, PrOptions


def comma_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def get_root_parser(prog: str = "devflow") -> ArgumentParser:
    """
    Construct the root-level parser with the options shared by every command.

    Includes:
        -v / --verbose   : Enable debug logging on the console.
        --debug-hooks    : Log every step render through the flow hooks.
        --log-file PATH  : Also write logs to PATH.
        --json-log-file  : Write the log file as JSON lines.
        --version        : Print the devflow version.
    """
    parser = ArgumentParser(
        prog=prog,
        description="Interactive git and GitHub workflows with back navigation.",
        epilog="Press Esc inside any prompt to return to the previous question.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help=f"Enable debug logging for {prog}."
    )
    parser.add_argument(
        "--debug-hooks",
        action="store_true",
        help="Enable step lifecycle debug logging.",
    )
    parser.add_argument("--log-file", default=None, help="Write logs to this file.")
    parser.add_argument(
        "--json-log-file",
        action="store_true",
        help="Format the log file as JSON.",
    )
    parser.add_argument("--version", action="store_true", help=f"Show {prog} version")
    return parser


def _add_common(parser: ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run", action="store_true", help="Preview without making changes."
    )
    parser.add_argument(
        "-y", "--yes", action="store_true", help="Skip optional prompts and confirmation."
    )


def get_subparsers(parser: ArgumentParser) -> _SubParsersAction:
    subparsers = parser.add_subparsers(
        title="Devflow Commands", dest="command", metavar="COMMAND"
    )

    branch = subparsers.add_parser("branch", help="Create a branch from the naming format")
    branch.add_argument("--type", help="Branch type, e.g. feat or fix.")
    branch.add_argument("--ticket", help="Ticket identifier.")
    branch.add_argument("--description", help="Short description.")
    _add_common(branch)

    commit = subparsers.add_parser("commit", help="Create a conventional commit")
    commit.add_argument("--type", help="Commit type, e.g. feat or fix.")
    commit.add_argument("--scope", help="Commit scope.")
    commit.add_argument("-m", "--message", help="Commit subject message.")
    commit.add_argument("--body", help="Commit body.")
    commit.add_argument(
        "--breaking",
        action=BooleanOptionalAction,
        default=None,
        help="Mark the commit as a breaking change.",
    )
    commit.add_argument("--breaking-desc", help="Breaking change description.")
    commit.add_argument(
        "-a", "--all", action="store_true", help="Stage all changes before committing."
    )
    commit.add_argument(
        "--files", type=comma_list, default=[], help="Comma-separated files to stage."
    )
    _add_common(commit)

    fixup = subparsers.add_parser(
        "fixup", help="Create a fixup commit for an earlier commit on the branch"
    )
    fixup.add_argument("--target", help="Hash (or prefix) of the commit to fix up.")
    fixup.add_argument(
        "-a", "--all", action="store_true", help="Stage all changes before committing."
    )
    fixup.add_argument(
        "--files", type=comma_list, default=[], help="Comma-separated files to stage."
    )
    fixup.add_argument(
        "--autosquash",
        action=BooleanOptionalAction,
        default=None,
        help="Squash the fixup into its target right away.",
    )
    _add_common(fixup)

    pr = subparsers.add_parser("pr", help="Create or update a pull request")
    pr.add_argument("--base", help="Base branch.")
    pr.add_argument("--title", help="Pull request title.")
    pr.add_argument("--summary", help="Pull request summary.")
    _add_common(pr)

    return subparsers


def get_parsers() -> tuple[ArgumentParser, _SubParsersAction]:
    root_parser = get_root_parser()
    subparsers = get_subparsers(root_parser)
    return root_parser, subparsers


def branch_options(args: Namespace) -> BranchOptions:
    return BranchOptions(
        type=args.type,
        ticket=args.ticket,
        description=args.description,
        dry_run=args.dry_run,
        yes=args.yes,
    )


def commit_options(args: Namespace) -> CommitOptions:
    return CommitOptions(
        type=args.type,
        scope=args.scope,
        message=args.message,
        body=args.body,
        breaking=args.breaking,
        breaking_desc=args.breaking_desc,
        all=args.all,
        files=args.files,
        dry_run=args.dry_run,
        yes=args.yes,
    )


def fixup_options(args: Namespace) -> FixupOptions:
    return FixupOptions(
        target=args.target,
        all=args.all,
        files=args.files,
        autosquash=args.autosquash,
        dry_run=args.dry_run,
        yes=args.yes,
    )


def pr_options(args: Namespace) -> PrOptions:
    return PrOptions(
        base=args.base,
        title=args.title,
        summary=args.summary,
        dry_run=args.dry_run,
        yes=args.yes,
    )
