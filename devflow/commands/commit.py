# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
commit.py

Builds conventional commit messages interactively.

Flow steps, in order:
    files -> type -> scope -> message -> breaking -> body -> breaking_desc -> confirm

`files` is skipped when something is already staged, `breaking_desc` is
skipped unless the change is breaking, and any step whose value came from a
CLI flag never renders. Nothing is staged or committed until the flow returns.
"""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field

from pydantic import Field
from rich.markup import escape

from devflow import git
from devflow.commands.common import ConfirmStep, print_preview
from devflow.config import DevflowConfig, Scope, load_config
from devflow.console import console
from devflow.flow import Flow, FlowState, PromptStep
from devflow.logger import logger
from devflow.prompts import PromptAdapter, PromptKind, PromptOptions
from devflow.selection import Choice
from devflow.themes import OneColors
from devflow.utils import dedupe


class CommitState(FlowState):
    files: list[str] = Field(default_factory=list)
    type: str = ""
    scope: str = ""
    message: str = ""
    is_breaking: bool = False
    body: str = ""
    breaking_desc: str = ""
    confirmed: bool = False


@dataclass
class CommitOptions:
    type: str | None = None
    scope: str | None = None
    message: str | None = None
    body: str | None = None
    breaking: bool | None = None
    breaking_desc: str | None = None
    all: bool = False
    files: list[str] = field(default_factory=list)
    dry_run: bool = False
    yes: bool = False


def file_matches_pattern(file: str, pattern: str) -> bool:
    """Match a path against a glob supporting `*`, `**` and `**/`."""
    regex = ""
    index = 0
    while index < len(pattern):
        if pattern.startswith("**/", index):
            regex += "(.+/)?"
            index += 3
        elif pattern.startswith("**", index):
            regex += ".*"
            index += 2
        elif pattern[index] == "*":
            regex += "[^/]*"
            index += 1
        else:
            regex += re.escape(pattern[index])
            index += 1
    return re.fullmatch(regex, file) is not None


def infer_scope_from_paths(files: list[str], scopes: list[Scope]) -> str | None:
    """Return the configured scope whose paths match the most files."""
    counts: Counter[str] = Counter()
    for file in files:
        for scope in scopes:
            if any(file_matches_pattern(file, pattern) for pattern in scope.paths):
                counts[scope.value] += 1
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def format_commit_message(
    commit_format: str,
    *,
    type: str,
    ticket: str,
    breaking: str,
    scope: str,
    message: str,
) -> str:
    """Fill `commit_format` and drop optional parts that ended up empty."""
    subject = commit_format
    for key, value in (
        ("type", type),
        ("ticket", ticket),
        ("breaking", breaking),
        ("scope", scope),
        ("message", message),
    ):
        subject = subject.replace(f"{{{key}}}", value, 1)
    return subject.replace("[]", "").replace("()", "")


def build_commit_message(
    config: DevflowConfig, state: CommitState, ticket: str
) -> tuple[str, str]:
    """Return the subject line and the full message for `state`."""
    subject = format_commit_message(
        config.commit_format,
        type=state.type,
        ticket=ticket,
        breaking="!" if state.is_breaking else "",
        scope=state.scope.strip(),
        message=state.message.strip(),
    )
    parts = [subject]
    if state.body.strip():
        parts.append(state.body.strip())
    footers = []
    if state.is_breaking and state.breaking_desc.strip():
        footers.append(f"BREAKING CHANGE: {state.breaking_desc.strip()}")
    if ticket and ticket != git.UNTRACKED:
        footers.append(f"Refs: {ticket}")
    if footers:
        parts.append("\n".join(footers))
    return subject, "\n\n".join(parts)


def _scope_options(
    config: DevflowConfig, state: CommitState, staged: list[str], base: str
) -> PromptOptions:
    inferred = infer_scope_from_paths(staged or state.files, config.scopes)
    if not config.scopes:
        return PromptOptions(
            "Scope (optional, leave blank to skip):",
            default=state.scope or git.infer_scope(base) or "",
        )
    choices = [Choice("", "none", "no scope")] + [
        Choice(scope.value, scope.value, scope.description) for scope in config.scopes
    ]
    if inferred:
        choices.sort(key=lambda choice: choice.value != inferred)

    def source(term: str) -> list[Choice]:
        return [choice for choice in choices if choice.matches(term)]

    default = state.scope or inferred or ""
    hint = f" {escape(f'[{default}]')}" if default else ""
    return PromptOptions(
        f"Scope{hint}:", choices=choices, source=source, default=default
    )


def build_commit_steps(
    config: DevflowConfig,
    options: CommitOptions,
    adapter: PromptAdapter,
    *,
    staged: list[str],
    changes: list[str],
    base: str = "main",
) -> list:
    def preview(state: CommitState) -> None:
        ticket = git.infer_ticket(config.branch_format)
        _, message = build_commit_message(config, state, ticket)
        print_preview("Commit Preview", message.splitlines())

    commit_types = [
        Choice(commit_type.value, commit_type.label) for commit_type in config.commit_types
    ]
    return [
        PromptStep(
            "files",
            "files",
            PromptKind.CHECKBOX,
            lambda state: PromptOptions(
                "Select files to stage:",
                choices=[
                    Choice(path, checked=not state.files or path in state.files)
                    for path in changes
                ],
                required=True,
            ),
            skip=lambda state: bool(staged),
            preset=options.all or bool(options.files),
            adapter=adapter,
        ),
        PromptStep(
            "type",
            "type",
            PromptKind.SELECT,
            lambda state: PromptOptions(
                "Select commit type:", choices=commit_types, default=state.type or None
            ),
            preset=options.type is not None,
            adapter=adapter,
        ),
        PromptStep(
            "scope",
            "scope",
            PromptKind.SEARCH if config.scopes else PromptKind.INPUT,
            lambda state: _scope_options(config, state, staged, base),
            transform=lambda value, state: {"scope": (value or "").strip()},
            preset=options.scope is not None,
            adapter=adapter,
        ),
        PromptStep(
            "message",
            "message",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "Commit message:", default=state.message, required=True
            ),
            preset=options.message is not None,
            adapter=adapter,
        ),
        PromptStep(
            "breaking",
            "is_breaking",
            PromptKind.CONFIRM,
            lambda state: PromptOptions(
                "Is this a breaking change?", default=state.is_breaking
            ),
            preset=options.breaking is not None or options.yes,
            adapter=adapter,
        ),
        PromptStep(
            "body",
            "body",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "Body (optional, leave blank to skip):", default=state.body
            ),
            preset=options.body is not None or options.yes,
            adapter=adapter,
        ),
        PromptStep(
            "breaking_desc",
            "breaking_desc",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "Describe the breaking change:",
                default=state.breaking_desc,
                validate=lambda text: bool(text.strip())
                or "A breaking change description is required",
            ),
            skip=lambda state: not state.is_breaking,
            preset=options.breaking_desc is not None or options.yes,
            adapter=adapter,
        ),
        ConfirmStep(
            "confirm",
            "confirmed",
            "Create this commit?",
            preview,
            preset=options.yes or options.dry_run,
            adapter=adapter,
        ),
    ]


async def commit_command(
    options: CommitOptions,
    *,
    config: DevflowConfig | None = None,
    adapter: PromptAdapter | None = None,
    logging_hooks: bool = False,
) -> str | None:
    """Interactively create a commit. Returns the full message when one is made."""
    config = config or load_config()
    adapter = adapter or PromptAdapter()

    branch = git.get_branch()
    if git.is_protected_branch(branch) and not options.yes:
        console.print(
            f"⚠ You are committing directly to '{branch}'.",
            style=OneColors.LIGHT_YELLOW,
            markup=False,
        )
        if not await adapter.confirm("Continue anyway?", default=False):
            console.print("Use: devflow branch", style=OneColors.COMMENT_GREY)
            return None

    already_staged = git.staged_files()
    changes = dedupe(git.unstaged_files() + git.untracked_files())
    if options.all:
        staged = dedupe(already_staged + changes)
    elif options.files:
        staged = dedupe(already_staged + options.files)
    else:
        staged = already_staged
    if not staged and not changes:
        console.print("Nothing to commit, working tree clean.")
        return None

    if options.breaking_desc and options.breaking is None:
        options.breaking = True
    if options.yes and options.breaking and not options.breaking_desc:
        console.print(
            "⚠ --breaking without --breaking-desc: no BREAKING CHANGE footer.",
            style=OneColors.LIGHT_YELLOW,
            markup=False,
        )

    initial = CommitState(
        files=list(staged),
        type=options.type or "",
        scope=options.scope or "",
        message=options.message or "",
        is_breaking=bool(options.breaking),
        body=options.body or "",
        breaking_desc=options.breaking_desc or "",
        confirmed=options.yes,
    )
    flow = Flow(
        "commit",
        build_commit_steps(
            config,
            options,
            adapter,
            staged=staged,
            changes=changes,
            base=git.get_default_base(branch),
        ),
        logging_hooks=logging_hooks,
    )
    state = await flow.run(initial)

    ticket = git.infer_ticket(config.branch_format)
    _, message = build_commit_message(config, state, ticket)
    if options.dry_run or options.yes:
        print_preview("Commit Preview", message.splitlines())
    if options.dry_run:
        console.print(
            "[dry-run] No commit created.", style=OneColors.COMMENT_GREY, markup=False
        )
        return None
    if not state.confirmed:
        console.print("Aborted.")
        return None

    if options.all:
        git.stage_all()
    elif options.files:
        git.stage(options.files)
    elif not already_staged:
        git.stage(state.files)
    logger.info("Creating commit on %s", branch)
    git.commit(message)
    console.print("✓ Commit created.", style=OneColors.GREEN)
    return message
