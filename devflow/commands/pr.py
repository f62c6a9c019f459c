# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""pr.py"""
from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape

from devflow import git
from devflow.commands.common import ConfirmStep, print_preview
from devflow.config import DevflowConfig, load_config
from devflow.console import console
from devflow.exceptions import DevflowError, GitError
from devflow.flow import Flow, FlowState, PromptStep
from devflow.logger import logger
from devflow.prompts import PromptAdapter, PromptKind, PromptOptions
from devflow.selection import Choice
from devflow.themes import OneColors
from devflow.utils import dedupe

FEATURE = "Feature (new functionality)"
BUG_FIX = "Bug fix (non-breaking fix)"
REFACTOR = "Refactor (no functional changes)"
BREAKING = (
    "Breaking change (fix or feature that would cause existing functionality to change)"
)
CHORE = "Chore (deps, CI, configs, docs)"

CHANGE_TYPES = [FEATURE, BUG_FIX, REFACTOR, BREAKING, CHORE]

TYPE_LABELS = {
    "feat": FEATURE,
    "fix": BUG_FIX,
    "hotfix": BUG_FIX,
    "refactor": REFACTOR,
    "chore": CHORE,
    "docs": CHORE,
    "test": CHORE,
    "release": CHORE,
}

BRANCH_TYPE_TO_LABEL = {
    "feat": ("feature", "0E8A16"),
    "fix": ("bug", "D73A4A"),
    "hotfix": ("bug", "D73A4A"),
    "refactor": ("refactor", "1D76DB"),
    "chore": ("chore", "FEF2C0"),
    "docs": ("documentation", "0075CA"),
    "test": ("test", "BFD4F2"),
    "release": ("release", "6F42C1"),
}
SCOPE_LABEL_COLOR = "EDEDED"


class PrState(FlowState):
    base: str = ""
    title: str = ""
    summary: str = ""
    confirmed: bool = False


@dataclass
class PrOptions:
    base: str | None = None
    title: str | None = None
    summary: str | None = None
    dry_run: bool = False
    yes: bool = False


def format_ticket(ticket: str, ticket_base_url: str | None = None) -> str:
    if ticket == git.UNTRACKED or not ticket_base_url:
        return ticket
    return f"[{ticket}]({ticket_base_url.rstrip('/')}/{ticket})"


def build_type_checkboxes(branch_type: str | None) -> str:
    selected = TYPE_LABELS.get(branch_type or "")
    return "\n".join(
        f"- [{'x' if label == selected else ' '}] {label}" for label in CHANGE_TYPES
    )


def build_pr_body(
    config: DevflowConfig,
    *,
    summary: str,
    commits: list[str],
    ticket: str,
    branch_type: str | None,
) -> str:
    commit_list = "\n".join(f"- {commit}" for commit in commits)
    summary = "\n\n".join(part for part in (summary.strip(), commit_list) if part)
    checklist = "\n".join(f"- [ ] {item}" for item in config.checklist)
    return f"""## Summary

{summary or "<!-- Brief description of what this PR does and why -->"}

## Ticket

{format_ticket(ticket, config.ticket_base_url)}

## Type of Change

{build_type_checkboxes(branch_type)}

## Screenshots

<!-- Add before/after screenshots for UI changes, or remove this section if not applicable -->

| Before | After |
|--------|-------|
|        |       |

## Test Plan

- [ ]

## Checklist

{checklist}"""


def collect_labels(branch_type: str | None, commits: list[str]) -> list[tuple[str, str]]:
    """Return `(name, color)` label pairs for the branch type and commit scopes."""
    labels = []
    if branch_type in BRANCH_TYPE_TO_LABEL:
        labels.append(BRANCH_TYPE_TO_LABEL[branch_type])
    labels += [(scope, SCOPE_LABEL_COLOR) for scope in git.get_scopes_from_commits(commits)]
    seen = dedupe(name for name, _ in labels)
    return [next(label for label in labels if label[0] == name) for name in seen]


def build_pr_steps(
    config: DevflowConfig,
    options: PrOptions,
    adapter: PromptAdapter,
    *,
    branch: str,
    existing: dict | None,
) -> list:
    parsed = git.parse_branch(branch, config.branch_format)
    remotes = [remote.removeprefix("origin/") for remote in git.get_remote_branches(branch)]

    def base_options(state: PrState) -> PromptOptions:
        choices = [Choice(remote) for remote in dedupe(remotes)]
        return PromptOptions(
            f"Base branch {escape(f'[{state.base}]')}:",
            choices=choices,
            source=lambda term: [choice for choice in choices if choice.matches(term)]
            or [Choice(term.strip())],
            default=state.base,
        )

    def preview(state: PrState) -> None:
        commits = git.get_commits(state.base)
        labels = [name for name, _ in collect_labels(parsed.type, commits)]
        body = build_pr_body(
            config,
            summary=state.summary,
            commits=commits,
            ticket=parsed.ticket,
            branch_type=parsed.type,
        )
        header = []
        if existing:
            header.append(f"(Updating existing PR #{existing['number']})")
        header += [
            f"Title: {state.title}",
            f"Branch: {branch} → {state.base}",
            f"Labels: {', '.join(labels) or 'none'}",
            "Assignee: @me",
            "",
        ]
        print_preview("PR Preview", header + body.splitlines(), style=OneColors.WHITE)

    return [
        PromptStep(
            "base",
            "base",
            PromptKind.SEARCH,
            base_options,
            preset=options.base is not None,
            adapter=adapter,
        ),
        PromptStep(
            "title",
            "title",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "PR title:",
                default=state.title,
                validate=lambda text: bool(text.strip()) or "Title is required",
            ),
            transform=lambda value, state: {"title": value.strip()},
            preset=options.title is not None,
            adapter=adapter,
        ),
        PromptStep(
            "summary",
            "summary",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "PR summary (optional, leave blank to use commits only):",
                default=state.summary,
            ),
            preset=options.summary is not None or options.yes,
            adapter=adapter,
        ),
        ConfirmStep(
            "confirm",
            "confirmed",
            f"Update PR #{existing['number']}?" if existing else "Create this PR?",
            preview,
            preset=options.yes or options.dry_run,
            adapter=adapter,
        ),
    ]


async def pr_command(
    options: PrOptions,
    *,
    config: DevflowConfig | None = None,
    adapter: PromptAdapter | None = None,
    logging_hooks: bool = False,
) -> str | None:
    """Create or update the pull request for the current branch.

    Returns the PR title when a PR was created or updated.

    Raises:
        DevflowError: If the GitHub CLI is not installed.
    """
    config = config or load_config()
    adapter = adapter or PromptAdapter()
    if not git.gh_installed():
        raise DevflowError(
            "GitHub CLI (gh) is not installed. Install it from https://cli.github.com"
        )

    branch = git.get_branch()
    parsed = git.parse_branch(branch, config.branch_format)
    existing = git.get_existing_pr()
    if existing:
        console.print(
            f"PR #{existing['number']} already exists: {existing.get('url', '')}",
            markup=False,
        )
        if not options.yes and not await adapter.confirm("Update this PR?", default=True):
            return None

    description = parsed.description
    initial = PrState(
        base=options.base or git.get_default_base(branch),
        title=options.title or description[:1].upper() + description[1:],
        summary=options.summary or "",
        confirmed=options.yes,
    )
    flow = Flow(
        "pr",
        build_pr_steps(config, options, adapter, branch=branch, existing=existing),
        logging_hooks=logging_hooks,
    )
    state = await flow.run(initial)

    commits = git.get_commits(state.base)
    body = build_pr_body(
        config,
        summary=state.summary,
        commits=commits,
        ticket=parsed.ticket,
        branch_type=parsed.type,
    )
    if options.dry_run or options.yes:
        print_preview(
            "PR Preview", [f"Title: {state.title}", ""] + body.splitlines(), style=OneColors.WHITE
        )
    if options.dry_run:
        console.print(
            "[dry-run] No PR created.", style=OneColors.COMMENT_GREY, markup=False
        )
        return None
    if not state.confirmed:
        console.print("Aborted.")
        return None

    try:
        git.push_branch(branch)
    except GitError as error:
        logger.warning("Push failed, continuing: %s", error)

    labels = collect_labels(parsed.type, commits)
    for name, color in labels:
        git.ensure_label(name, color)
    label_names = [name for name, _ in labels]

    if existing:
        git.edit_pr(
            number=existing["number"], title=state.title, body=body, labels=label_names
        )
        console.print(
            f"✓ PR #{existing['number']} updated: {existing.get('url', '')}",
            style=OneColors.GREEN,
            markup=False,
        )
    else:
        git.create_pr(
            title=state.title,
            body=body,
            base=state.base,
            head=branch,
            labels=label_names,
            reviewers=config.pr_reviewers,
        )
        console.print("✓ PR created successfully.", style=OneColors.GREEN)
    return state.title
