# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
fixup.py

Creates a `fixup!` commit aimed at an earlier commit on the current branch and
optionally squashes it in right away with `git rebase -i --autosquash`.

Flow steps, in order:
    files -> target -> autosquash -> confirm

`files` is skipped when something is already staged. `--target`, `--all`,
`--files`, `--autosquash/--no-autosquash` and `--yes` preset their steps.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import Field

from devflow import git
from devflow.commands.common import ConfirmStep, print_preview
from devflow.console import console
from devflow.exceptions import DevflowError
from devflow.flow import Flow, FlowState, PromptStep
from devflow.logger import logger
from devflow.prompts import PromptAdapter, PromptKind, PromptOptions
from devflow.selection import Choice
from devflow.themes import OneColors
from devflow.utils import dedupe


class FixupState(FlowState):
    files: list[str] = Field(default_factory=list)
    target: str = ""
    autosquash: bool = False
    confirmed: bool = False


@dataclass
class FixupOptions:
    target: str | None = None
    all: bool = False
    files: list[str] = field(default_factory=list)
    autosquash: bool | None = None
    dry_run: bool = False
    yes: bool = False


def resolve_target(target: str, commits: list[git.BranchCommit]) -> git.BranchCommit:
    """Find the branch commit whose hash starts with `target`."""
    for commit in commits:
        if commit.hash.startswith(target):
            return commit
    raise DevflowError(f"Commit not found on this branch: {target}")


def fixup_preview_lines(
    state: FixupState, commits: list[git.BranchCommit], base: str
) -> list[str]:
    target = next(commit for commit in commits if commit.hash == state.target)
    lines = [f"fixup! {target.subject}", f"Target: {target.short_hash} {target.subject}"]
    if state.files:
        lines.append(f"Files: {', '.join(state.files)}")
    if state.autosquash:
        lines.append(f"Then: git rebase -i --autosquash {base}")
    return lines


def build_fixup_steps(
    options: FixupOptions,
    adapter: PromptAdapter,
    *,
    commits: list[git.BranchCommit],
    staged: list[str],
    unstaged: list[str],
    untracked: list[str],
    base: str,
) -> list:
    def preview(state: FixupState) -> None:
        print_preview("Fixup Preview", fixup_preview_lines(state, commits, base))

    changes = [Choice(path, f"M  {path}") for path in unstaged] + [
        Choice(path, f"?  {path}") for path in untracked if path not in unstaged
    ]
    targets = [
        Choice(commit.hash, f"{commit.short_hash} {commit.subject}") for commit in commits
    ]
    return [
        PromptStep(
            "files",
            "files",
            PromptKind.CHECKBOX,
            lambda state: PromptOptions(
                "Select files to include in the fixup:",
                choices=[
                    Choice(
                        choice.value,
                        choice.name,
                        checked=not state.files or choice.value in state.files,
                    )
                    for choice in changes
                ],
                required=True,
            ),
            skip=lambda state: bool(staged),
            preset=options.all or bool(options.files) or options.yes,
            adapter=adapter,
        ),
        PromptStep(
            "target",
            "target",
            PromptKind.SELECT,
            lambda state: PromptOptions(
                "Which commit should this fixup apply to? (newest first)",
                choices=targets,
                default=state.target or None,
            ),
            preset=options.target is not None,
            adapter=adapter,
        ),
        PromptStep(
            "autosquash",
            "autosquash",
            PromptKind.CONFIRM,
            lambda state: PromptOptions(
                "Auto-squash after committing? (interactive rebase)",
                default=state.autosquash,
            ),
            preset=options.autosquash is not None or options.yes,
            adapter=adapter,
        ),
        ConfirmStep(
            "confirm",
            "confirmed",
            "Create this fixup commit?",
            preview,
            preset=options.yes or options.dry_run,
            adapter=adapter,
        ),
    ]


async def fixup_command(
    options: FixupOptions,
    *,
    adapter: PromptAdapter | None = None,
    logging_hooks: bool = False,
) -> str | None:
    """Interactively create a fixup commit. Returns the target hash when one is made."""
    adapter = adapter or PromptAdapter()
    branch = git.get_branch()
    base = git.get_default_base(branch)
    commits = git.get_branch_commits(base)
    if len(commits) < 2:
        console.print("Need at least 2 commits on the branch to fixup.")
        return None
    target = resolve_target(options.target, commits).hash if options.target else ""

    already_staged = git.staged_files()
    unstaged = git.unstaged_files()
    untracked = git.untracked_files()
    changes = dedupe(unstaged + untracked)
    if options.files:
        staged = dedupe(already_staged + options.files)
    elif options.all or options.yes:
        staged = dedupe(already_staged + changes)
    else:
        staged = already_staged
    if not staged and not changes:
        console.print("Nothing to commit, working tree clean.")
        return None

    initial = FixupState(
        files=list(staged),
        target=target,
        autosquash=bool(options.autosquash),
        confirmed=options.yes,
    )
    flow = Flow(
        "fixup",
        build_fixup_steps(
            options,
            adapter,
            commits=commits,
            staged=staged,
            unstaged=unstaged,
            untracked=untracked,
            base=base,
        ),
        logging_hooks=logging_hooks,
    )
    state = await flow.run(initial)

    if options.dry_run or options.yes:
        print_preview("Fixup Preview", fixup_preview_lines(state, commits, base))
    if options.dry_run:
        console.print(
            "[dry-run] No fixup commit created.",
            style=OneColors.COMMENT_GREY,
            markup=False,
        )
        return None
    if not state.confirmed:
        console.print("Aborted.")
        return None

    if options.files:
        git.stage(options.files)
    elif options.all or options.yes:
        git.stage_all()
    elif not already_staged:
        git.stage(state.files)
    logger.info("Creating fixup commit for %s", state.target)
    git.commit_fixup(state.target)
    console.print("✓ Fixup commit created.", style=OneColors.GREEN)

    if state.autosquash:
        git.rebase_autosquash(base)
        console.print("✓ Commits squashed.", style=OneColors.GREEN)
    else:
        console.print(
            f"Run later: git rebase -i --autosquash {base}",
            style=OneColors.COMMENT_GREY,
            markup=False,
        )
    return state.target
