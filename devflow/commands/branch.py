# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""branch.py"""
from __future__ import annotations

import re
from dataclasses import dataclass

from devflow import git
from devflow.commands.common import ConfirmStep, print_preview
from devflow.config import DevflowConfig, load_config
from devflow.console import console
from devflow.flow import Flow, FlowState, PromptStep
from devflow.logger import logger
from devflow.prompts import PromptAdapter, PromptKind, PromptOptions
from devflow.themes import OneColors


class BranchState(FlowState):
    type: str = ""
    ticket: str = ""
    description: str = ""
    confirmed: bool = False


@dataclass
class BranchOptions:
    type: str | None = None
    ticket: str | None = None
    description: str | None = None
    dry_run: bool = False
    yes: bool = False


def kebab(text: str) -> str:
    """Lower-case `text` and join its alphanumeric runs with dashes."""
    return re.sub(r"[^a-z0-9]+", "-", text.strip().lower()).strip("-")


def branch_name(config: DevflowConfig, state: BranchState) -> str:
    return git.format_branch_name(
        config.branch_format,
        type=state.type,
        ticket=state.ticket.strip() or git.UNTRACKED,
        description=kebab(state.description),
    )


def build_branch_steps(
    config: DevflowConfig, options: BranchOptions, adapter: PromptAdapter
) -> list:
    def preview(state: BranchState) -> None:
        print_preview("Branch Preview", [branch_name(config, state)])

    return [
        PromptStep(
            "type",
            "type",
            PromptKind.SELECT,
            lambda state: PromptOptions(
                "Select branch type:",
                choices=config.branch_types,
                default=state.type or None,
            ),
            preset=options.type is not None,
            adapter=adapter,
        ),
        PromptStep(
            "ticket",
            "ticket",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "Ticket number (leave blank for UNTRACKED):", default=state.ticket
            ),
            transform=lambda value, state: {"ticket": value.strip()},
            preset=options.ticket is not None,
            adapter=adapter,
        ),
        PromptStep(
            "description",
            "description",
            PromptKind.INPUT,
            lambda state: PromptOptions(
                "Short description:",
                default=state.description,
                validate=lambda text: bool(text.strip()) or "Description is required",
            ),
            preset=options.description is not None,
            adapter=adapter,
        ),
        ConfirmStep(
            "confirm",
            "confirmed",
            "Create this branch?",
            preview,
            preset=options.yes or options.dry_run,
            adapter=adapter,
        ),
    ]


async def branch_command(
    options: BranchOptions,
    *,
    config: DevflowConfig | None = None,
    adapter: PromptAdapter | None = None,
    logging_hooks: bool = False,
) -> str | None:
    """Interactively create a branch. Returns the branch name when one is created."""
    config = config or load_config()
    adapter = adapter or PromptAdapter()
    initial = BranchState(
        type=options.type or "",
        ticket=options.ticket or "",
        description=options.description or "",
        confirmed=options.yes,
    )
    flow = Flow(
        "branch",
        build_branch_steps(config, options, adapter),
        logging_hooks=logging_hooks,
    )
    state = await flow.run(initial)
    name = branch_name(config, state)

    if options.dry_run:
        print_preview("Branch Preview", [name])
        console.print(
            "[dry-run] No branch created.", style=OneColors.COMMENT_GREY, markup=False
        )
        return None
    if options.yes:
        print_preview("Branch Preview", [name])
    if not state.confirmed:
        console.print("Aborted.")
        return None

    logger.info("Creating branch %s", name)
    git.checkout_new_branch(name)
    console.print(f"✓ Branch created: {name}", style=OneColors.GREEN, markup=False)
    return name
