# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""Interactive git and GitHub commands built on the step-flow engine."""
from .branch import BranchOptions, branch_command
from .commit import CommitOptions, commit_command
from .fixup import FixupOptions, fixup_command
from .pr import PrOptions, pr_command

__all__ = [
    "BranchOptions",
    "CommitOptions",
    "FixupOptions",
    "PrOptions",
    "branch_command",
    "commit_command",
    "fixup_command",
    "pr_command",
]
