# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Pieces shared by the command orchestrators.

- `ConfirmStep`: the last step of every command flow. It prints a preview of
  what is about to happen, built from the committed state, and asks for
  confirmation. Because it is an ordinary step, "back" from the confirmation
  returns to the previous question with every answer intact.
- `print_preview()`: renders the framed preview block.
"""
from __future__ import annotations

from typing import Callable, Sequence

from rich.markup import escape
from rich.rule import Rule

from devflow.console import console
from devflow.flow import BaseStep, StateT
from devflow.outcomes import Back, Next, StepOutcome
from devflow.prompts import BACK, PromptAdapter
from devflow.themes import OneColors


def print_preview(title: str, lines: Sequence[str], style: str = OneColors.CYAN) -> None:
    """Print `lines` between two rules. Lines are printed verbatim."""
    console.print(Rule(f"[bold]{escape(title)}[/]", style=OneColors.COMMENT_GREY))
    for line in lines:
        console.print(escape(line), style=style, highlight=False)
    console.print(Rule(style=OneColors.COMMENT_GREY))


class ConfirmStep(BaseStep[StateT]):
    """Preview the result of a flow and ask whether to go ahead.

    Args:
        id (str): Step identifier.
        field (str): Boolean state field receiving the answer.
        message (str | Callable[[state], str]): Confirmation question.
        preview (Callable[[state], None]): Prints the preview for the state.
        preset: See `BaseStep`. A preset confirmation never renders.
        adapter (PromptAdapter | None): Adapter used to ask.
    """

    def __init__(
        self,
        id: str,
        field: str,
        message: str | Callable[[StateT], str],
        preview: Callable[[StateT], None],
        *,
        preset: bool | Callable[[StateT], bool] = False,
        adapter: PromptAdapter | None = None,
    ) -> None:
        super().__init__(id, preset=preset)
        self.field = field
        self.message = message
        self.preview = preview
        self.adapter = adapter

    async def run(self, state: StateT, is_first: bool) -> StepOutcome:
        if self.adapter is None:
            self.adapter = PromptAdapter()
        self.preview(state)
        message = self.message(state) if callable(self.message) else self.message
        answer = await self.adapter.confirm(
            message, default=True, allow_back=not is_first
        )
        if answer is BACK:
            return Back()
        return Next({self.field: answer})
