# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""selection.py"""
from dataclasses import dataclass
from typing import Any, Sequence

from rich import box
from rich.markup import escape
from rich.table import Table

from devflow.themes import OneColors


@dataclass
class Choice:
    """Represents a single choice offered by a select, checkbox or search prompt."""

    value: Any
    name: str = ""
    description: str = ""
    checked: bool = False
    style: str = OneColors.WHITE

    def __post_init__(self):
        if not self.name:
            self.name = str(self.value)
        if not isinstance(self.name, str):
            raise TypeError("Choice name must be a string.")

    def matches(self, term: str) -> bool:
        """Case-insensitive match on value, name or description."""
        needle = term.strip().lower()
        if not needle:
            return True
        return (
            needle in str(self.value).lower()
            or needle in self.name.lower()
            or needle in self.description.lower()
        )

    def render(self, index: int, marker: str = "") -> str:
        """Render the choice for display in a selection table."""
        key = escape(f"[{index}]")
        text = f"[{OneColors.WHITE}]{key}[/] {marker}[{self.style}]{escape(self.name)}[/]"
        if self.description:
            text += f" [{OneColors.COMMENT_GREY}]{escape(self.description)}[/]"
        return text


def coerce_choices(choices: Sequence[Choice | Any]) -> list[Choice]:
    """Wrap bare values into `Choice` objects."""
    return [
        choice if isinstance(choice, Choice) else Choice(value=choice)
        for choice in choices
    ]


def render_table_base(
    title: str = "",
    *,
    caption: str = "",
    box_style: box.Box = box.SIMPLE,
    show_header: bool = False,
    title_style: str = "",
    caption_style: str = "",
) -> Table:
    table = Table(
        title=title or None,
        caption=caption or None,
        box=box_style,
        show_header=show_header,
        title_style=title_style,
        caption_style=caption_style,
        highlight=False,
    )
    table.add_column()
    return table


def render_choice_table(
    choices: Sequence[Choice],
    *,
    title: str = "",
    caption: str = "",
    default: Any = None,
    multi: bool = False,
) -> Table:
    """Create a numbered table of choices, one per row.

    The default choice is marked with an arrow. Multi-select tables show a
    checkbox in front of every choice reflecting its `checked` state.
    """
    table = render_table_base(title=title, caption=caption)
    for index, choice in enumerate(choices, start=1):
        if multi:
            marker = "◉ " if choice.checked else "○ "
        else:
            marker = "❯ " if default is not None and choice.value == default else "  "
        table.add_row(choice.render(index, marker))
    return table
