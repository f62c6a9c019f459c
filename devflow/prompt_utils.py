# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Label helpers for prompts rendered by devflow.

Includes:
- `with_back_hint()` to decorate a prompt label with the back affordance.
- `rich_text_to_prompt_text()` to turn rich markup into prompt_toolkit fragments.
"""
from prompt_toolkit.formatted_text import StyleAndTextTuples
from rich.console import Console
from rich.text import Text

from devflow.themes import OneColors

BACK_HINT = "(Esc to go back)"


def with_back_hint(message: str, allow_back: bool) -> str:
    """Append the dimmed back hint to `message` when back navigation is enabled."""
    if not allow_back:
        return message
    return f"{message} [{OneColors.COMMENT_GREY}]{BACK_HINT}[/]"


def prompt_label(message: str, allow_back: bool) -> StyleAndTextTuples:
    return rich_text_to_prompt_text(f"{with_back_hint(message, allow_back)} ")


def rich_text_to_prompt_text(text: Text | str | StyleAndTextTuples) -> StyleAndTextTuples:
    """
    Convert a Rich Text object to a list of (style, text) tuples
    compatible with prompt_toolkit.
    """
    if isinstance(text, list):
        if all(isinstance(pair, tuple) and len(pair) == 2 for pair in text):
            return text
        raise TypeError("Expected list of (style, text) tuples")

    if isinstance(text, str):
        text = Text.from_markup(text)

    if not isinstance(text, Text):
        raise TypeError("Expected str, rich.text.Text, or list of (style, text) tuples")

    console = Console(color_system=None, file=None, width=999, legacy_windows=False)
    segments = text.render(console)

    prompt_fragments: StyleAndTextTuples = []
    for segment in segments:
        style = segment.style or ""
        string = segment.text
        if string:
            prompt_fragments.append((str(style), string))
    return prompt_fragments
