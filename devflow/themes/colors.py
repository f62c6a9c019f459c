# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Colour palette used by devflow output and prompts.

`OneColors` holds hex colours from the One Dark palette. Every colour has a
bold variant with a `_b` suffix, usable directly as a rich style string:

    console.print(f"[{OneColors.GREEN_b}]✓ Done[/]")

`get_one_theme()` returns a `rich.theme.Theme` that recolours rich's
highlighter styles (`repr.*`) with the palette, so numbers, strings and paths
auto-highlighted by the shared console match the rest of the output.
"""
from rich.style import Style
from rich.theme import Theme


class ColorsMeta(type):
    """Adds a bold `<NAME>_b` variant for every colour declared on the class."""

    def __new__(mcs, name, bases, namespace):
        bold = {
            f"{key}_b": f"bold {value}"
            for key, value in namespace.items()
            if key.isupper() and isinstance(value, str)
        }
        namespace.update(bold)
        return super().__new__(mcs, name, bases, namespace)


class OneColors(metaclass=ColorsMeta):
    BLACK = "#282C34"
    WHITE = "#ABB2BF"
    COMMENT_GREY = "#5C6370"
    DARK_RED = "#BE5046"
    LIGHT_RED = "#E06C75"
    GREEN = "#98C379"
    DARK_YELLOW = "#D19A66"
    LIGHT_YELLOW = "#E5C07B"
    BLUE = "#61AFEF"
    MAGENTA = "#C678DD"
    CYAN = "#56B6C2"


def get_one_theme() -> Theme:
    return Theme(
        {
            "repr.number": Style(color=OneColors.DARK_YELLOW),
            "repr.str": Style(color=OneColors.GREEN),
            "repr.path": Style(color=OneColors.MAGENTA),
            "repr.filename": Style(color=OneColors.MAGENTA, bold=True),
        }
    )
