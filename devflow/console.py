# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for devflow."""
from rich.console import Console

from devflow.themes import get_one_theme

console = Console(color_system="truecolor", theme=get_one_theme())
