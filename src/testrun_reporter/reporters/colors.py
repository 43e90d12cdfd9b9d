from typing import IO, Optional, Tuple

from rich.color import ColorSystem
from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "log": "grey50",
        "title": "bold",
        "error": "red",
        "skip": "yellow",
        "todo": "blue",
        "pass": "green",
        "duration": "grey50 dim",
        "error_source": "grey50",
        "error_stack": "grey50",
        "error_stack_internal": "grey50 dim",
        "stack": "red",
        "information": "magenta",
        "rule": "grey50 dim",
        "excerpt_gutter": "grey50",
        "excerpt_error": "on red",
        "hint_code": "cyan",
        "hint_path": "yellow",
    },
    inherit=False,
)

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}

def probe_stream(stream: IO[str], force_color: Optional[bool] = None) -> Tuple[Optional[ColorSystem], int]:
    """Ask rich what the stream supports. Returns (color system, columns)."""
    console = Console(
        file=stream,
        force_terminal=force_color,
        no_color=True if force_color is False else None,
        highlight=False,
    )
    color_system = None if console.no_color else _COLOR_SYSTEMS.get(console.color_system)
    if force_color and color_system is None:
        color_system = ColorSystem.STANDARD
    columns = console.width if console.is_terminal else 80
    return color_system, columns

class Colors:
    """Paints text by semantic role, e.g. `colors.error("boom")`."""

    def __init__(self, color_system: Optional[ColorSystem] = None, theme: Theme = THEME):
        self.color_system = color_system
        self._styles = theme.styles

    def paint(self, role: str, text: str) -> str:
        if self.color_system is None or not text:
            return text
        return self._styles[role].render(text, color_system=self.color_system)

    def __getattr__(self, role: str):
        if role.startswith("_") or role not in self._styles:
            raise AttributeError(role)
        return lambda text: self.paint(role, text)
