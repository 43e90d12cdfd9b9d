import pathlib
from typing import Callable, List, Optional, Tuple

from rich.cells import cell_len, set_cell_size

def _truncate(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    return set_cell_size(text, max(width - 1, 0)) + "…"

def code_excerpt(
    file: str,
    line: int,
    max_width: int = 80,
    around: int = 1,
    highlight: Callable[[str], str] = lambda s: s,
    gutter: Callable[[str], str] = lambda s: s,
) -> Optional[str]:
    """Render the lines around `line` of `file`, with the failing line highlighted.

    Returns None when the file can't be read or `line` is outside of it.
    """
    try:
        source = pathlib.Path(file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    all_lines = source.splitlines()
    if line < 1 or line > len(all_lines):
        return None

    first, last = max(1, line - around), min(len(all_lines), line + around)
    number_width = len(str(last))
    budget = max_width - number_width - 5
    shown: List[Tuple[int, str]] = [(n, _truncate(all_lines[n - 1].expandtabs(4), budget)) for n in range(first, last + 1)]
    pad_to = max(cell_len(v) for _, v in shown)

    out = []
    for n, value in shown:
        value = value + " " * (pad_to - cell_len(value))
        number = f"{n:>{number_width}}:"
        if n == line:
            out.append(highlight(f" {number} {value}"))
        else:
            out.append(f" {gutter(number)} {value}")
    return "\n".join(out)
