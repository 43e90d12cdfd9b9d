from typing import Dict, IO, Optional
import codecs

UNICODE: Dict[str, str] = {
    "tick": "✔",
    "cross": "✘",
    "info": "ℹ",
    "warning": "⚠",
    "pointer_small": "›",
    "circle_dotted": "◌",
    "line": "─",
}

ASCII: Dict[str, str] = {
    "tick": "√",
    "cross": "×",
    "info": "i",
    "warning": "‼",
    "pointer_small": "»",
    "circle_dotted": "( )",
    "line": "─",
}

PLAIN: Dict[str, str] = {
    "tick": "ok",
    "cross": "x",
    "info": "i",
    "warning": "!",
    "pointer_small": ">",
    "circle_dotted": "( )",
    "line": "-",
}

class Figures:
    def __init__(self, glyphs: Dict[str, str]):
        self._glyphs = glyphs

    def __getattr__(self, name: str) -> str:
        try:
            return self._glyphs[name]
        except KeyError:
            raise AttributeError(name) from None

def _can_encode(encoding: str, glyphs: Dict[str, str]) -> bool:
    try:
        codec = codecs.lookup(encoding)
    except LookupError:
        return False
    try:
        codec.encode("".join(glyphs.values()))
    except UnicodeEncodeError:
        return False
    return True

def figures_for(stream: Optional[IO[str]]) -> Figures:
    """Pick the richest glyph set the stream's encoding can carry."""
    encoding = getattr(stream, "encoding", None) or "utf-8"
    for glyphs in (UNICODE, ASCII):
        if _can_encode(encoding, glyphs):
            return Figures(glyphs)
    return Figures(PLAIN)
