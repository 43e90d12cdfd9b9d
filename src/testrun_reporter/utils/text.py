import math
import re
from typing import Optional

_NON_EMPTY_LINE = re.compile(r"^(?!\s*$)", re.MULTILINE)

def plur(word: str, count: int, plural: Optional[str] = None) -> str:
    if count == 1:
        return word
    return plural if plural is not None else word + "s"

def indent_string(text: str, count: int) -> str:
    """Indent every line that holds something other than whitespace."""
    return _NON_EMPTY_LINE.sub(" " * count, text)

def trim_off_newlines(text: Optional[str]) -> str:
    return (text or "").strip("\r\n")

def pretty_ms(ms: float) -> str:
    """Format a millisecond duration: 5ms, 1.3s, 1m 2.5s, 1h 2m 3s"""
    if ms < 1000:
        return f"{ms:.0f}ms"
    parts = []
    whole_seconds = int(ms // 1000)
    days, rem = divmod(whole_seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days: parts.append(f"{days}d")
    if hours: parts.append(f"{hours}h")
    if minutes: parts.append(f"{minutes}m")
    seconds = math.floor(ms % 60000 / 100) / 10
    if days or hours:
        seconds = int(seconds)
        if seconds: parts.append(f"{seconds}s")
    else:
        text = f"{seconds:.1f}".rstrip("0").rstrip(".")
        if text != "0": parts.append(f"{text}s")
    return " ".join(parts)
