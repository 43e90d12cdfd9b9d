import re
from typing import List

# Runtime frames: kept in the output but muted.
INTERNAL_PATTERNS = (
    re.compile(r"\(node:[^)]*\)$"),
    re.compile(r"^node:"),
    re.compile(r"\(internal/[^:]+:\d+:\d+\)$"),
    re.compile(r"^internal/[^:]+:\d+:\d+$"),
    re.compile(r"\b(?:Generator|AsyncGenerator)\.next \(<anonymous>\)$"),
    re.compile(r"^new Promise \(<anonymous>\)$"),
    re.compile(r"\((?:timers|events|module|domain)\.js:\d+:\d+\)$"),
    re.compile(r"^process\._tickCallback"),
)

# Test framework plumbing: dropped entirely.
IGNORED_PATTERNS = (
    re.compile(r"[\\/]node_modules[\\/](?:ava|append-transform|empower-core|nyc|pirates|source-map-support|@ava[\\/][^\\/]+)[\\/]"),
    re.compile(r"[\\/]ava[\\/]lib[\\/](?:worker[\\/])?[\w-]+\.js:\d+:\d+\)?$"),
)

_FRAME_PREFIX = re.compile(r"^\s*at\s+")

def is_internal_frame(line: str) -> bool:
    return any(p.search(line) for p in INTERNAL_PATTERNS)

def beautify_stack(stack: str) -> List[str]:
    if not stack:
        return []
    lines = []
    for raw in stack.splitlines():
        line = _FRAME_PREFIX.sub("", raw).strip()
        if not line or any(p.search(line) for p in IGNORED_PATTERNS):
            continue
        lines.append(line)
    return lines
