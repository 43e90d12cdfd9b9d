import os
import re
from typing import Sequence

_NAME_MARKERS = (
    (re.compile(r"\.spec(?=\.|$)"), ""),
    (re.compile(r"\.test(?=\.|$)"), ""),
    (re.compile(r"(^|(?<=[\\/]))test[-_]"), ""),
    (re.compile(r"\.[^.\\/]+$"), ""),
)

def common_path_prefix(files: Sequence[str]) -> str:
    """Directory shared by every file, with a trailing separator. Empty when there is none."""
    if not files:
        return ""
    dirs = [os.path.dirname(f) for f in files]
    try:
        prefix = os.path.commonpath(dirs)
    except ValueError:
        return ""
    return prefix + os.sep if prefix else ""

def prefix_title(base_path: str, file_path: str, title: str, separator: str = " › ") -> str:
    if not base_path.endswith(os.sep):
        base_path += os.sep
    rel = file_path[len(base_path):] if base_path != os.sep and file_path.startswith(base_path) else file_path
    for pattern, repl in _NAME_MARKERS:
        rel = pattern.sub(repl, rel)
    segments = [s for s in re.split(r"[\\/]", rel) if s and s != "__tests__"]
    return separator.join(segments + [title])
