from typing import Optional

from ..events import SerializedError
from .colors import Colors

def _update_flag(colors: Colors) -> str:
    return colors.hint_code("--update-snapshots")

def for_error(err: SerializedError, colors: Colors) -> Optional[str]:
    """Hint text for an assertion that was used the wrong way, if we recognise it."""
    usage = err.improper_usage
    if usage is None:
        return None

    if err.assertion in ("throws", "notThrows"):
        return (
            f"Try wrapping the first argument to `t.{err.assertion}()` in a function:\n\n"
            f"  {colors.hint_code(f't.{err.assertion}(() => {{ /* your code here */ }})')}"
        )

    if err.assertion == "snapshot":
        path = colors.hint_path(usage.snap_path)
        if usage.name == "ChecksumError":
            return (
                "The snapshot file is corrupted.\n\n"
                f"File path: {path}\n\n"
                f"Please run the tests again with the {_update_flag(colors)} flag to recreate it."
            )
        if usage.name == "LegacyError":
            return (
                "The snapshot file was created with a version that is no longer supported.\n\n"
                f"File path: {path}\n\n"
                f"Please run the tests again with the {_update_flag(colors)} flag to upgrade."
            )
        if usage.name == "VersionMismatchError":
            snap, expected = usage.snap_version or 0, usage.expected_version or 0
            if snap < expected:
                advice = f"Please run the tests again with the {_update_flag(colors)} flag to upgrade."
            else:
                advice = "You should upgrade the test runner."
            return (
                f"The snapshot file is v{snap}, but only v{expected} is supported.\n\n"
                f"File path: {path}\n\n"
                f"{advice}"
            )

    return None
