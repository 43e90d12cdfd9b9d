import functools
from contextlib import contextmanager
from typing import IO, Iterator, List, Optional

from ..utils.text import indent_string

class LineWriter:
    """Writes report lines, indented by a fixed margin, to a destination stream.

    Inside `corked()` writes are buffered and reach the destination as a single
    write when the outermost scope closes.
    """

    def __init__(self, dest: IO[str], margin: int = 2):
        self.dest = dest
        self.margin = margin
        self.last_line_is_empty = False
        self._depth = 0
        self._buffer: List[str] = []

    def write(self, text: str) -> None:
        if self._depth:
            self._buffer.append(text)
        else:
            self.dest.write(text)

    def write_line(self, text: Optional[str] = None) -> None:
        if text:
            self.write(indent_string(text, self.margin) + "\n")
            self.last_line_is_empty = False
        else:
            self.write("\n")
            self.last_line_is_empty = True

    def ensure_empty_line(self) -> None:
        if not self.last_line_is_empty:
            self.write_line()

    @contextmanager
    def corked(self) -> Iterator["LineWriter"]:
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._flush()

    def _flush(self) -> None:
        if not self._buffer:
            return
        chunk, self._buffer = "".join(self._buffer), []
        self.dest.write(chunk)
        flush = getattr(self.dest, "flush", None)
        if flush:
            flush()

def while_corked(method):
    """Run a reporter method inside its line writer's corked scope."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.line_writer.corked():
            return method(self, *args, **kwargs)
    return wrapper
