from dataclasses import dataclass
from typing import Callable, List, Optional

from ..events import SerializedError
from ..utils.excerpt import code_excerpt
from ..utils.figures import Figures
from ..utils.stack import beautify_stack, is_internal_frame
from ..utils.text import trim_off_newlines
from . import improper_usage
from .colors import Colors
from .line_writer import LineWriter

@dataclass
class FormattedAssertion:
    formatted: Optional[str]
    print_message: bool

def format_serialized_error(err: SerializedError) -> FormattedAssertion:
    if err.values:
        print_message = not err.values[0].label.startswith(err.message)
    else:
        print_message = bool(err.message)

    if not err.values and not err.statements:
        return FormattedAssertion(None, print_message)

    formatted = ""
    for value in err.values:
        formatted += f"{value.label}\n\n{trim_off_newlines(value.formatted)}\n\n"
    for label, text in err.statements:
        formatted += f"{label}\n{trim_off_newlines(text)}\n\n"
    return FormattedAssertion(trim_off_newlines(formatted), print_message)

class ErrorRenderer:
    def __init__(self, line_writer: LineWriter, colors: Colors, figures: Figures,
                 relative_file: Callable[[str], str], columns: int = 80):
        self.line_writer = line_writer
        self.colors = colors
        self.figures = figures
        self.relative_file = relative_file
        self.columns = columns

    def write_err(self, err: Optional[SerializedError]) -> None:
        err = err or SerializedError()
        lw = self.line_writer

        if err.diagnostic_text:
            lw.write_line(self.colors.error_stack(trim_off_newlines(err.diagnostic_text)))
            lw.write_line()
            return

        if err.source:
            self._write_source(err)

        if err.assertion_error:
            result = format_serialized_error(err)
            if result.print_message:
                lw.write_line(err.message)
                lw.write_line()
            if result.formatted:
                lw.write_line(result.formatted)
                lw.write_line()
            hint = improper_usage.for_error(err, self.colors)
            if hint:
                lw.write_line(hint)
                lw.write_line()
        elif err.non_error_object:
            lw.write_line(trim_off_newlines(err.formatted))
            lw.write_line()
        else:
            lw.write_line(err.summary)
            lw.write_line()

        formatted = self.format_stack(err)
        if formatted:
            lw.write_line("\n".join(formatted))
            lw.write_line()

    def _write_source(self, err: SerializedError) -> None:
        source = err.source
        self.line_writer.write_line(self.colors.error_source(f"{self.relative_file(source.file)}:{source.line}"))
        if not source.is_within_project or source.is_dependency:
            return
        excerpt = code_excerpt(
            source.file, source.line,
            max_width=self.columns - 2,
            highlight=self.colors.excerpt_error,
            gutter=self.colors.excerpt_gutter,
        )
        if excerpt:
            self.line_writer.write_line()
            self.line_writer.write_line(excerpt)
            self.line_writer.write_line()

    def format_stack(self, err: SerializedError) -> List[str]:
        if not err.stack:
            return []
        if not err.should_beautify_stack:
            return [err.stack]
        lines = []
        for line in beautify_stack(err.stack):
            text = f"{self.figures.pointer_small} {line}"
            if is_internal_frame(line):
                lines.append(self.colors.error_stack_internal(text))
            else:
                lines.append(self.colors.error_stack(text))
        return lines
