import logging
import os
import re
import sys
from typing import Callable, Dict, IO, Optional, Union

from ..config import ReporterConfig
from ..events import (
    Event, FailedHook, FailedTest, FinishedHook, InternalError, Interrupt, LineNumberSelectionError,
    MissingImport, PassedTest, SelectedTest, StatsChanged, Timeout, UncaughtException,
    UnhandledRejection, WorkerFailed, WorkerFinished, WorkerOutput,
)
from ..plan import RunPlan
from ..state import RunState
from ..utils.figures import figures_for
from ..utils.paths import prefix_title
from ..utils.text import indent_string, plur, pretty_ms
from .colors import Colors, probe_stream
from .errors import ErrorRenderer
from .line_writer import LineWriter, while_corked
from .summary import SummaryRenderer

log = logging.getLogger(__name__)

_LOG_INDENT = re.compile(r"^ {4}")

class VerboseReporter:
    """Prints one line per test as results arrive, then a summary of the run."""

    def __init__(self, config: Optional[ReporterConfig] = None,
                 report_stream: Optional[IO[str]] = None, std_stream: Optional[IO] = None):
        self.config = config or ReporterConfig()
        self.report_stream = report_stream or sys.stdout
        self.std_stream = std_stream or sys.stderr
        self.duration_threshold = self.config.duration_threshold
        self.watching = self.config.watching

        color_system, columns = probe_stream(self.report_stream, self.config.color)
        self.columns = self.config.columns or columns
        self.colors = Colors(color_system)
        self.figures = figures_for(self.report_stream)

        self.line_writer = LineWriter(self.report_stream)
        self.errors = ErrorRenderer(self.line_writer, self.colors, self.figures, self.relative_file, self.columns)
        self.summary = SummaryRenderer(self.line_writer, self.colors, self.figures, self.write_failure, self.watching)
        self.state = RunState()

        self._handlers: Dict[str, Callable[[Event], None]] = {
            "hook-failed": self._on_failure,
            "test-failed": self._on_failure,
            "test-passed": self._on_test_passed,
            "internal-error": self._on_internal_error,
            "line-number-selection-error": self._on_line_number_selection_error,
            "missing-ava-import": self._on_missing_import,
            "hook-finished": self._on_hook_finished,
            "selected-test": self._on_selected_test,
            "stats": self._on_stats,
            "timeout": self._on_timeout,
            "interrupt": self._on_interrupt,
            "uncaught-exception": self._on_uncaught,
            "unhandled-rejection": self._on_uncaught,
            "worker-failed": self._on_worker_failed,
            "worker-finished": self._on_worker_finished,
            "worker-stdout": self._on_worker_output,
            "worker-stderr": self._on_worker_output,
        }

    def relative_file(self, file: Optional[str]) -> str:
        if not file:
            return ""
        return os.path.relpath(file, self.config.project_dir)

    def reset(self) -> None:
        self.state.reset()

    def start_run(self, plan: RunPlan) -> None:
        if plan.bail_without_reporting:
            return

        self.reset()
        state = self.state
        state.fail_fast_enabled = plan.fail_fast_enabled
        state.matching = plan.matching
        state.previous_failures = plan.previous_failures
        state.empty_parallel_run = plan.status.empty_parallel_run

        if self.watching or len(plan.files) > 1:
            base, separator = plan.file_path_prefix or "", self.colors.rule(" › ")
            state.prefix_title = lambda test_file, title: prefix_title(base, test_file or "", title, separator)

        state.remove_previous_listener = plan.status.on_state_change(self.consume_state_change)
        log.debug("run started with %d file(s)", len(plan.files))

        if self.watching and plan.run_vector > 1:
            self.line_writer.write(self.colors.rule(self.figures.line * self.columns) + "\n")

        self.line_writer.write_line()

    @while_corked
    def consume_state_change(self, evt: Event) -> None:
        if evt.test_file and evt.test_file not in self.state.running_files:
            self.state.running_files[evt.test_file] = {}
        handler = self._handlers.get(evt.type)
        if handler is None:
            log.debug("ignoring event of type %r", evt.type)
            return
        handler(evt)

    # --- event handlers ---
    def _on_failure(self, evt: Union[FailedHook, FailedTest]) -> None:
        self.state.failures.append(evt)
        self.write_test_summary(evt)

    def _on_test_passed(self, evt: PassedTest) -> None:
        if evt.known_failing:
            self.state.known_failures.append(evt)
        self.write_test_summary(evt)

    def _on_internal_error(self, evt: InternalError) -> None:
        lw, cross = self.line_writer, self.figures.cross
        if evt.test_file:
            lw.write_line(self.colors.error(f"{cross} Internal error when running {self.relative_file(evt.test_file)}"))
        else:
            lw.write_line(self.colors.error(f"{cross} Internal error"))
        lw.write_line(self.colors.stack(evt.err.summary))
        lw.write_line(self.colors.error_stack(evt.err.stack))
        lw.write_line()
        lw.write_line()

    def _on_line_number_selection_error(self, evt: LineNumberSelectionError) -> None:
        self.line_writer.write_line(self.colors.information(
            f"{self.figures.warning} Could not parse {self.relative_file(evt.test_file)} for line number selection"
        ))

    def _on_missing_import(self, evt: MissingImport) -> None:
        self.state.files_with_missing_import.add(evt.test_file)
        self.line_writer.write_line(self.colors.error(
            f"{self.figures.cross} No tests found in {self.relative_file(evt.test_file)}, "
            f"make sure to import \"{self.config.import_name}\" at the top of your test file"
        ))

    def _on_hook_finished(self, evt: FinishedHook) -> None:
        if evt.logs:
            self.line_writer.write_line(f"  {self.state.prefix_title(evt.test_file, evt.title)}")
            self.write_logs(evt)

    def _on_selected_test(self, evt: SelectedTest) -> None:
        title = self.state.prefix_title(evt.test_file, evt.title)
        if evt.skip:
            self.line_writer.write_line(self.colors.skip(f"- {title}"))
        elif evt.todo:
            self.line_writer.write_line(self.colors.todo(f"- {title}"))

    def _on_stats(self, evt: StatsChanged) -> None:
        self.state.stats = evt.stats

    def _on_timeout(self, evt: Timeout) -> None:
        self.line_writer.write_line(self.colors.error(f"\n{self.figures.cross} Timed out while running tests"))
        self.line_writer.write_line()
        self.write_pending_tests(evt)

    def _on_interrupt(self, evt: Interrupt) -> None:
        self.line_writer.write_line(self.colors.error(f"\n{self.figures.cross} Exiting due to SIGINT"))
        self.line_writer.write_line()
        self.write_pending_tests(evt)

    def _on_uncaught(self, evt: Union[UncaughtException, UnhandledRejection]) -> None:
        kind = "Uncaught exception" if evt.type == "uncaught-exception" else "Unhandled rejection"
        self.line_writer.ensure_empty_line()
        self.line_writer.write_line(self.colors.title(f"{kind} in {self.relative_file(evt.test_file)}"))
        self.line_writer.write_line()
        self.errors.write_err(evt.err)

    def _on_worker_failed(self, evt: WorkerFailed) -> None:
        if evt.test_file in self.state.files_with_missing_import:
            return
        file = self.relative_file(evt.test_file)
        if evt.non_zero_exit_code:
            message = f"{file} exited with a non-zero exit code: {evt.non_zero_exit_code}"
        else:
            message = f"{file} exited due to {evt.signal}"
        self.line_writer.write_line(self.colors.error(f"{self.figures.cross} {message}"))

    def _on_worker_finished(self, evt: WorkerFinished) -> None:
        self.state.running_files.pop(evt.test_file, None)
        if evt.forced_exit or evt.test_file in self.state.files_with_missing_import:
            return
        stats = self.state.stats
        file_stats = stats.by_file.get(evt.test_file) if stats and evt.test_file else None
        if file_stats is None:
            return

        file, cross = self.relative_file(evt.test_file), self.figures.cross
        if file_stats.declared_tests == 0:
            self.line_writer.write_line(self.colors.error(f"{cross} No tests found in {file}"))
        elif file_stats.selecting_lines and file_stats.selected_tests == 0:
            self.line_writer.write_line(self.colors.error(f"{cross} Line numbers for {file} did not match any tests"))
        elif not self.state.fail_fast_enabled and file_stats.remaining_tests > 0:
            remaining = file_stats.remaining_tests
            self.line_writer.write_line(self.colors.error(f"{cross} {remaining} {plur('test', remaining)} remaining in {file}"))

    def _on_worker_output(self, evt: WorkerOutput) -> None:
        chunk = evt.chunk
        if isinstance(chunk, bytes) and hasattr(self.std_stream, "buffer"):
            self.std_stream.buffer.write(chunk)
        elif isinstance(chunk, bytes):
            self.std_stream.write(chunk.decode("utf-8", errors="replace"))
        else:
            self.std_stream.write(chunk)
        # The std stream stays verbatim; the forced break goes on the report stream.
        newline = b"\n" if isinstance(chunk, bytes) else "\n"
        if not chunk.endswith(newline):
            self.line_writer.write("\n")

    # --- rendering helpers ---
    def write_pending_tests(self, evt: Timeout) -> None:
        for file, titles in evt.pending_tests.items():
            if not titles:
                continue
            self.line_writer.write_line(f"{len(titles)} tests were pending in {self.relative_file(file)}\n")
            for title in titles:
                self.line_writer.write_line(f"{self.figures.circle_dotted} {self.state.prefix_title(file, title)}")
            self.line_writer.write_line()

    def write_logs(self, evt, surround_lines: bool = False) -> bool:
        if not getattr(evt, "logs", None):
            return False
        if surround_lines:
            self.line_writer.write_line()
        for entry in evt.logs:
            lines = indent_string(self.colors.log(entry), 4)
            self.line_writer.write_line(_LOG_INDENT.sub(f"  {self.colors.information(self.figures.info)} ", lines, count=1))
        if surround_lines:
            self.line_writer.write_line()
        return True

    def write_test_summary(self, evt) -> None:
        title = self.state.prefix_title(evt.test_file, evt.title)
        if evt.type in ("hook-failed", "test-failed"):
            self.line_writer.write_line(f"{self.colors.error(self.figures.cross)} {title} {self.colors.error(evt.err.message)}")
        elif evt.known_failing:
            self.line_writer.write_line(f"{self.colors.error(self.figures.tick)} {self.colors.error(title)}")
        else:
            duration = ""
            if evt.duration > self.duration_threshold:
                duration = self.colors.duration(f" ({pretty_ms(evt.duration)})")
            self.line_writer.write_line(f"{self.colors.paint('pass', self.figures.tick)} {title}{duration}")
        self.write_logs(evt)

    def write_failure(self, evt) -> None:
        self.line_writer.write_line(self.colors.title(self.state.prefix_title(evt.test_file, evt.title)))
        if not self.write_logs(evt, surround_lines=True):
            self.line_writer.write_line()
        self.errors.write_err(evt.err)

    @while_corked
    def end_run(self) -> None:
        log.debug("run ended with %d failure(s)", len(self.state.failures))
        self.summary.render(self.state)
