import datetime
import logging
from typing import Callable

from ..events import StatsSnapshot
from ..state import RunState
from ..utils.figures import Figures
from ..utils.text import plur
from .colors import Colors
from .line_writer import LineWriter

log = logging.getLogger(__name__)

class SummaryRenderer:
    """End-of-run block: failures, fail-fast notice, partition info and counts."""

    def __init__(self, line_writer: LineWriter, colors: Colors, figures: Figures,
                 write_failure: Callable, watching: bool = False,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.line_writer = line_writer
        self.colors = colors
        self.figures = figures
        self.write_failure = write_failure
        self.watching = watching
        self.clock = clock
        self._suffix = ""

    def _take_suffix(self) -> str:
        suffix, self._suffix = self._suffix, ""
        return suffix

    def render(self, state: RunState) -> None:
        lw, colors = self.line_writer, self.colors

        if state.empty_parallel_run:
            log.debug("empty parallel run")
            lw.write_line("No files tested in this parallel run")
            lw.write_line()
            return

        self._suffix = ""
        if self.watching:
            self._suffix = " " + colors.rule(f"[{self.clock().strftime('%H:%M:%S')}]")

        stats = state.stats
        if stats is None:
            log.debug("no stats received")
            lw.write_line(colors.error(f"{self.figures.cross} Couldn’t find any files to test") + self._take_suffix())
            lw.write_line()
            return

        if state.matching and stats.selected_tests == 0:
            log.debug("no tests matched")
            lw.write_line(colors.error(f"{self.figures.cross} Couldn’t find any matching tests") + self._take_suffix())
            lw.write_line()
            return

        lw.write_line(colors.log(self.figures.line))
        lw.write_line()

        if state.failures:
            last = len(state.failures) - 1
            for index, evt in enumerate(state.failures):
                self.write_failure(evt)
                if index != last:
                    lw.write_line()
                    lw.write_line()
            lw.write_line(colors.log(self.figures.line))
            lw.write_line()

        if state.fail_fast_enabled:
            self._write_fail_fast(stats)

        if stats.parallel_runs:
            runs = stats.parallel_runs
            lw.write_line(colors.information(
                f"Ran {runs.current_file_count} test {plur('file', runs.current_file_count)} "
                f"out of {stats.files} for job {runs.current_index + 1} of {runs.total_runs}"
            ))
            lw.write_line()

        self._write_counts(stats, state.previous_failures)

        if self.watching:
            lw.write_line()

    def _write_fail_fast(self, stats: StatsSnapshot) -> None:
        skipped_files = stats.files - stats.finished_workers
        if stats.remaining_tests <= 0 and skipped_files <= 0:
            return
        remaining = ""
        if stats.remaining_tests > 0:
            remaining += f"At least {stats.remaining_tests} {plur('test was', stats.remaining_tests, 'tests were')} skipped"
            if skipped_files > 0:
                remaining += ", as well as "
        if skipped_files > 0:
            remaining += f"{skipped_files} {plur('test file', skipped_files)}"
            if stats.remaining_tests <= 0:
                remaining += f" {plur('was', skipped_files, 'were')} skipped"
        self.line_writer.write_line(self.colors.information(f"`--fail-fast` is on. {remaining}."))
        self.line_writer.write_line()

    def _write_counts(self, stats: StatsSnapshot, previous_failures: int) -> None:
        lw, colors = self.line_writer, self.colors

        if stats.failed_hooks > 0:
            lw.write_line(colors.error(f"{stats.failed_hooks} {plur('hook', stats.failed_hooks)} failed") + self._take_suffix())
        if stats.failed_tests > 0:
            lw.write_line(colors.error(f"{stats.failed_tests} {plur('test', stats.failed_tests)} failed") + self._take_suffix())
        if stats.failed_hooks == 0 and stats.failed_tests == 0 and stats.passed_tests > 0:
            lw.write_line(colors.paint("pass", f"{stats.passed_tests} {plur('test', stats.passed_tests)} passed") + self._take_suffix())

        counts = (
            (stats.passed_known_failing_tests, "error", lambda n: f"{n} {plur('known failure', n)}"),
            (stats.skipped_tests, "skip", lambda n: f"{n} {plur('test', n)} skipped"),
            (stats.todo_tests, "todo", lambda n: f"{n} {plur('test', n)} todo"),
            (stats.unhandled_rejections, "error", lambda n: f"{n} unhandled {plur('rejection', n)}"),
            (stats.uncaught_exceptions, "error", lambda n: f"{n} uncaught {plur('exception', n)}"),
            (previous_failures, "error", lambda n: f"{n} previous {plur('failure', n)} in test files that were not rerun"),
        )
        for count, role, text in counts:
            if count > 0:
                lw.write_line(colors.paint(role, text(count)))
