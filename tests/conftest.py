import io

import pytest

from testrun_reporter.config import ReporterConfig
from testrun_reporter.events import StatsChanged, StatsSnapshot
from testrun_reporter.plan import RunPlan, RunStatus
from testrun_reporter.reporters.verbose import VerboseReporter

PROJECT = "/proj"

class Harness:
    """A reporter wired to in-memory streams, plus the status feed of its current run."""

    def __init__(self, reporter: VerboseReporter, report: io.StringIO, std: io.StringIO):
        self.reporter = reporter
        self.report = report
        self.std = std
        self.status = None
        self._seen = 0

    def start(self, files=("test.js",), **plan_kw) -> "Harness":
        self.status = RunStatus(empty_parallel_run=plan_kw.pop("empty_parallel_run", False))
        files = [f"{PROJECT}/{f}" for f in files]
        self.reporter.start_run(RunPlan(files=files, status=self.status, **plan_kw))
        return self

    def emit(self, *events) -> "Harness":
        for event in events:
            self.status.emit_state_change(event)
        return self

    def stats(self, **counts) -> "Harness":
        by_file = {f"{PROJECT}/{k}": v for k, v in counts.pop("by_file", {}).items()}
        return self.emit(StatsChanged(stats=StatsSnapshot(by_file=by_file, **counts)))

    def end(self) -> "Harness":
        self.reporter.end_run()
        return self

    def output(self) -> str:
        return self.report.getvalue()

    def take(self) -> str:
        """Report output written since the previous take()."""
        out = self.report.getvalue()
        new, self._seen = out[self._seen:], len(out)
        return new

@pytest.fixture
def make_harness():
    def _make(**config_kw) -> Harness:
        config_kw.setdefault("color", False)
        config_kw.setdefault("project_dir", PROJECT)
        report, std = io.StringIO(), io.StringIO()
        reporter = VerboseReporter(ReporterConfig(**config_kw), report_stream=report, std_stream=std)
        return Harness(reporter, report, std)
    return _make

@pytest.fixture
def harness(make_harness):
    return make_harness()
