import io

from testrun_reporter.events import (
    FailedHook, FailedTest, FinishedHook, InternalError, Interrupt, LineNumberSelectionError, MissingImport,
    PassedTest, SelectedTest, SerializedError, Timeout, UncaughtException, UnhandledRejection, WorkerFailed,
    WorkerFinished, WorkerOutput, parse_event,
)
from testrun_reporter.plan import RunPlan, RunStatus

F = "/proj/test.js"

def test_start_run_writes_leading_blank_line(harness):
    harness.start()
    assert harness.output() == "\n"

def test_bail_without_reporting_touches_nothing(harness):
    status = RunStatus()
    harness.reporter.start_run(RunPlan(files=[F], status=status, bail_without_reporting=True))
    status.emit_state_change(PassedTest(test_file=F, title="t"))
    assert harness.output() == ""
    assert harness.reporter.state.remove_previous_listener is None

def test_watch_rerun_draws_rule(make_harness):
    h = make_harness(watching=True, columns=10)
    h.start(run_vector=2)
    assert h.output() == "─" * 10 + "\n\n"

def test_passed_test_line(harness):
    harness.start().take()
    harness.emit(PassedTest(test_file=F, title="adds numbers", duration=5))
    assert harness.take() == "  ✔ adds numbers\n"

def test_duration_shown_only_above_threshold(harness):
    harness.start().take()
    harness.emit(PassedTest(test_file=F, title="at", duration=100))
    harness.emit(PassedTest(test_file=F, title="above", duration=1337))
    assert harness.take() == "  ✔ at\n  ✔ above (1.3s)\n"

def test_known_failure_is_recorded(harness):
    harness.start().take()
    evt = PassedTest(test_file=F, title="still broken", known_failing=True, duration=500)
    harness.emit(evt)
    assert harness.take() == "  ✔ still broken\n"
    assert harness.reporter.state.known_failures == [evt]

def test_failures_are_recorded_in_arrival_order(harness):
    harness.start().take()
    hook = FailedHook(test_file=F, title="before hook", err=SerializedError(message="setup broke"))
    test = FailedTest(test_file=F, title="adds", err=SerializedError(message="nope"))
    harness.emit(hook, test)
    assert harness.take() == "  ✘ before hook setup broke\n  ✘ adds nope\n"
    assert harness.reporter.state.failures == [hook, test]

def test_logs_follow_the_test_line(harness):
    harness.start().take()
    harness.emit(PassedTest(test_file=F, title="logs", logs=["one", "two\nlines"]))
    assert harness.take() == "  ✔ logs\n    ℹ one\n    ℹ two\n      lines\n"

def test_multiple_files_prefix_titles(harness):
    harness.start(files=("test/math.js", "test/strings.js")).take()
    harness.emit(PassedTest(test_file="/proj/test/math.js", title="adds"))
    assert harness.take() == "  ✔ math › adds\n"

def test_hook_finished_only_with_logs(harness):
    harness.start().take()
    harness.emit(FinishedHook(test_file=F, title="before"))
    assert harness.take() == ""
    harness.emit(FinishedHook(test_file=F, title="before", logs=["ready"]))
    assert harness.take() == "    before\n    ℹ ready\n"

def test_selected_test_skip_and_todo(harness):
    harness.start().take()
    harness.emit(
        SelectedTest(test_file=F, title="runs"),
        SelectedTest(test_file=F, title="skipped", skip=True),
        SelectedTest(test_file=F, title="later", todo=True),
    )
    assert harness.take() == "  - skipped\n  - later\n"

def test_internal_error_banner(harness):
    harness.start().take()
    harness.emit(InternalError(test_file=F, err=SerializedError(summary="TypeError: x", stack="at y")))
    assert harness.take() == "  ✘ Internal error when running test.js\n  TypeError: x\n  at y\n\n\n"
    harness.emit(InternalError(err=SerializedError(summary="TypeError: x")))
    assert harness.take().startswith("  ✘ Internal error\n")

def test_line_number_selection_error(harness):
    harness.start().take()
    harness.emit(LineNumberSelectionError(test_file=F))
    assert harness.take() == "  ⚠ Could not parse test.js for line number selection\n"

def test_missing_import_suppresses_worker_messages(make_harness):
    h = make_harness(import_name="mytest")
    h.start().take()
    h.stats(by_file={"test.js": {"declared_tests": 0}})
    h.emit(MissingImport(test_file=F))
    assert h.take() == '  ✘ No tests found in test.js, make sure to import "mytest" at the top of your test file\n'
    h.emit(WorkerFailed(test_file=F, non_zero_exit_code=1), WorkerFinished(test_file=F))
    assert h.take() == ""

def test_worker_failed_exit_code_and_signal(harness):
    harness.start().take()
    harness.emit(WorkerFailed(test_file=F, non_zero_exit_code=3))
    assert harness.take() == "  ✘ test.js exited with a non-zero exit code: 3\n"
    harness.emit(WorkerFailed(test_file=F, signal="SIGKILL"))
    assert harness.take() == "  ✘ test.js exited due to SIGKILL\n"

def test_worker_finished_no_tests_found(harness):
    harness.start().take()
    harness.stats(by_file={"test.js": {"declared_tests": 0, "selecting_lines": True, "remaining_tests": 2}})
    harness.emit(WorkerFinished(test_file=F))
    assert harness.take() == "  ✘ No tests found in test.js\n"

def test_worker_finished_line_numbers_matched_nothing(harness):
    harness.start().take()
    harness.stats(by_file={"test.js": {"declared_tests": 3, "selecting_lines": True, "selected_tests": 0}})
    harness.emit(WorkerFinished(test_file=F))
    assert harness.take() == "  ✘ Line numbers for test.js did not match any tests\n"

def test_worker_finished_remaining_tests(harness):
    harness.start().take()
    harness.stats(by_file={"test.js": {"declared_tests": 3, "selected_tests": 3, "remaining_tests": 1}})
    harness.emit(WorkerFinished(test_file=F))
    assert harness.take() == "  ✘ 1 test remaining in test.js\n"

def test_worker_finished_quiet_cases(harness):
    harness.start(fail_fast_enabled=True).take()
    harness.emit(WorkerFinished(test_file=F))
    harness.stats(by_file={"test.js": {"declared_tests": 3, "remaining_tests": 2}})
    harness.emit(WorkerFinished(test_file=F), WorkerFinished(test_file=F, forced_exit=True))
    harness.emit(WorkerFinished(test_file="/proj/unknown.js"))
    assert harness.take() == ""

def test_worker_output_passthrough(harness):
    harness.start().take()
    harness.emit(WorkerOutput(type="worker-stdout", test_file=F, chunk="line\n"))
    assert harness.std.getvalue() == "line\n"
    assert harness.take() == ""
    harness.emit(WorkerOutput(type="worker-stderr", test_file=F, chunk="partial"))
    assert harness.std.getvalue() == "line\npartial"
    assert harness.take() == "\n"

def test_worker_output_bytes_go_to_binary_buffer(make_harness):
    h = make_harness()
    raw = io.BytesIO()
    h.reporter.std_stream = io.TextIOWrapper(raw, encoding="utf-8")
    h.start().take()
    h.emit(WorkerOutput(test_file=F, chunk=b"\xff\xfe"))
    assert raw.getvalue() == b"\xff\xfe"
    assert h.take() == "\n"

def test_timeout_dumps_pending_tests(harness):
    harness.start().take()
    harness.emit(parse_event({"type": "timeout", "pendingTests": [["/proj/file.js", ["a", "b"]], ["/proj/done.js", []]]}))
    assert harness.take() == (
        "\n"
        "  ✘ Timed out while running tests\n"
        "\n"
        "  2 tests were pending in file.js\n"
        "\n"
        "  ◌ a\n"
        "  ◌ b\n"
        "\n"
    )

def test_interrupt_banner(harness):
    harness.start().take()
    harness.emit(Interrupt(pending_tests={F: ["slow"]}))
    out = harness.take()
    assert out.startswith("\n  ✘ Exiting due to SIGINT\n\n")
    assert "  1 tests were pending in test.js\n" in out
    assert "  ◌ slow\n" in out

def test_uncaught_exception_and_unhandled_rejection(harness):
    harness.start().take()
    harness.emit(PassedTest(test_file=F, title="ok"))
    harness.emit(UncaughtException(test_file=F, err=SerializedError(summary="Error: boom")))
    assert harness.take() == "  ✔ ok\n\n  Uncaught exception in test.js\n\n  Error: boom\n\n"
    harness.emit(UnhandledRejection(test_file=F, err=SerializedError(summary="Error: later")))
    assert harness.take() == "  Unhandled rejection in test.js\n\n  Error: later\n\n"

def test_unknown_events_are_ignored(harness):
    harness.start().take()
    harness.emit(parse_event({"type": "something-new", "testFile": F}))
    assert harness.take() == ""

def test_each_event_is_written_in_one_piece(make_harness):
    class Recording(io.StringIO):
        def __init__(self):
            super().__init__()
            self.writes = []

        def write(self, s):
            self.writes.append(s)
            return super().write(s)

    h = make_harness()
    h.report = Recording()
    h.reporter.line_writer.dest = h.report
    h.start()
    h.report.writes.clear()
    h.emit(Timeout(pending_tests={F: ["a", "b", "c"]}))
    assert len(h.report.writes) == 1

def test_new_run_detaches_previous_status(harness):
    harness.start()
    old_status = harness.status
    harness.start().take()
    old_status.emit_state_change(PassedTest(test_file=F, title="stale"))
    assert harness.take() == ""
