from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type, Union

from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

class SourceLocation(_Model):
    file: str
    line: int
    is_within_project: bool = True
    is_dependency: bool = False

class FormattedValue(_Model):
    label: str = ""
    formatted: str = ""

class ImproperUsage(_Model):
    name: str = ""
    snap_path: str = ""
    snap_version: Optional[int] = None
    expected_version: Optional[int] = None

class SerializedError(_Model):
    """An error as serialized by the worker that raised it."""
    name: str = ""
    message: str = ""
    summary: str = ""
    stack: str = ""
    source: Optional[SourceLocation] = None
    assertion_error: bool = Field(False, alias="avaAssertionError")
    assertion: str = ""
    improper_usage: Optional[ImproperUsage] = None
    non_error_object: bool = False
    formatted: str = ""
    should_beautify_stack: bool = False
    values: List[FormattedValue] = Field(default_factory=list)
    statements: List[Tuple[str, str]] = Field(default_factory=list)
    diagnostic_text: Optional[str] = Field(
        None, validation_alias=AliasChoices("diagnosticText", "diagnostic_text", AliasPath("object", "diagnosticText"))
    )

    @field_validator("improper_usage", mode="before")
    @classmethod
    def _usage_flag(cls, value: Any) -> Any:
        # Assertion misuse is flagged with a bare `true`, snapshot errors carry details
        if isinstance(value, bool):
            return {} if value else None
        return value

class FileStats(_Model):
    declared_tests: int = 0
    selecting_lines: bool = False
    selected_tests: int = 0
    remaining_tests: int = 0

class ParallelRuns(_Model):
    current_file_count: int = 0
    current_index: int = 0
    total_runs: int = 1

class StatsSnapshot(_Model):
    by_file: Dict[str, FileStats] = Field(default_factory=dict)
    files: int = 0
    finished_workers: int = 0
    remaining_tests: int = 0
    selected_tests: int = 0
    failed_hooks: int = 0
    failed_tests: int = 0
    passed_tests: int = 0
    passed_known_failing_tests: int = 0
    skipped_tests: int = 0
    todo_tests: int = 0
    unhandled_rejections: int = 0
    uncaught_exceptions: int = 0
    parallel_runs: Optional[ParallelRuns] = None

class Event(_Model):
    type: str
    test_file: Optional[str] = None

class _TitledEvent(Event):
    title: str = ""
    logs: List[str] = Field(default_factory=list)

class _ErrorEvent(Event):
    err: SerializedError = Field(default_factory=SerializedError)

    @field_validator("err", mode="before")
    @classmethod
    def _missing_err(cls, value: Any) -> Any:
        return {} if value is None else value

class FailedHook(_TitledEvent, _ErrorEvent):
    type: Literal["hook-failed"] = "hook-failed"

class FailedTest(_TitledEvent, _ErrorEvent):
    type: Literal["test-failed"] = "test-failed"

class PassedTest(_TitledEvent):
    type: Literal["test-passed"] = "test-passed"
    duration: float = 0
    known_failing: bool = False

class FinishedHook(_TitledEvent):
    type: Literal["hook-finished"] = "hook-finished"

class SelectedTest(_TitledEvent):
    type: Literal["selected-test"] = "selected-test"
    skip: bool = False
    todo: bool = False

class InternalError(_ErrorEvent):
    type: Literal["internal-error"] = "internal-error"

class UncaughtException(_ErrorEvent):
    type: Literal["uncaught-exception"] = "uncaught-exception"

class UnhandledRejection(_ErrorEvent):
    type: Literal["unhandled-rejection"] = "unhandled-rejection"

class LineNumberSelectionError(Event):
    type: Literal["line-number-selection-error"] = "line-number-selection-error"

class MissingImport(Event):
    type: Literal["missing-ava-import"] = "missing-ava-import"

class StatsChanged(Event):
    type: Literal["stats"] = "stats"
    stats: StatsSnapshot = Field(default_factory=StatsSnapshot)

class _PendingEvent(Event):
    pending_tests: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("pending_tests", mode="before")
    @classmethod
    def _from_pairs(cls, value: Any) -> Any:
        # A serialized Map arrives as [[file, titles], ...]
        if isinstance(value, (list, tuple)):
            return {file: list(titles) for file, titles in value}
        if isinstance(value, Mapping):
            return {file: list(titles) for file, titles in value.items()}
        return value

class Timeout(_PendingEvent):
    type: Literal["timeout"] = "timeout"

class Interrupt(_PendingEvent):
    type: Literal["interrupt"] = "interrupt"

class WorkerFailed(Event):
    type: Literal["worker-failed"] = "worker-failed"
    non_zero_exit_code: Optional[int] = None
    signal: Optional[str] = None

class WorkerFinished(Event):
    type: Literal["worker-finished"] = "worker-finished"
    forced_exit: bool = False

class WorkerOutput(Event):
    type: Literal["worker-stdout", "worker-stderr"] = "worker-stdout"
    chunk: Union[str, bytes] = ""

EVENT_TYPES: Dict[str, Type[Event]] = {
    "hook-failed": FailedHook,
    "test-failed": FailedTest,
    "test-passed": PassedTest,
    "hook-finished": FinishedHook,
    "selected-test": SelectedTest,
    "internal-error": InternalError,
    "uncaught-exception": UncaughtException,
    "unhandled-rejection": UnhandledRejection,
    "line-number-selection-error": LineNumberSelectionError,
    "missing-ava-import": MissingImport,
    "stats": StatsChanged,
    "timeout": Timeout,
    "interrupt": Interrupt,
    "worker-failed": WorkerFailed,
    "worker-finished": WorkerFinished,
    "worker-stdout": WorkerOutput,
    "worker-stderr": WorkerOutput,
}

def parse_event(data: Mapping[str, Any]) -> Event:
    """Validate a raw event. Unknown types come back as a bare `Event`."""
    cls = EVENT_TYPES.get(data.get("type", ""), Event)
    return cls.model_validate(data)
