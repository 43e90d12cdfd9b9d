"""Feed a recorded JSON-lines event log through a reporter."""

import json
import logging
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .events import StatsSnapshot, parse_event
from .plan import RunPlan, RunStatus
from .reporters.verbose import VerboseReporter

log = logging.getLogger(__name__)

class ReplayError(Exception):
    def __init__(self, lineno: int, message: str):
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno

class PlanRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    files: List[str] = Field(default_factory=list)
    bail_without_reporting: bool = False
    fail_fast_enabled: bool = False
    matching: bool = False
    previous_failures: int = 0
    file_path_prefix: Optional[str] = None
    run_vector: int = 1
    empty_parallel_run: bool = False

    def to_plan(self) -> RunPlan:
        return RunPlan(
            files=self.files,
            status=RunStatus(empty_parallel_run=self.empty_parallel_run),
            bail_without_reporting=self.bail_without_reporting,
            fail_fast_enabled=self.fail_fast_enabled,
            matching=self.matching,
            previous_failures=self.previous_failures,
            file_path_prefix=self.file_path_prefix,
            run_vector=self.run_vector,
        )

def _finish(plan: Optional[RunPlan], reporter: VerboseReporter) -> None:
    if plan is not None and not plan.bail_without_reporting:
        reporter.end_run()

def replay(lines: Iterable[str], reporter: VerboseReporter) -> Optional[StatsSnapshot]:
    """Replay every run in `lines`. Returns the last stats snapshot seen."""
    plan: Optional[RunPlan] = None
    last_stats: Optional[StatsSnapshot] = None

    for lineno, raw in enumerate(lines, 1):
        if not raw.strip():
            continue
        try:
            record = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ReplayError(lineno, f"invalid JSON ({e.msg})") from e
        if not isinstance(record, dict):
            raise ReplayError(lineno, "expected a JSON object")

        kind = record.get("type")
        try:
            if kind == "run-start":
                _finish(plan, reporter)
                plan = PlanRecord.model_validate(record).to_plan()
                reporter.start_run(plan)
                continue
            if kind == "run-end":
                _finish(plan, reporter)
                plan = None
                continue
            event = parse_event(record)
        except ValidationError as e:
            raise ReplayError(lineno, f"invalid {kind or 'untyped'} record: {e.error_count()} error(s)") from e

        if plan is None:
            log.debug("line %d: event before run-start, starting an empty run", lineno)
            plan = RunPlan()
            reporter.start_run(plan)
        plan.status.emit_state_change(event)
        if plan.status.stats is not None:
            last_stats = plan.status.stats

    _finish(plan, reporter)
    return last_stats
