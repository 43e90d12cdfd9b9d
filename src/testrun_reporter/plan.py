from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .events import Event, StatsSnapshot, StatsChanged
from .utils.paths import common_path_prefix

Listener = Callable[[Event], None]

class RunStatus:
    """State-change feed for one run, as handed to reporters in the plan."""

    def __init__(self, empty_parallel_run: bool = False):
        self.empty_parallel_run = empty_parallel_run
        self.stats: Optional[StatsSnapshot] = None
        self._listeners: List[Listener] = []

    def on_state_change(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def emit_state_change(self, event: Event) -> None:
        if isinstance(event, StatsChanged):
            self.stats = event.stats
        for listener in list(self._listeners):
            listener(event)

@dataclass
class RunPlan:
    files: List[str] = field(default_factory=list)
    status: RunStatus = field(default_factory=RunStatus)
    bail_without_reporting: bool = False
    fail_fast_enabled: bool = False
    matching: bool = False
    previous_failures: int = 0
    file_path_prefix: Optional[str] = None
    run_vector: int = 1

    def __post_init__(self):
        if self.file_path_prefix is None:
            self.file_path_prefix = common_path_prefix(self.files)
