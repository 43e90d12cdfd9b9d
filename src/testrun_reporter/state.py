from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Union

from .events import FailedHook, FailedTest, PassedTest, StatsSnapshot

TitlePrefixer = Callable[[str, str], str]

def identity_title(test_file: Optional[str], title: str) -> str:
    return title

@dataclass
class RunState:
    """Everything one reporter knows about the run in progress."""
    failures: List[Union[FailedHook, FailedTest]] = field(default_factory=list)
    known_failures: List[PassedTest] = field(default_factory=list)
    files_with_missing_import: Set[str] = field(default_factory=set)
    running_files: Dict[str, dict] = field(default_factory=dict)
    fail_fast_enabled: bool = False
    matching: bool = False
    empty_parallel_run: bool = False
    previous_failures: int = 0
    prefix_title: TitlePrefixer = identity_title
    stats: Optional[StatsSnapshot] = None
    remove_previous_listener: Optional[Callable[[], None]] = None

    def reset(self) -> None:
        if self.remove_previous_listener:
            self.remove_previous_listener()
        self.failures = []
        self.known_failures = []
        self.files_with_missing_import = set()
        self.running_files = {}
        self.fail_fast_enabled = False
        self.matching = False
        self.empty_parallel_run = False
        self.previous_failures = 0
        self.prefix_title = identity_title
        self.stats = None
        self.remove_previous_listener = None
