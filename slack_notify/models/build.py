"""
Build Records

Data structures for a single CI build and its attached test results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional

from ..helpers.timespan import time_span_string


class BuildResult(Enum):
    """Terminal outcome of a build."""
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"
    NOT_BUILT = "NOT_BUILT"
    ABORTED = "ABORTED"

    @property
    def severity(self) -> Optional[int]:
        """Position in the SUCCESS < UNSTABLE < FAILURE ordering (None if unordered)."""
        return _SEVERITY.get(self)

    def is_worse_than(self, other: 'BuildResult') -> bool:
        """
        Check if this result is strictly more severe than another.

        ABORTED and NOT_BUILT sit outside the ordering, so any
        comparison involving them is False.
        """
        if self.severity is None or other.severity is None:
            return False
        return self.severity > other.severity

    @classmethod
    def parse(cls, value: str) -> 'BuildResult':
        """Parse a result name such as 'failure' or 'NOT_BUILT'."""
        if not isinstance(value, str):
            raise ValueError(f"Build result must be a string, got {value!r}")
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown build result: {value!r}") from None


_SEVERITY = {
    BuildResult.SUCCESS: 0,
    BuildResult.UNSTABLE: 1,
    BuildResult.FAILURE: 2,
}


@dataclass
class FailedTest:
    """A single failing test case."""
    full_name: str
    duration_seconds: float = 0.0

    @property
    def qualified_name(self) -> str:
        """Class and method part of the name, e.g. 'Foo.testBar' for 'com.acme.Foo.testBar'."""
        if self.full_name.count('.') > 1:
            method_dot = self.full_name.rfind('.')
            class_dot = self.full_name.rfind('.', 0, method_dot)
            return self.full_name[class_dot + 1:]
        return self.full_name

    @property
    def duration_string(self) -> str:
        return time_span_string(int(self.duration_seconds * 1000))


@dataclass
class TestResultSummary:
    """Aggregated test results attached to a build."""
    __test__ = False  # not a pytest test class

    total: int = 0
    failed: int = 0
    skipped: int = 0
    failed_tests: List[FailedTest] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return self.total - self.failed - self.skipped


@dataclass
class Build:
    """One execution of a job."""
    number: int
    result: Optional[BuildResult] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration: timedelta = field(default_factory=timedelta)
    display_name: Optional[str] = None
    url: Optional[str] = None
    test_result: Optional[TestResultSummary] = None
    environment: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.display_name is None:
            self.display_name = f"#{self.number}"

    @property
    def is_building(self) -> bool:
        """A build without a result is still running."""
        return self.result is None

    @property
    def ended_at(self) -> datetime:
        return self.started_at + self.duration

    def duration_string(self, now: Optional[datetime] = None) -> str:
        """
        Human-readable build duration.

        Args:
            now: Reference time for running builds (defaults to the current time)

        Returns:
            Time span string, suffixed with 'and counting' while the build runs
        """
        if self.is_building:
            now = now or datetime.now(self.started_at.tzinfo)
            elapsed = now - self.started_at
            return f"{time_span_string(_to_millis(elapsed))} and counting"
        return time_span_string(_to_millis(self.duration))


def _to_millis(delta: timedelta) -> int:
    return int(delta.total_seconds() * 1000)
