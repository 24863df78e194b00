"""
Build History

Ordered, time-ascending sequence of a job's builds with indexed
previous / next / previous-successful lookups.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from .build import Build, BuildResult, FailedTest, TestResultSummary

logger = logging.getLogger(__name__)


class BuildHistory:
    """
    A job's build history.

    Builds are stored oldest first. Every navigation method is an index
    lookup; the nearest earlier successful build is precomputed per
    position when the history is created.

    Usage:
        history = BuildHistory("app", [b1, b2, b3])
        history.last_build            # b3
        history.previous(b3)          # b2
        history.previous_successful(b3)
    """

    def __init__(
        self,
        job_name: str,
        builds: List[Build],
        display_name: Optional[str] = None,
    ):
        """
        Initialize build history.

        Args:
            job_name: Job name (used for default build URLs)
            builds: Builds ordered oldest first
            display_name: Full display name of the job (defaults to job_name)

        Raises:
            ValueError: If build numbers are not strictly increasing
        """
        self.job_name = job_name
        self.display_name = display_name or job_name
        self._builds: List[Build] = list(builds)
        self._index: Dict[int, int] = {}
        self._previous_successful: List[Optional[int]] = []

        last_success = None
        for position, build in enumerate(self._builds):
            if position and build.number <= self._builds[position - 1].number:
                raise ValueError(
                    f"Build numbers must be strictly increasing: "
                    f"#{self._builds[position - 1].number} followed by #{build.number}"
                )
            self._index[build.number] = position
            self._previous_successful.append(last_success)
            if build.result == BuildResult.SUCCESS:
                last_success = position

    def __len__(self) -> int:
        return len(self._builds)

    def __iter__(self) -> Iterator[Build]:
        return iter(self._builds)

    def __contains__(self, build: Build) -> bool:
        position = self._index.get(build.number)
        return position is not None and self._builds[position] is build

    @property
    def builds(self) -> List[Build]:
        return list(self._builds)

    @property
    def last_build(self) -> Optional[Build]:
        """Most recent build, or None for an empty history."""
        return self._builds[-1] if self._builds else None

    def get(self, number: int) -> Optional[Build]:
        """Get a build by number."""
        position = self._index.get(number)
        return self._builds[position] if position is not None else None

    def _position(self, build: Build) -> int:
        try:
            return self._index[build.number]
        except KeyError:
            raise KeyError(f"Build #{build.number} is not part of {self.job_name}") from None

    def previous(self, build: Build) -> Optional[Build]:
        """Build immediately before the given one."""
        position = self._position(build)
        return self._builds[position - 1] if position > 0 else None

    def next(self, build: Build) -> Optional[Build]:
        """Build immediately after the given one."""
        position = self._position(build)
        return self._builds[position + 1] if position + 1 < len(self._builds) else None

    def previous_successful(self, build: Build) -> Optional[Build]:
        """Nearest earlier build whose result is SUCCESS."""
        position = self._previous_successful[self._position(build)]
        return self._builds[position] if position is not None else None

    def previous_builds(self, build: Build) -> Iterator[Build]:
        """Iterate over earlier builds, newest first."""
        position = self._position(build)
        for earlier in range(position - 1, -1, -1):
            yield self._builds[earlier]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BuildHistory':
        """
        Create a history from its JSON representation.

        Args:
            data: Mapping with 'job', optional 'display_name' and a 'builds' list

        Returns:
            BuildHistory with builds sorted by number
        """
        job_name = data.get("job") or "job"
        builds = sorted(
            (_build_from_dict(job_name, b) for b in data.get("builds", [])),
            key=lambda b: b.number,
        )
        logger.debug("Loaded %d builds for %s", len(builds), job_name)
        return cls(job_name, builds, display_name=data.get("display_name"))


def load_history(path: Union[str, Path]) -> BuildHistory:
    """Load a build history from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return BuildHistory.from_dict(json.load(f))


def _build_from_dict(job_name: str, data: Dict[str, Any]) -> Build:
    number = int(data["number"])
    result = data.get("result")

    if data.get("duration_ms") is not None:
        duration = timedelta(milliseconds=data["duration_ms"])
    else:
        duration = timedelta(seconds=data.get("duration_seconds") or 0)

    build = Build(
        number=number,
        result=BuildResult.parse(result) if result else None,
        duration=duration,
        display_name=data.get("display_name"),
        url=data.get("url") or f"job/{job_name}/{number}/",
        test_result=_tests_from_dict(data["tests"]) if data.get("tests") else None,
        environment=dict(data.get("environment", {})),
    )
    if data.get("started_at"):
        build.started_at = _parse_timestamp(data["started_at"])
    elif not build.is_building:
        # only a running build may start "now"
        raise ValueError(f"Build {number} has a result but no started_at")
    return build


def _parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp, treating naive values as UTC."""
    started_at = datetime.fromisoformat(value)
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    return started_at


def _tests_from_dict(data: Dict[str, Any]) -> TestResultSummary:
    return TestResultSummary(
        total=int(data.get("total", 0)),
        failed=int(data.get("failed", 0)),
        skipped=int(data.get("skipped", 0)),
        failed_tests=[
            FailedTest(full_name=t["name"], duration_seconds=float(t.get("duration", 0.0)))
            for t in data.get("failed_tests", [])
        ],
    )
