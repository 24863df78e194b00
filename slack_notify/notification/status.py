"""
Build Status Resolver

Derives a human-readable status label and a Slack attachment color from
a build's position in its job history.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..helpers.timespan import time_span_string
from ..models.build import Build, BuildResult
from ..models.history import BuildHistory

logger = logging.getLogger(__name__)

GOOD = "good"
CRITICAL = "critical"
BAD = "bad"


class StatusLabel(Enum):
    """Status label with the text shown in the notification."""
    BACK_TO_NORMAL = "Back to normal"
    STILL_FAILING = "Still Failing"
    SUCCESS = "Success"
    FAILURE = "Failure"
    ABORTED = "Aborted"
    NOT_BUILT = "Not built"
    UNSTABLE = "Unstable"
    REGRESSION = "Regression"
    UNKNOWN = "Unknown"

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class BuildStatus:
    """Resolved status of a build."""
    label: StatusLabel
    color: Optional[str] = None
    previous_result: Optional[BuildResult] = None


def last_non_aborted(history: BuildHistory, build: Build) -> Optional[Build]:
    """Walk back from the build before `build`, skipping aborted runs."""
    for earlier in history.previous_builds(build):
        if earlier.result != BuildResult.ABORTED:
            return earlier
    return None


def resolve_status(history: BuildHistory, build: Build) -> BuildStatus:
    """
    Resolve the status label and color for a build.

    The transition is judged on the job's last build against the last
    earlier build that was not aborted, so that an aborted run between a
    failure and a success still reads as 'Back to normal'. The rules are
    checked in a fixed order and the first match wins.

    Args:
        history: The job's build history
        build: Build being notified about

    Returns:
        BuildStatus with label, color (None when the label carries none)
        and the previous result used for the comparison
    """
    last_build = history.last_build
    if last_build is None or last_build.result is None:
        logger.debug("No finished last build for %s, status unknown", history.job_name)
        return BuildStatus(StatusLabel.UNKNOWN)

    result = last_build.result
    previous = last_non_aborted(history, last_build)

    # Every earlier build aborted: assume SUCCESS so the aborted message goes out
    previous_result = previous.result if previous is not None else BuildResult.SUCCESS
    has_succeeded_before = history.previous_successful(build) is not None

    if (result == BuildResult.SUCCESS
            and previous_result in (BuildResult.FAILURE, BuildResult.UNSTABLE)
            and has_succeeded_before):
        return BuildStatus(StatusLabel.BACK_TO_NORMAL, GOOD, previous_result)
    if result == BuildResult.FAILURE and previous_result == BuildResult.FAILURE:
        return BuildStatus(StatusLabel.STILL_FAILING, CRITICAL, previous_result)
    if result == BuildResult.SUCCESS:
        return BuildStatus(StatusLabel.SUCCESS, GOOD, previous_result)
    if result == BuildResult.FAILURE:
        return BuildStatus(StatusLabel.FAILURE, BAD, previous_result)
    if result == BuildResult.ABORTED:
        return BuildStatus(StatusLabel.ABORTED, None, previous_result)
    if result == BuildResult.NOT_BUILT:
        return BuildStatus(StatusLabel.NOT_BUILT, None, previous_result)
    if result == BuildResult.UNSTABLE:
        return BuildStatus(StatusLabel.UNSTABLE, BAD, previous_result)
    if previous is not None and previous_result is not None and result.is_worse_than(previous_result):
        return BuildStatus(StatusLabel.REGRESSION, BAD, previous_result)

    return BuildStatus(StatusLabel.UNKNOWN, None, previous_result)


def back_to_normal_duration(history: BuildHistory, build: Build) -> Optional[str]:
    """
    Time from the end of the first failing build to the end of `build`.

    The failing streak starts with the build right after the previous
    successful one.

    Args:
        history: The job's build history
        build: The recovering build

    Returns:
        Time span string, or None if there is no previous successful
        build or nothing was recorded after it
    """
    previous_success = history.previous_successful(build)
    if previous_success is None:
        return None

    initial_failure = history.next(previous_success)
    if initial_failure is None:
        return None

    elapsed = build.ended_at - initial_failure.ended_at
    return time_span_string(int(elapsed.total_seconds() * 1000))
