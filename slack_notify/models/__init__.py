"""Data models - Build records and build history."""

from .build import Build, BuildResult, FailedTest, TestResultSummary
from .history import BuildHistory, load_history

__all__ = [
    'Build',
    'BuildResult',
    'FailedTest',
    'TestResultSummary',
    'BuildHistory',
    'load_history',
]
