"""Shared pytest fixtures for Slack notification tests."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from slack_notify.models import Build, BuildHistory, BuildResult, FailedTest, TestResultSummary

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_build(number, result, started_at=None, duration=timedelta(minutes=1), **kwargs):
    """Create a build with a result given by name (None = still running)."""
    if isinstance(result, str):
        result = BuildResult.parse(result)
    return Build(
        number=number,
        result=result,
        started_at=started_at or BASE_TIME + timedelta(minutes=10 * (number - 1)),
        duration=duration,
        **kwargs,
    )


@pytest.fixture
def make_history():
    """
    Factory building a history from a sequence of results.

    Builds are numbered from 1, start 10 minutes apart and take 1 minute each.
    """
    def _make(*results, job_name="app", display_name=None):
        builds = [make_build(i + 1, result) for i, result in enumerate(results)]
        return BuildHistory(job_name, builds, display_name=display_name)
    return _make


@pytest.fixture
def sample_test_result():
    """Test results with two failures."""
    return TestResultSummary(
        total=20,
        failed=2,
        skipped=3,
        failed_tests=[
            FailedTest("com.acme.billing.InvoiceTest.testTotals", 1.5),
            FailedTest("smokeTest", 0.04),
        ],
    )


@pytest.fixture
def sample_history_data():
    """JSON representation of a short failing-then-fixed history."""
    return {
        "job": "backend",
        "display_name": "team » backend",
        "builds": [
            {
                "number": 1,
                "result": "SUCCESS",
                "started_at": "2024-03-01T12:00:00+00:00",
                "duration_ms": 60000,
            },
            {
                "number": 2,
                "result": "FAILURE",
                "started_at": "2024-03-01T12:10:00+00:00",
                "duration_ms": 120000,
                "tests": {
                    "total": 10,
                    "failed": 1,
                    "skipped": 0,
                    "failed_tests": [{"name": "com.acme.ApiTest.testLogin", "duration": 2.5}],
                },
            },
            {
                "number": 3,
                "result": "SUCCESS",
                "started_at": "2024-03-01T13:00:00+00:00",
                "duration_ms": 90000,
                "display_name": "#3 (main)",
                "environment": {"BRANCH": "main"},
                "tests": {"total": 10, "failed": 0, "skipped": 1},
            },
        ],
    }


@pytest.fixture
def history_file(tmp_path, sample_history_data):
    """Write the sample history to a JSON file."""
    path = tmp_path / "history.json"
    path.write_text(json.dumps(sample_history_data), encoding="utf-8")
    return str(path)


@pytest.fixture
def build_factory():
    """Expose make_build to tests."""
    return make_build
