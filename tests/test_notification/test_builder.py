"""Tests for NotificationBuilder."""

from datetime import timedelta

import pytest

from slack_notify.models import BuildHistory, FailedTest, TestResultSummary
from slack_notify.notification.builder import NotificationBuilder
from slack_notify.notification.urls import DisplayUrlProvider


@pytest.fixture
def url_provider():
    return DisplayUrlProvider("https://ci.example.com")


class TestStatusAndColor:
    def test_color_absent_until_status_appended(self, make_history):
        history = make_history("SUCCESS")
        builder = NotificationBuilder(history, history.last_build)
        assert builder.color is None

        builder.append_status_message()
        assert builder.color == "good"
        assert builder.render() == "Success"

    def test_aborted_leaves_color_unset(self, make_history):
        history = make_history("SUCCESS", "ABORTED")
        builder = NotificationBuilder(history, history.last_build).append_status_message()
        assert builder.render() == "Aborted"
        assert builder.color is None

    def test_color_set_only_once(self, make_history):
        history = make_history("FAILURE", "FAILURE")
        builder = NotificationBuilder(history, history.last_build)
        builder.append_status_message().append_status_message()
        assert builder.color == "critical"


class TestHeaderAndLinks:
    def test_start_message(self, make_history):
        history = make_history("SUCCESS", job_name="app", display_name="team » app")
        builder = NotificationBuilder(history, history.last_build).start_message()
        assert builder.render() == "team » app - #1 "

    def test_start_message_escapes_names(self, build_factory):
        build = build_factory(1, "SUCCESS", display_name="#1 <main & dev>")
        history = BuildHistory("app", [build])
        builder = NotificationBuilder(history, build).start_message()
        assert builder.render() == "app - #1 &lt;main &amp; dev&gt; "

    def test_open_link(self, make_history, url_provider):
        history = make_history("SUCCESS", "FAILURE")
        builder = NotificationBuilder(history, history.last_build, url_provider=url_provider)
        builder.append_open_link()
        assert builder.render() == " (<https://ci.example.com/job/app/2/|Open>)"

    def test_append_escapes(self, make_history):
        history = make_history("SUCCESS")
        builder = NotificationBuilder(history, history.last_build).append("a < b")
        assert str(builder) == "a &lt; b"


class TestDuration:
    def test_own_duration_by_default(self, make_history):
        history = make_history("SUCCESS", "FAILURE")
        builder = NotificationBuilder(history, history.last_build)
        builder.append_status_message().append_duration()
        assert builder.render() == "Failure after 1 min 0 sec"

    def test_back_to_normal_measures_from_first_failure(self, build_factory):
        builds = [
            build_factory(1, "SUCCESS"),
            build_factory(2, "FAILURE"),
            build_factory(3, "FAILURE"),
            build_factory(4, "SUCCESS", duration=timedelta(minutes=4)),
        ]
        history = BuildHistory("app", builds)
        builder = NotificationBuilder(history, builds[-1])
        builder.append_status_message().append_duration()
        # first failure ends 12:11, recovery ends 12:34
        assert builder.render() == "Back to normal after 23 min"

    def test_back_to_normal_falls_back_to_own_duration(self, make_history):
        # Label text present without a previous successful build for this build
        history = make_history("FAILURE", "SUCCESS")
        builder = NotificationBuilder(history, history.last_build)
        builder.append("Back to normal").append_duration()
        assert builder.render() == "Back to normal after 1 min 0 sec"

    def test_running_build_counts_up(self, make_history):
        history = make_history("SUCCESS", None)
        build = history.last_build
        builder = NotificationBuilder(history, build, now=build.started_at + timedelta(seconds=45))
        builder.append_duration()
        assert builder.render() == " after 45 sec and counting"


class TestTests:
    def test_no_tests(self, make_history):
        history = make_history("SUCCESS")
        builder = NotificationBuilder(history, history.last_build)
        builder.append_test_summary().append_failed_tests()
        assert builder.render() == "\nNo Tests found."

    def test_summary_and_failed_tests(self, build_factory, sample_test_result):
        build = build_factory(1, "UNSTABLE", test_result=sample_test_result)
        history = BuildHistory("app", [build])
        builder = NotificationBuilder(history, build)
        builder.append_test_summary().append_failed_tests()

        assert builder.render() == (
            "\nTest Status:\n"
            "\tPassed: 15, Failed: 2, Skipped: 3"
            "\n2 Failed Tests:\n"
            "\tInvoiceTest.testTotals after 1.5 sec\n"
            "\tsmokeTest after 40 ms\n"
        )

    def test_no_failed_section_when_all_pass(self, build_factory):
        build = build_factory(1, "SUCCESS", test_result=TestResultSummary(total=5))
        history = BuildHistory("app", [build])
        builder = NotificationBuilder(history, build).append_failed_tests()
        assert builder.render() == ""

    def test_failed_test_names_escaped(self, build_factory):
        tests = TestResultSummary(
            total=1, failed=1, failed_tests=[FailedTest("pkg.Suite.test[a<b]", 0.2)],
        )
        build = build_factory(1, "FAILURE", test_result=tests)
        builder = NotificationBuilder(BuildHistory("app", [build]), build).append_failed_tests()
        assert "\tSuite.test[a&lt;b] after 0.20 sec\n" in builder.render()


class TestCustomMessage:
    def test_custom_message_expanded_and_escaped(self, build_factory):
        build = build_factory(7, "SUCCESS", environment={"BRANCH": "main"})
        builder = NotificationBuilder(BuildHistory("app", [build]), build)
        builder.append_custom_message("Deployed ${BRANCH} (#$BUILD_NUMBER) & done")
        assert builder.render() == "\nDeployed main (#7) &amp; done"

    @pytest.mark.parametrize("message", [None, ""])
    def test_empty_custom_message_is_noop(self, make_history, message):
        history = make_history("SUCCESS")
        builder = NotificationBuilder(history, history.last_build).append_custom_message(message)
        assert builder.render() == ""


class TestCompose:
    def test_standard_order(self, build_factory, sample_test_result, url_provider):
        builds = [
            build_factory(1, "SUCCESS"),
            build_factory(2, "FAILURE", test_result=sample_test_result),
        ]
        history = BuildHistory("app", builds)
        builder = NotificationBuilder(history, builds[-1], url_provider=url_provider)
        message = builder.compose(include_tests=True, custom_message="see logs").render()

        assert message.startswith(
            "app - #2 Failure after 1 min 0 sec (<https://ci.example.com/job/app/2/|Open>)"
            "\nTest Status:\n"
        )
        assert message.endswith("\nsee logs")
        assert builder.color == "bad"

    def test_without_tests(self, make_history):
        history = make_history("SUCCESS")
        message = NotificationBuilder(history, history.last_build).compose().render()
        assert "Test Status" not in message
        assert "No Tests found" not in message
