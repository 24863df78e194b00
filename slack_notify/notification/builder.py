"""
Notification Message Builder

Assembles the text of a build notification from ordered fragments.
Every piece of build-supplied text goes through the Slack escaper
before it is stored.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..models.build import Build
from ..models.history import BuildHistory
from .escape import escape
from .status import StatusLabel, back_to_normal_duration, resolve_status
from .tokens import TokenExpander
from .urls import DisplayUrlProvider

logger = logging.getLogger(__name__)


class NotificationBuilder:
    """
    Stateful builder for one build notification.

    Usage:
        builder = NotificationBuilder(history, build)
        message = (builder.start_message()
                   .append_status_message()
                   .append_duration()
                   .append_open_link()
                   .render())
        builder.color   # 'good', 'bad', 'critical' or None
    """

    def __init__(
        self,
        history: BuildHistory,
        build: Build,
        url_provider: Optional[DisplayUrlProvider] = None,
        token_expander: Optional[TokenExpander] = None,
        now: Optional[datetime] = None,
    ):
        """
        Initialize the builder.

        Args:
            history: Build history of the job
            build: Build being notified about
            url_provider: Resolves the build's detail page URL
            token_expander: Expands variables in custom messages
            now: Reference time for the duration of a running build
        """
        self.history = history
        self.build = build
        self.url_provider = url_provider or DisplayUrlProvider()
        self.token_expander = token_expander or TokenExpander()
        self.now = now
        self._fragments: List[str] = []
        self._color: Optional[str] = None

    @property
    def color(self) -> Optional[str]:
        """Color recorded by the status message, None until then."""
        return self._color

    def _add(self, fragment: str) -> 'NotificationBuilder':
        self._fragments.append(fragment)
        return self

    def append(self, text) -> 'NotificationBuilder':
        """Append arbitrary text, escaped."""
        return self._add(escape(str(text)))

    def start_message(self) -> 'NotificationBuilder':
        """Append the '<job> - <build> ' header."""
        self._add(escape(self.history.display_name))
        self._add(" - ")
        self._add(escape(self.build.display_name))
        return self._add(" ")

    def append_status_message(self) -> 'NotificationBuilder':
        """Append the status label and record its color."""
        status = resolve_status(self.history, self.build)
        logger.debug(
            "%s %s resolved to %s (previous result %s)",
            self.history.job_name,
            self.build.display_name,
            status.label.name,
            status.previous_result.name if status.previous_result else None,
        )
        if self._color is None:
            self._color = status.color
        return self._add(escape(status.label.text))

    def append_duration(self) -> 'NotificationBuilder':
        """
        Append ' after <duration>'.

        After a 'Back to normal' status the duration is measured from the
        end of the first failing build; otherwise it is the build's own
        duration.
        """
        duration = None
        if StatusLabel.BACK_TO_NORMAL.text in self.render():
            duration = back_to_normal_duration(self.history, self.build)
        if duration is None:
            duration = self.build.duration_string(now=self.now)
        return self._add(" after " + escape(duration))

    def append_open_link(self) -> 'NotificationBuilder':
        url = self.url_provider.run_url(self.history, self.build)
        return self._add(f" (<{url}|Open>)")

    def append_test_summary(self) -> 'NotificationBuilder':
        tests = self.build.test_result
        if tests is None:
            return self._add("\nNo Tests found.")
        return self._add(
            "\nTest Status:\n"
            f"\tPassed: {tests.passed}, Failed: {tests.failed}, Skipped: {tests.skipped}"
        )

    def append_failed_tests(self) -> 'NotificationBuilder':
        """Append one line per failing test, if there are any."""
        tests = self.build.test_result
        if tests is None or tests.failed <= 0:
            return self

        self._add(f"\n{tests.failed} Failed Tests:\n")
        for test in tests.failed_tests:
            self._add(f"\t{escape(test.qualified_name)} after {escape(test.duration_string)}\n")
        return self

    def append_custom_message(self, message: Optional[str]) -> 'NotificationBuilder':
        """Append a token-expanded custom message on its own line."""
        if not message:
            return self
        expanded = self.token_expander.expand(message, self.history, self.build)
        return self._add("\n" + escape(expanded))

    def compose(
        self,
        include_tests: bool = False,
        custom_message: Optional[str] = None,
    ) -> 'NotificationBuilder':
        """Append all fragments in the standard order."""
        self.start_message()
        self.append_status_message()
        self.append_duration()
        self.append_open_link()
        if include_tests:
            self.append_test_summary()
            self.append_failed_tests()
        return self.append_custom_message(custom_message)

    def render(self) -> str:
        return "".join(self._fragments)

    def __str__(self) -> str:
        return self.render()
