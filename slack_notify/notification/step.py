"""
Slack Notify Step

Resolves per-notification settings against the global configuration,
composes the build message and hands it to a message sink.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from ..config import NotifierConfig
from ..models.build import Build
from ..models.history import BuildHistory
from .builder import NotificationBuilder
from .tokens import TokenExpander
from .urls import DisplayUrlProvider

logger = logging.getLogger(__name__)

EMPTY_VALUE = "<empty>"


class NotificationError(Exception):
    """Raised when a notification could not be delivered and fail_on_error is set."""


class MessageSink(Protocol):
    """Delivers a rendered message, returning True on success."""

    def publish(self, message: str, color: Optional[str]) -> bool:
        ...


def _fix_empty(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    return value


@dataclass
class NotifyStepOptions:
    """Options given to a single notify call. None falls back to global config."""

    base_url: Optional[str] = None
    team_domain: Optional[str] = None
    channel: Optional[str] = None
    token: Optional[str] = None
    bot_user: bool = False
    fail_on_error: bool = False
    include_tests: bool = False
    custom_message: Optional[str] = None

    def __post_init__(self):
        self.base_url = _fix_empty(self.base_url)
        self.team_domain = _fix_empty(self.team_domain)
        self.channel = _fix_empty(self.channel)
        self.token = _fix_empty(self.token)
        if self.base_url is not None and not self.base_url.endswith("/"):
            self.base_url += "/"


@dataclass
class SlackSettings:
    """Settings after merging step options over the global config."""

    base_url: Optional[str]
    team_domain: Optional[str]
    channel: Optional[str]
    token: Optional[str] = field(repr=False)
    bot_user: bool = False

    @classmethod
    def resolve(cls, options: NotifyStepOptions, config: NotifierConfig) -> "SlackSettings":
        return cls(
            base_url=options.base_url if options.base_url is not None else config.base_url,
            team_domain=options.team_domain if options.team_domain is not None else config.team_domain,
            channel=options.channel if options.channel is not None else config.channel,
            token=options.token if options.token is not None else config.token,
            bot_user=options.bot_user or config.bot_user,
        )

    def describe(self) -> str:
        """One-line summary for logs, without the token value."""
        return (
            f"baseUrl: {self.base_url or EMPTY_VALUE}, "
            f"teamDomain: {self.team_domain or EMPTY_VALUE}, "
            f"channel: {self.channel or EMPTY_VALUE}, "
            f"botUser: {self.bot_user}, "
            f"token: {'****' if self.token else EMPTY_VALUE}"
        )


SinkFactory = Callable[[SlackSettings], MessageSink]


class NotifyStep:
    """
    Sends one build notification.

    Usage:
        step = NotifyStep(NotifyStepOptions(channel="#builds"), sink_factory=make_sink)
        step.run(history, build)
    """

    def __init__(
        self,
        options: NotifyStepOptions,
        sink_factory: SinkFactory,
        config: Optional[NotifierConfig] = None,
        token_expander: Optional[TokenExpander] = None,
    ):
        self.options = options
        self.sink_factory = sink_factory
        self.config = config or NotifierConfig.from_env()
        self.token_expander = token_expander or TokenExpander()

    def build_message(self, history: BuildHistory, build: Build) -> NotificationBuilder:
        """Compose the notification for a build."""
        builder = NotificationBuilder(
            history,
            build,
            url_provider=DisplayUrlProvider(self.config.jenkins_url),
            token_expander=self.token_expander,
        )
        return builder.compose(
            include_tests=self.options.include_tests or self.config.include_tests,
            custom_message=self.options.custom_message,
        )

    def run(self, history: BuildHistory, build: Build) -> bool:
        """
        Compose and publish the notification.

        Args:
            history: Build history of the job
            build: Build being notified about

        Returns:
            True if the sink accepted the message

        Raises:
            NotificationError: If publishing failed and fail_on_error is set
        """
        settings = SlackSettings.resolve(self.options, self.config)
        logger.info("Slack notify step values: %s", settings.describe())

        if not settings.token:
            logger.error("Slack notification failed: no token configured")
            return False

        builder = self.build_message(history, build)
        sink = self.sink_factory(settings)

        if sink.publish(builder.render(), builder.color):
            logger.debug("Slack notification sent for %s %s", history.job_name, build.display_name)
            return True

        if self.options.fail_on_error or self.config.fail_on_error:
            raise NotificationError("Slack notification failed. See logs for details.")

        logger.error("Slack notification failed. See logs for details.")
        return False
