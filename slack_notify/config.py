"""
Notifier Configuration

Loads global Slack notification settings from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class NotifierConfig:
    """Global settings, overridden per notification by step options."""

    # Slack settings
    base_url: Optional[str] = field(default=None)
    team_domain: Optional[str] = field(default=None)
    channel: Optional[str] = field(default=None)
    token: Optional[str] = field(default=None)
    bot_user: bool = False

    # Message content
    jenkins_url: Optional[str] = field(default=None)
    include_tests: bool = False
    fail_on_error: bool = False

    @classmethod
    def from_env(cls) -> "NotifierConfig":
        """Create config from environment variables."""
        return cls(
            base_url=os.getenv("SLACK_BASE_URL"),
            team_domain=os.getenv("SLACK_TEAM_DOMAIN"),
            channel=os.getenv("SLACK_CHANNEL"),
            token=os.getenv("SLACK_TOKEN"),
            bot_user=_flag("SLACK_BOT_USER"),
            jenkins_url=os.getenv("JENKINS_URL"),
            include_tests=_flag("SLACK_INCLUDE_TESTS"),
            fail_on_error=_flag("SLACK_FAIL_ON_ERROR"),
        )

    @property
    def token_configured(self) -> bool:
        """Check if a Slack token is available."""
        return bool(self.token)
