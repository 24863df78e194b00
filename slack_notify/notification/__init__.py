"""
Build Notification Formatting

Provides:
- Build status resolution (label + Slack color)
- Slack message escaping with link preservation
- Ordered message assembly and the notify step
"""

from .builder import NotificationBuilder
from .escape import escape
from .status import BuildStatus, StatusLabel, back_to_normal_duration, resolve_status
from .step import (
    MessageSink,
    NotificationError,
    NotifyStep,
    NotifyStepOptions,
    SlackSettings,
)
from .tokens import TokenExpander
from .urls import DisplayUrlProvider

__all__ = [
    # Formatting
    'NotificationBuilder',
    'escape',
    'TokenExpander',
    'DisplayUrlProvider',
    # Status
    'BuildStatus',
    'StatusLabel',
    'resolve_status',
    'back_to_normal_duration',
    # Step
    'MessageSink',
    'NotificationError',
    'NotifyStep',
    'NotifyStepOptions',
    'SlackSettings',
]
