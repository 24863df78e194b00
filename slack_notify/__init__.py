"""Slack build notifications - Main package.

Formats CI build status notifications for Slack.

Modules:
    models - Build records and build history
    notification - Status resolution, escaping and message assembly
    helpers - Pure utility functions
    config - Configuration
    cli - Command-line interface
"""

from .config import NotifierConfig
from .models import Build, BuildHistory, BuildResult
from .notification import NotificationBuilder, escape, resolve_status

__all__ = [
    'NotifierConfig',
    'Build',
    'BuildHistory',
    'BuildResult',
    'NotificationBuilder',
    'escape',
    'resolve_status',
]

__version__ = '1.0.0'
