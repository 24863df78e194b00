"""Token Expander - Substitutes build variables into custom messages."""

import logging
import re
from typing import Dict, Optional

from ..models.build import Build
from ..models.history import BuildHistory

logger = logging.getLogger(__name__)

TOKEN = re.compile(r"\$(?:\{(\w+)\}|(\w+))")


class TokenExpander:
    """
    Expands $VAR and ${VAR} references from a build's variables.

    Built-in variables (JOB_NAME, BUILD_NUMBER, BUILD_DISPLAY_NAME,
    BUILD_URL, BUILD_RESULT) are overridden by the build's own
    environment. Unknown references are left untouched.
    """

    def __init__(self, extra: Optional[Dict[str, str]] = None):
        self.extra = dict(extra or {})

    def variables(self, history: BuildHistory, build: Build) -> Dict[str, str]:
        """Collect the variables available for a build."""
        values = {
            "JOB_NAME": history.job_name,
            "BUILD_NUMBER": str(build.number),
            "BUILD_DISPLAY_NAME": build.display_name,
            "BUILD_URL": build.url or "",
            "BUILD_RESULT": build.result.value if build.result else "",
        }
        values.update(self.extra)
        values.update(build.environment)
        return values

    def expand(self, text: str, history: BuildHistory, build: Build) -> str:
        values = self.variables(history, build)

        def replace(match: re.Match) -> str:
            name = match.group(1) or match.group(2)
            if name not in values:
                logger.debug("Leaving unknown token %s unexpanded", name)
                return match.group(0)
            return values[name]

        return TOKEN.sub(replace, text)
