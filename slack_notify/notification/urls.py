"""Display URLs for build detail pages."""

from typing import Optional

from ..models.build import Build
from ..models.history import BuildHistory


class DisplayUrlProvider:
    """Builds absolute URLs to build detail pages."""

    def __init__(self, root_url: Optional[str] = None):
        """
        Args:
            root_url: CI server root, e.g. 'https://ci.example.com/'
        """
        root = (root_url or "").strip()
        if root and not root.endswith("/"):
            root += "/"
        self.root_url = root

    def run_url(self, history: BuildHistory, build: Build) -> str:
        relative = build.url or f"job/{history.job_name}/{build.number}/"
        if relative.startswith(("http://", "https://")):
            return relative
        return self.root_url + relative.lstrip("/")
