"""GitHub client for pull request metadata, built on requests."""

import logging
from typing import Any, Dict, Optional

import requests

from ..cache import BaseCache, MemoryCache
from ..config import Config


DEFAULT_TIMEOUT = 60


def pull_request_cache_key(owner: str, repo: str, number: int) -> str:
    return f"{owner}-{repo}-pull-{number}"


class GitHubClient:
    """Fetches pull requests from the GitHub REST API through a read-through cache."""

    def __init__(self, config: Config, cache: Optional[BaseCache] = None,
                 session: Optional[requests.Session] = None,
                 logger: Optional[logging.Logger] = None):
        """Initialize GitHub client.

        Args:
            config: Configuration object containing GitHub settings
            cache: Cache for pull request responses, in-memory when omitted
            session: HTTP session, a new one when omitted
            logger: Logger instance
        """
        self.config = config
        self.cache = cache if cache is not None else MemoryCache()
        self.logger = logger or logging.getLogger(__name__)

        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": "relnotes",
        })
        if config.github_token:
            self.session.headers["Authorization"] = f"token {config.github_token}"

    def get_pull_request(self, owner: str, repo: str, number: int) -> Optional[Dict[str, Any]]:
        """Get a pull request's title and body.

        A 404 is not an error: a ``(#123)`` suffix sometimes names an issue,
        not a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number

        Returns:
            Dictionary with ``number``, ``title`` and ``body``, or None if not found

        Raises:
            requests.HTTPError: for any other unsuccessful response
        """
        name = pull_request_cache_key(owner, repo, number)
        return self.cache.check(name, lambda: self._fetch_pull_request(owner, repo, number))

    def _fetch_pull_request(self, owner: str, repo: str, number: int) -> Optional[Dict[str, Any]]:
        url = f"{self.config.github_api_url}/repos/{owner}/{repo}/pulls/{number}"
        self.logger.debug(f"Fetching {url}")

        response = self.session.get(url, timeout=DEFAULT_TIMEOUT)
        if response.status_code == 404:
            self.logger.warning(f"Pull request {owner}/{repo}#{number} not found")
            return None
        response.raise_for_status()

        data = response.json()
        return {
            "number": data.get("number", number),
            "title": data.get("title") or "",
            "body": data.get("body") or "",
        }
