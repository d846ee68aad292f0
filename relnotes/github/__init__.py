"""GitHub API access."""

from .client import GitHubClient, pull_request_cache_key

__all__ = ["GitHubClient", "pull_request_cache_key"]
