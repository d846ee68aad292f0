"""Configuration management for Relnotes."""

import json
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DependencyConfig(BaseModel):
    """A dependency repository whose commits are folded into the notes.

    ``dir`` is the dependency's checkout, relative to the primary
    repository. For pinned submodules it is also the submodule path;
    for DEPS-pinned dependencies ``deps_variable`` names the variable
    holding the pinned revision.
    """

    owner: str
    repo: str
    dir: str
    deps_variable: Optional[str] = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


class Config(BaseSettings):
    """Configuration settings for Relnotes."""

    model_config = SettingsConfigDict(env_prefix="RELNOTES_", case_sensitive=False)

    github_api_url: str = "https://api.github.com"
    github_token: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    git_dir: str = "."
    cache_dir: str = ".cache"
    follow_repos: List[str] = []
    dependency_probe_path: Optional[str] = None
    dependencies: List[DependencyConfig] = []

    @field_validator("github_api_url")
    @classmethod
    def normalize_github_api_url(cls, v):
        """Ensure the API URL has a protocol and no trailing slash."""
        if v and not v.startswith(("http://", "https://")):
            v = f"https://{v}"
        return v.rstrip("/")

    @property
    def slug(self) -> Optional[str]:
        if self.owner and self.repo:
            return f"{self.owner}/{self.repo}"
        return None

    def tracked_repos(self) -> List[str]:
        """Repositories that manual backports may be attributed to."""
        repos = list(self.follow_repos)
        for slug in [self.slug] + [d.slug for d in self.dependencies]:
            if slug and slug not in repos:
                repos.append(slug)
        return repos


def load_json_config(config_path: str) -> dict:
    """Load configuration from JSON file.

    Args:
        config_path: Path to JSON configuration file

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        raise ValueError(f"Error loading config file {config_path}: {e}")


def find_config_file() -> Optional[str]:
    """Find configuration file in common locations.

    Returns:
        Path to config file or None if not found
    """
    search_paths = [
        "relnotes.json",
        ".relnotes.json",
        "~/.relnotes.json",
        "~/.config/relnotes/config.json",
    ]

    for path_str in search_paths:
        path = Path(path_str).expanduser()
        if path.exists() and path.is_file():
            return str(path)

    return None


def get_config(config_file: Optional[str] = None) -> Config:
    """Load configuration from a JSON file and environment variables.

    Environment variables override the JSON file. An explicitly given
    ``config_file`` that cannot be read is an error; a discovered one
    that cannot be read is ignored.

    Args:
        config_file: Optional path to JSON config file

    Returns:
        Configuration object
    """
    config_data = {}

    if config_file:
        config_data.update(load_json_config(config_file))
    else:
        found = find_config_file()
        if found:
            try:
                config_data.update(load_json_config(found))
            except ValueError:
                pass

    env_config = {
        "github_api_url": os.getenv("RELNOTES_GITHUB_API_URL"),
        "github_token": os.getenv("RELNOTES_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN"),
        "owner": os.getenv("RELNOTES_OWNER"),
        "repo": os.getenv("RELNOTES_REPO"),
        "git_dir": os.getenv("RELNOTES_GIT_DIR"),
        "cache_dir": os.getenv("RELNOTES_CACHE_DIR"),
    }

    env_config = {k: v for k, v in env_config.items() if v is not None}
    config_data.update(env_config)

    return Config(**config_data)


def create_sample_config(path: str = "relnotes.json") -> None:
    """Create a sample configuration file.

    Args:
        path: Path where to create the sample config file
    """
    sample_config = {
        "github_token": "your-github-token-here",
        "owner": "your-org",
        "repo": "your-project",
        "git_dir": ".",
        "cache_dir": ".cache",
        "dependency_probe_path": "vendor/libfoo",
        "dependencies": [
            {"owner": "your-org", "repo": "libfoo", "dir": "vendor/libfoo"},
            {"owner": "your-org", "repo": "node", "dir": "../third_party/node", "deps_variable": "node_version"},
        ],
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(sample_config, f, indent=2)
