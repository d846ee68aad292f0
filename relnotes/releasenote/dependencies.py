"""Folds commits from pinned dependency repositories into the commit pool.

A dependency is pinned either as a git submodule of the primary repository
or as a variable in its DEPS manifest. Which of the two applies is decided
once per run by probing for a sentinel path in the primary checkout.
"""

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from ..config import Config, DependencyConfig
from ..git import GitRepository, run_command
from .pool import CommitPool
from .walker import GitFactory, RepositoryRef, add_repo_to_pool


DEPS_FILE = "DEPS"

SEMVER_RE = re.compile(
    r"^[=v]*(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


def semver_major(ref: Optional[str]) -> Optional[int]:
    """Return the major version of ``ref``, or None when it is not a semantic version."""
    if not ref:
        return None
    match = SEMVER_RE.match(ref.strip())
    if not match:
        return None
    return int(match.group(1))


def should_include_dependencies(from_ref: str, to_ref: str) -> bool:
    """Dependencies are only followed within one major version; across majors there is too much churn."""
    from_major = semver_major(from_ref)
    to_major = semver_major(to_ref)
    return from_major is not None and from_major == to_major


class DependencyStrategy(ABC):
    """Finds the revision a dependency is pinned to at a primary-repository ref."""

    name = "base"

    def __init__(self, git: GitRepository):
        self.git = git

    @abstractmethod
    def applies_to(self, dependency: DependencyConfig) -> bool:
        """Whether this strategy can resolve ``dependency``."""

    @abstractmethod
    def pinned_ref(self, dependency: DependencyConfig, point: str) -> Optional[str]:
        """Revision of ``dependency`` pinned at ``point`` of the primary repository."""

    def add_dependency_commits(self, pool: CommitPool, dependencies: Iterable[DependencyConfig],
                               from_ref: str, to_ref: str,
                               git_factory: GitFactory = GitRepository,
                               follow_repos: Iterable[str] = ()) -> List[str]:
        """Merge each dependency's pinned range into ``pool``.

        Returns:
            Slugs of the dependencies that were merged
        """
        logger = logging.getLogger(__name__)
        follow_repos = list(follow_repos)
        merged = []

        for dependency in dependencies:
            if not self.applies_to(dependency):
                continue

            dep_from = self.pinned_ref(dependency, from_ref)
            dep_to = self.pinned_ref(dependency, to_ref)
            if not dep_from or not dep_to:
                logger.warning(
                    f"Skipping {dependency.slug}: not pinned at both {from_ref} and {to_ref}"
                )
                continue

            repo = RepositoryRef(
                owner=dependency.owner,
                repo=dependency.repo,
                dir=os.path.join(self.git.directory, dependency.dir),
            )
            add_repo_to_pool(pool, repo, dep_from, dep_to, git_factory, follow_repos)
            merged.append(dependency.slug)

        return merged


class SubmoduleStrategy(DependencyStrategy):
    """Dependencies vendored as git submodules at ``dependency.dir``."""

    name = "submodule"

    def applies_to(self, dependency: DependencyConfig) -> bool:
        return not dependency.deps_variable

    def pinned_ref(self, dependency: DependencyConfig, point: str) -> Optional[str]:
        return self.git.submodule_ref(point, dependency.dir)


class DepsVariableStrategy(DependencyStrategy):
    """Dependencies pinned by a variable in the DEPS file, read with ``gclient getdep``."""

    name = "deps"

    def __init__(self, git: GitRepository, tool_runner: Callable[[List[str]], str] = run_command):
        super().__init__(git)
        self.tool_runner = tool_runner

    def applies_to(self, dependency: DependencyConfig) -> bool:
        return bool(dependency.deps_variable)

    def pinned_ref(self, dependency: DependencyConfig, point: str) -> Optional[str]:
        deps = self.git.show_file(point, DEPS_FILE)

        with tempfile.TemporaryDirectory() as tmp:
            filename = os.path.join(tmp, DEPS_FILE)
            with open(filename, "w", encoding="utf-8") as f:
                f.write(deps)
            value = self.tool_runner(
                ["gclient", "getdep", "--deps-file", filename, "--var", dependency.deps_variable]
            )

        return value.strip() or None


def select_strategy(git: GitRepository, probe_path: Optional[str]) -> DependencyStrategy:
    """Use submodules when the sentinel vendor path exists, the DEPS file otherwise."""
    if probe_path and os.path.exists(os.path.join(git.directory, probe_path)):
        return SubmoduleStrategy(git)
    return DepsVariableStrategy(git)


def get_dependency_commits(pool: CommitPool, config: Config, from_ref: str, to_ref: str,
                           git_factory: GitFactory = GitRepository,
                           strategy: Optional[DependencyStrategy] = None) -> List[str]:
    """Add the commits of every configured dependency between two primary-repository refs.

    Args:
        pool: Pool to merge into
        config: Configuration holding ``dependencies`` and ``dependency_probe_path``
        from_ref: Range start in the primary repository
        to_ref: Range end in the primary repository
        git_factory: Builds git access for a checkout directory
        strategy: Overrides the probed strategy

    Returns:
        Slugs of the dependencies that were merged
    """
    logger = logging.getLogger(__name__)

    if not config.dependencies:
        return []

    if not should_include_dependencies(from_ref, to_ref):
        logger.info(f"Not including dependencies: {from_ref} and {to_ref} are not the same major version")
        return []

    if strategy is None:
        strategy = select_strategy(git_factory(config.git_dir), config.dependency_probe_path)
    logger.info(f"Resolving dependencies with the {strategy.name} strategy")

    return strategy.add_dependency_commits(
        pool, config.dependencies, from_ref, to_ref, git_factory, config.tracked_repos()
    )
