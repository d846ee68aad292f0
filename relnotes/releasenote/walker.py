"""Walks a commit range of one repository into the commit pool."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List

from ..git import GitRepository
from .commit import CommitRecord
from .parser import parse_commit_message
from .pool import CommitPool


@dataclass(frozen=True)
class RepositoryRef:
    """A local checkout of a GitHub repository."""

    owner: str
    repo: str
    dir: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


GitFactory = Callable[[str], GitRepository]


def get_local_commit_details(git: GitRepository, repo: RepositoryRef, point1: str, point2: str,
                             follow_repos: Iterable[str] = ()) -> List[CommitRecord]:
    """Parse every commit in ``point1..point2`` of ``repo`` into a commit record.

    Args:
        git: Git access for the repository checkout
        repo: Repository identity
        point1: Range start (exclusive)
        point2: Range end
        follow_repos: Repositories manual backports may point at

    Returns:
        Parsed commit records, newest first
    """
    details = []
    for raw in git.commits_between(point1, point2):
        commit = CommitRecord(
            hash=raw.hash,
            parent_hashes=list(raw.parent_hashes),
            owner=repo.owner,
            repo=repo.repo,
            email=raw.email,
        )
        details.append(parse_commit_message(raw.message, repo.owner, repo.repo, commit, follow_repos))
    return details


def add_repo_to_pool(pool: CommitPool, repo: RepositoryRef, from_ref: str, to_ref: str,
                     git_factory: GitFactory = GitRepository,
                     follow_repos: Iterable[str] = ()) -> int:
    """Merge the commits of ``repo`` between ``from_ref`` and ``to_ref`` into ``pool``.

    Every commit reachable from ``from_ref`` is marked processed before the
    new commits are appended, so a later :meth:`CommitPool.drop_processed`
    removes anything that was already released.

    Returns:
        Number of commits appended
    """
    logger = logging.getLogger(__name__)
    git = git_factory(repo.dir)

    common_ancestor = git.merge_base(from_ref, to_ref)
    pool.mark_processed(git.commit_hashes(from_ref))

    commits = get_local_commit_details(git, repo, common_ancestor, to_ref, follow_repos)
    pool.extend(commits)

    logger.info(f"Added {len(commits)} commits from {repo.slug} ({from_ref}..{to_ref})")
    return len(commits)
