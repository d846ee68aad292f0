"""Release note generation logic."""

import logging
from typing import Optional

from ..config import Config
from ..git import GitRepository
from .classifier import NotesBucket, bucket_commits
from .dependencies import DependencyStrategy, get_dependency_commits
from .pool import CommitPool
from .render import render_notes
from .resolver import resolve_notes
from .walker import GitFactory, RepositoryRef, add_repo_to_pool


def get_notes(config: Config, from_ref: str, to_ref: str, client,
              git_factory: GitFactory = GitRepository,
              strategy: Optional[DependencyStrategy] = None) -> NotesBucket:
    """Collect, deduplicate and classify the changes between two refs.

    Any failing git call or unexpected GitHub error aborts the whole run.

    Args:
        config: Configuration with the primary repository and its dependencies
        from_ref: Previous release ref
        to_ref: New release ref
        client: Pull request source, usually a GitHubClient
        git_factory: Builds git access for a checkout directory
        strategy: Dependency strategy overriding the probed one

    Returns:
        Commits bucketed by category for ``to_ref``
    """
    logger = logging.getLogger(__name__)

    if not config.owner or not config.repo:
        raise ValueError("The primary repository owner and name are required")

    follow_repos = config.tracked_repos()
    pool = CommitPool()

    primary = RepositoryRef(owner=config.owner, repo=config.repo, dir=config.git_dir)
    add_repo_to_pool(pool, primary, from_ref, to_ref, git_factory, follow_repos)

    get_dependency_commits(pool, config, from_ref, to_ref, git_factory, strategy)

    dropped = pool.drop_processed()
    if dropped:
        logger.info(f"Dropped {dropped} commits that were already released")

    cancelled = pool.cancel_reverts()
    if cancelled:
        logger.info(f"Cancelled {cancelled} commit/revert pairs")

    found = resolve_notes(pool, client, follow_repos)
    logger.info(f"Found release notes for {found} commits in pull requests")

    pool.drop_uninteresting()

    notes = bucket_commits(pool, to_ref)
    logger.info(f"Classified {len(notes)} commits for {to_ref}")
    return notes


def generate_release_notes(config: Config, from_ref: str, to_ref: str, client,
                           git_factory: GitFactory = GitRepository,
                           strategy: Optional[DependencyStrategy] = None) -> str:
    """Generate the Markdown release notes between two refs."""
    notes = get_notes(config, from_ref, to_ref, client, git_factory, strategy)
    return render_notes(notes, config.owner, config.repo)
