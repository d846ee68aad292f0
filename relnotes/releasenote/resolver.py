"""Finds release notes for commits by following their pull requests."""

import logging
from typing import Iterable, Optional

from .commit import CommitRecord
from .parser import get_note_from_body, parse_commit_message
from .pool import CommitPool


def resolve_note(commit: CommitRecord, client, follow_repos: Iterable[str] = ()) -> Optional[str]:
    """Look for a release note in the pull request(s) behind ``commit``.

    When a pull request has no ``Notes:`` paragraph its title and body are
    parsed as a commit message, which may point the commit at another pull
    request (e.g. a backport referencing the original). That one is tried
    next. The loop stops once the pull request stops changing or points
    back at one already visited, in which case the commit keeps no note.

    Args:
        commit: Commit to resolve, updated in place
        client: Object with ``get_pull_request(owner, repo, number)``
        follow_repos: Repositories manual backports may point at

    Returns:
        The commit's note after resolution
    """
    logger = logging.getLogger(__name__)
    follow_repos = list(follow_repos)

    visited = set()
    pr = commit.pr
    while pr and not commit.note:
        visited.add(pr.key)
        data = client.get_pull_request(pr.owner, pr.repo, pr.number)
        if not data:
            break

        body = data.get("body") or ""
        commit.note = get_note_from_body(body)
        if commit.note:
            logger.debug(f"Found note for {commit.hash} in {pr.slug}#{pr.number}")
            break

        title = data.get("title") or ""
        parse_commit_message(f"{title}\n\n{body}", pr.owner, pr.repo, commit, follow_repos)

        if commit.pr is None or commit.pr.key in visited:
            break
        logger.debug(f"Following {pr.slug}#{pr.number} to {commit.pr.slug}#{commit.pr.number}")
        pr = commit.pr

    return commit.note


def resolve_notes(pool: CommitPool, client, follow_repos: Iterable[str] = ()) -> int:
    """Resolve notes for every pooled commit that has none yet.

    Returns:
        Number of commits that gained a note
    """
    follow_repos = list(follow_repos)
    found = 0
    for commit in pool:
        if commit.note:
            continue
        if resolve_note(commit, client, follow_repos):
            found += 1
    return found
