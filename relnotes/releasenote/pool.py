"""Commit pool: merges commits from several repositories and deduplicates them."""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from .commit import NO_NOTES, CommitRecord


VERSION_BUMP_RE = re.compile(r"^[Bb]ump v\d+\.\d+\.\d+")


@dataclass
class CommitPool:
    """Commits under construction plus the hashes already considered released."""

    commits: List[CommitRecord] = field(default_factory=list)
    processed_hashes: Set[str] = field(default_factory=set)

    def mark_processed(self, hashes: Iterable[str]) -> None:
        self.processed_hashes.update(hashes)

    def extend(self, commits: Iterable[CommitRecord]) -> None:
        self.commits.extend(commits)

    def find(self, commit_hash: str):
        return next((c for c in self.commits if c.hash == commit_hash), None)

    def drop_processed(self) -> int:
        """Remove commits whose hash was already released. Returns how many were dropped."""
        before = len(self.commits)
        self.commits = [c for c in self.commits if c.hash not in self.processed_hashes]
        return before - len(self.commits)

    def cancel_reverts(self) -> int:
        """Tag every commit/revert pair found in the pool with NO_NOTES.

        Neither commit is removed here; both are dropped later by
        :meth:`drop_uninteresting`.

        Returns:
            Number of cancelled pairs
        """
        logger = logging.getLogger(__name__)
        cancelled = 0

        for commit in self.commits:
            if not commit.revert_hash:
                continue

            reverted = self.find(commit.revert_hash)
            if reverted is None:
                continue

            logger.debug(f"Commit {commit.hash} reverts {reverted.hash}, skipping both")
            commit.note = NO_NOTES
            reverted.note = NO_NOTES
            self.processed_hashes.add(commit.hash)
            self.processed_hashes.add(reverted.hash)
            cancelled += 1

        return cancelled

    def drop_uninteresting(self) -> int:
        """Remove commits marked NO_NOTES and version bump commits."""
        before = len(self.commits)
        self.commits = [
            c for c in self.commits
            if not c.has_no_notes and not VERSION_BUMP_RE.match(c.text)
        ]
        return before - len(self.commits)

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self):
        return iter(self.commits)
