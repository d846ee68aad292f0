"""Commit record model shared by the parser, pool and renderer."""

from dataclasses import dataclass, field
from typing import List, Optional


# Note value meaning "explicitly no user-visible note"
NO_NOTES = "No notes"


class MalformedPullRequestError(ValueError):
    """Raised when a pull request reference lacks owner, repo or number."""


@dataclass
class PullRequestRef:
    """A pull request in some GitHub repository."""

    owner: str
    repo: str
    number: int
    branch: Optional[str] = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def key(self):
        return (self.owner, self.repo, self.number)


@dataclass
class CommitRecord:
    """One logical change, enriched in place as it moves through the pipeline.

    ``original_subject`` and ``original_pr`` are write-once: they are only
    assigned through :meth:`set_original_subject` and
    :meth:`set_pull_request`, which never replace an existing value.
    """

    hash: str = ""
    parent_hashes: List[str] = field(default_factory=list)
    owner: str = ""
    repo: str = ""
    email: str = ""

    type: Optional[str] = None
    subject: str = ""
    original_subject: Optional[str] = None

    pr: Optional[PullRequestRef] = None
    original_pr: Optional[PullRequestRef] = None
    issue_number: Optional[int] = None
    revert_hash: Optional[str] = None
    body: Optional[str] = None

    note: Optional[str] = None

    def set_original_subject(self, subject: str) -> None:
        if not self.original_subject:
            self.original_subject = subject

    def set_pull_request(self, owner: str, repo: str, number, branch: Optional[str] = None) -> PullRequestRef:
        """Point the commit at a pull request, keeping the first one as ``original_pr``.

        Raises:
            MalformedPullRequestError: if owner, repo or number is missing
        """
        if not owner or not repo or number is None:
            raise MalformedPullRequestError(
                f"Incomplete pull request reference: owner={owner!r} repo={repo!r} number={number!r}"
            )

        if not self.original_pr:
            self.original_pr = self.pr

        self.pr = PullRequestRef(owner=owner, repo=repo, number=int(number), branch=branch)

        if not self.original_pr:
            self.original_pr = self.pr

        return self.pr

    def clear_pull_request(self, number: int) -> None:
        """Forget ``pr`` and ``original_pr`` when they point at ``number``.

        Used when a ``#N`` reference turns out to be an issue, not a pull request.
        """
        if self.pr and self.pr.number == number:
            self.pr = None
        if self.original_pr and self.original_pr.number == number:
            self.original_pr = None

    @property
    def has_no_notes(self) -> bool:
        return self.note == NO_NOTES

    @property
    def text(self) -> str:
        """The note when one was found, else the subject."""
        return self.note or self.subject
