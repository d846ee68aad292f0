"""Commit message parsing and release note extraction."""

import re
from typing import Iterable, Optional

from .classifier import KNOWN_TYPES
from .commit import NO_NOTES, CommitRecord


NOTE_PREFIX = "Notes: "
NOTE_PLACEHOLDER = "<!-- One-line Change Summary Here-->"

PARAGRAPH_SPLIT_RE = re.compile(r"\r?\n\r?\n")
NEWLINE_RE = re.compile(r"\r?\n")
NO_NOTES_RE = re.compile(r"^(?:no[ _-]notes|none)\.?$", re.IGNORECASE)

# Subject conventions
PR_SUFFIX_RE = re.compile(r"^(.*)\s\(#(\d+)\)$")
SEMANTIC_PREFIX_RE = re.compile(r"^(\w+):\s(.*)$")
MERGE_PR_RE = re.compile(r"^Merge pull request #(\d+) from (.*)$")
BACKPORT_OF_RE = re.compile(r"\bBackport of #(\d+)\b")

# https://help.github.com/articles/closing-issues-using-keywords/
CLOSES_ISSUE_RE = re.compile(
    r"\b(?:close|closes|closed|fix|fixes|fixed|resolve|resolves|resolved|for)\s#(\d+)\b"
)
# e.g. 'Fixes [#8952](https://github.com/owner/repo/issues/8952)'
MARKDOWN_FIXES_RE = re.compile(
    r"Fixes \[#(\d+)\]\(https://github\.com/([\w.-]+)/([\w.-]+)/issues/(\d+)\)"
)

BREAKING_CHANGE_PREFIX = "BREAKING CHANGE"
REVERT_RE = re.compile(r"This reverts commit ([a-f0-9]{40})\.")

# Manual backports: 'owner/repo#123' notation or a link to the pull request
SLUG_PR_RE = re.compile(r"\b([\w.-]+)/([\w.-]+)#(\d+)\b")
PR_URL_RE = re.compile(r"https://github\.com/([\w.-]+)/([\w.-]+)/pull/(\d+)")

# Pre-semantic commits, matched against the lower-cased message
LEGACY_CHORE_RE = re.compile(r"\bchore\((\w+)\):")
LEGACY_FIX_RE = re.compile(r"\b(?:fix|fixes|fixed)")
LEGACY_DOCS_RE = re.compile(r"\[(?:docs|doc)\]")


def _paragraphs(text: str):
    return [paragraph.strip() for paragraph in PARAGRAPH_SPLIT_RE.split(text)]


def get_note_from_body(body: Optional[str]) -> Optional[str]:
    """Extract an explicit release note from a commit or pull request body.

    The note is the first paragraph starting with ``Notes: ``. Variants of
    "no notes" and "none" map to :data:`NO_NOTES`.

    Args:
        body: Commit or pull request body, may be None

    Returns:
        The cleaned note, NO_NOTES, or None when no note paragraph exists
    """
    if not body:
        return None

    note = next((p for p in _paragraphs(body) if p.startswith(NOTE_PREFIX)), None)
    if not note:
        return None

    note = note[len(NOTE_PREFIX):].replace(NOTE_PLACEHOLDER, "")
    note = NEWLINE_RE.sub(" ", note).strip()
    if not note:
        return None

    if NO_NOTES_RE.match(note):
        return NO_NOTES

    return note


def parse_commit_message(commit_message: str, owner: str, repo: str,
                         commit: Optional[CommitRecord] = None,
                         follow_repos: Iterable[str] = ()) -> CommitRecord:
    """Enrich a commit record from the conventions found in a commit message.

    Recognized conventions:

    * ``semantic: some description`` sets type and subject
    * ``some description (#99999)`` sets subject and pull request
    * ``Fixes #3333`` sets the issue number
    * ``Merge pull request #99999 from branch`` sets pull request and branch
    * ``This reverts commit <sha>.`` sets the revert hash
    * a paragraph starting with ``BREAKING CHANGE`` makes it a breaking change
    * ``Backport of #99999`` sets the pull request

    Later rules may overwrite type and pull request set by earlier ones.
    ``original_subject`` and ``original_pr`` are only filled once.

    Args:
        commit_message: Full commit message (or pull request title + body)
        owner: Owner of the repository the message belongs to
        repo: Name of the repository the message belongs to
        commit: Record to enrich; a new one is created when omitted
        follow_repos: ``owner/repo`` slugs that manual backports may point at

    Returns:
        The enriched commit record
    """
    if commit is None:
        commit = CommitRecord(owner=owner, repo=repo)

    subject = commit_message
    body = ""
    pos = subject.find("\n")
    if pos != -1:
        body = subject[pos:].strip()
        subject = subject[:pos].strip()

    commit.set_original_subject(subject)

    if body:
        commit.body = body
        note = get_note_from_body(body)
        if note:
            commit.note = note

    match = PR_SUFFIX_RE.match(subject)
    if match:
        commit.set_pull_request(owner, repo, int(match.group(2)))
        subject = match.group(1)

    match = SEMANTIC_PREFIX_RE.match(subject)
    if match:
        commit.type = match.group(1).lower()
        subject = match.group(2)

    match = MERGE_PR_RE.match(subject)
    if match:
        commit.set_pull_request(owner, repo, int(match.group(1)), branch=match.group(2).strip())

    match = BACKPORT_OF_RE.search(commit_message)
    if match:
        commit.set_pull_request(owner, repo, int(match.group(1)))

    match = CLOSES_ISSUE_RE.search(subject)
    if match:
        commit.issue_number = int(match.group(1))
        if not commit.type:
            commit.type = "fix"

    # A re-parse finds the issue already recorded and clears the same number again
    match = MARKDOWN_FIXES_RE.search(commit_message)
    if match and (not commit.issue_number or commit.issue_number == int(match.group(1))):
        commit.issue_number = int(match.group(1))
        commit.clear_pull_request(commit.issue_number)
        if not commit.type:
            commit.type = "fix"

    # https://www.conventionalcommits.org/en
    if any(p.startswith(BREAKING_CHANGE_PREFIX) for p in _paragraphs(commit_message)):
        commit.type = "breaking-change"

    match = REVERT_RE.search(body)
    if match:
        commit.revert_hash = match.group(1)

    _parse_manual_backport(commit_message, commit, follow_repos)

    if not commit.type or commit.type == "chore":
        _parse_legacy_type(commit_message, commit)

    commit.subject = subject.strip()

    return commit


def _parse_manual_backport(commit_message: str, commit: CommitRecord, follow_repos: Iterable[str]) -> None:
    follow = set(follow_repos)

    if "backport" in commit_message.lower():
        match = SLUG_PR_RE.search(commit_message)
        if match and f"{match.group(1)}/{match.group(2)}" in follow:
            commit.set_pull_request(match.group(1), match.group(2), int(match.group(3)))

    if "ackport" in commit_message:
        match = PR_URL_RE.search(commit_message)
        if match and f"{match.group(1)}/{match.group(2)}" in follow:
            commit.set_pull_request(match.group(1), match.group(2), int(match.group(3)))


def _parse_legacy_type(commit_message: str, commit: CommitRecord) -> None:
    message = commit_message.lower()

    match = LEGACY_CHORE_RE.search(message)
    if match:
        # 'Chore(docs): description'
        commit.type = match.group(1) if match.group(1) in KNOWN_TYPES else "chore"
    elif LEGACY_FIX_RE.search(message):
        commit.type = "fix"
    elif LEGACY_DOCS_RE.search(message):
        commit.type = "doc"
