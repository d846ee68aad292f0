"""Markdown rendering of bucketed release notes."""

from typing import Dict, List, Tuple

from .classifier import Category, NotesBucket
from .commit import CommitRecord


GITHUB_URL = "https://github.com"

TITLE_BREAKING = "Breaking Changes"
TITLE_FEATURES = "Features"
TITLE_FIXES = "Fixes"
TITLE_OTHER = "Other Changes"
TITLE_DOCUMENTATION = "Documentation"
TITLE_UNKNOWN = "Unknown"

# Leading verbs rewritten to past tense
COMMON_VERBS = [
    ("Added", ["Add"]),
    ("Backported", ["Backport"]),
    ("Cleaned", ["Clean"]),
    ("Disabled", ["Disable"]),
    ("Ensured", ["Ensure"]),
    ("Exported", ["Export"]),
    ("Fixed", ["Fix", "Fixes"]),
    ("Handled", ["Handle"]),
    ("Improved", ["Improve"]),
    ("Made", ["Make"]),
    ("Removed", ["Remove"]),
    ("Repaired", ["Repair"]),
    ("Reverted", ["Revert"]),
    ("Stopped", ["Stop"]),
    ("Updated", ["Update"]),
    ("Upgraded", ["Upgrade"]),
]


def clean_note(text: str) -> str:
    """Capitalize, end with a period and put a known leading verb in the past tense."""
    note = (text or "").strip()
    if not note:
        return note

    note = note[0].upper() + note[1:]
    if not note.endswith("."):
        note = note + "."

    for past, verbs in COMMON_VERBS:
        for verb in verbs:
            start = f"{verb} "
            if note.startswith(start):
                note = f"{past} {note[len(start):]}"
    return note


def commit_link(commit: CommitRecord, owner: str, repo: str) -> str:
    """Markdown-friendly link for a commit; ``owner``/``repo`` is the primary repository."""
    pr = commit.original_pr
    if not pr:
        return f"{GITHUB_URL}/{commit.owner}/{commit.repo}/commit/{commit.hash}"
    if pr.owner == owner and pr.repo == repo:
        return f"#{pr.number}"
    return f"[{pr.owner}/{pr.repo}:{pr.number}]({GITHUB_URL}/{pr.owner}/{pr.repo}/pull/{pr.number})"


def render_commit(commit: CommitRecord, owner: str, repo: str) -> Tuple[str, str]:
    """Return ``(note, link)`` for one commit."""
    return clean_note(commit.text), commit_link(commit, owner, repo)


def render_section(title: str, commits: List[CommitRecord], owner: str, repo: str) -> str:
    """One ``## title`` section; commits with the same text share a line."""
    if not commits:
        return ""

    grouped: Dict[str, List[str]] = {}
    for commit in commits:
        note, link = render_commit(commit, owner, repo)
        grouped.setdefault(note, []).append(link)

    lines = sorted(f" * {note} {', '.join(sorted(links))}\n" for note, links in grouped.items())
    return f"## {title}\n\n" + "".join(lines) + "\n"


def render_docs_section(commits: List[CommitRecord], owner: str, repo: str) -> str:
    if not commits:
        return ""
    links = sorted(commit_link(commit, owner, repo) for commit in commits)
    return f"## {TITLE_DOCUMENTATION}\n\n * Documentation changes: {', '.join(links)}\n\n"


def render_notes(notes: NotesBucket, owner: str, repo: str) -> str:
    """Render bucketed notes as a Markdown document.

    Args:
        notes: Classified commits and target ref
        owner: Owner of the primary repository
        repo: Name of the primary repository

    Returns:
        Markdown text
    """
    rendered = [f"# Release Notes for {notes.ref}\n\n"]

    rendered.append(render_section(TITLE_BREAKING, notes[Category.BREAKING], owner, repo))
    rendered.append(render_section(TITLE_FEATURES, notes[Category.FEATURE], owner, repo))
    rendered.append(render_section(TITLE_FIXES, notes[Category.FIX], owner, repo))
    rendered.append(render_section(TITLE_OTHER, notes[Category.OTHER], owner, repo))
    rendered.append(render_docs_section(notes[Category.DOC], owner, repo))
    rendered.append(render_section(TITLE_UNKNOWN, notes[Category.UNKNOWN], owner, repo))

    return "".join(rendered)
