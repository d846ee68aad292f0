"""Release note generation module."""

from .classifier import Category, NotesBucket, bucket_commits, classify
from .commit import NO_NOTES, CommitRecord, MalformedPullRequestError, PullRequestRef
from .generator import generate_release_notes, get_notes
from .parser import get_note_from_body, parse_commit_message
from .pool import CommitPool
from .render import render_notes

__all__ = [
    "Category",
    "NotesBucket",
    "bucket_commits",
    "classify",
    "NO_NOTES",
    "CommitRecord",
    "MalformedPullRequestError",
    "PullRequestRef",
    "generate_release_notes",
    "get_notes",
    "get_note_from_body",
    "parse_commit_message",
    "CommitPool",
    "render_notes",
]
