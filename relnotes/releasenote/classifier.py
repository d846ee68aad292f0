"""Release note categories and commit bucketing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .commit import CommitRecord


class Category(Enum):
    """Release note section a commit is rendered in."""

    BREAKING = "breaking"
    DOC = "docs"
    FEATURE = "feature"
    FIX = "fix"
    OTHER = "other"
    UNKNOWN = "unknown"


BREAK_TYPES = frozenset({"breaking-change"})
DOC_TYPES = frozenset({"doc", "docs"})
FEAT_TYPES = frozenset({"feat", "feature"})
FIX_TYPES = frozenset({"fix"})
OTHER_TYPES = frozenset({
    "spec", "build", "test", "chore", "deps", "refactor",
    "tools", "vendor", "perf", "style", "ci",
})

KNOWN_TYPES = BREAK_TYPES | DOC_TYPES | FEAT_TYPES | FIX_TYPES | OTHER_TYPES

# Evaluated in order; the sets are disjoint
TYPE_SETS = [
    (Category.BREAKING, BREAK_TYPES),
    (Category.DOC, DOC_TYPES),
    (Category.FEATURE, FEAT_TYPES),
    (Category.FIX, FIX_TYPES),
    (Category.OTHER, OTHER_TYPES),
]


def classify(commit_type: Optional[str]) -> Category:
    """Map a commit type tag to its category; missing or unknown tags map to UNKNOWN."""
    if not commit_type:
        return Category.UNKNOWN
    for category, types in TYPE_SETS:
        if commit_type in types:
            return category
    return Category.UNKNOWN


@dataclass
class NotesBucket:
    """Finalized commits grouped by category for one target ref."""

    ref: str
    buckets: Dict[Category, List[CommitRecord]] = field(
        default_factory=lambda: {category: [] for category in Category}
    )

    def __getitem__(self, category: Category) -> List[CommitRecord]:
        return self.buckets[category]

    def add(self, commit: CommitRecord) -> Category:
        category = classify(commit.type)
        self.buckets[category].append(commit)
        return category

    def __len__(self) -> int:
        return sum(len(commits) for commits in self.buckets.values())


def bucket_commits(commits: Iterable[CommitRecord], ref: str) -> NotesBucket:
    """Group commits into a :class:`NotesBucket` for ``ref``."""
    notes = NotesBucket(ref=ref)
    for commit in commits:
        notes.add(commit)
    return notes
