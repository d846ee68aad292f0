"""End-to-end tests for release note generation with fake git and GitHub."""

from unittest.mock import MagicMock

import pytest

from relnotes.config import Config, DependencyConfig
from relnotes.git import CommandError, RawCommit
from relnotes.releasenote import Category, generate_release_notes, get_notes

OLD = "0" * 40
FEAT = "1" * 40
REVERTED = "2" * 40
REVERT = "3" * 40
BUMP = "4" * 40
BACKPORT = "5" * 40
RELEASED = "6" * 40
DEP_FIX = "7" * 40


def raw(commit_hash, message):
    return RawCommit(hash=commit_hash, parent_hashes=[OLD], email="dev@example.com", message=message)


class FakeGit:
    def __init__(self, directory, old_hashes=(), commits=(), pins=None):
        self.directory = directory
        self.old_hashes = list(old_hashes)
        self.commits = list(commits)
        self.pins = pins or {}

    def merge_base(self, point1, point2):
        return "ancestor"

    def commit_hashes(self, ref):
        return list(self.old_hashes)

    def commits_between(self, point1, point2):
        return list(self.commits)

    def submodule_ref(self, point, path):
        return self.pins.get((point, path))


class FakeClient:
    def __init__(self, pulls):
        self.pulls = pulls
        self.calls = []

    def get_pull_request(self, owner, repo, number):
        self.calls.append((owner, repo, number))
        return self.pulls.get((owner, repo, number))


PRIMARY_COMMITS = [
    raw(FEAT, "feat: add a window option (#10)"),
    raw(REVERTED, "fix: something risky (#11)"),
    raw(REVERT, f'Revert "fix: something risky"\n\nThis reverts commit {REVERTED}.'),
    raw(BUMP, "Bump v3.0.1"),
    raw(BACKPORT, "fix: crash on exit (#12)"),
    raw(RELEASED, "fix: already shipped (#13)"),
]

PULLS = {
    ("org", "project", 10): {"title": "feat: add a window option", "body": "Notes: added a `frame` option."},
    ("org", "project", 12): {"title": "fix: crash on exit", "body": "Backport of #9"},
    ("org", "project", 9): {"title": "fix: crash on exit", "body": "Notes: Fix crash on exit"},
    ("org", "node", 40): {"title": "fix: plug a leak", "body": ""},
}


@pytest.fixture
def config(tmp_path):
    (tmp_path / "vendor" / "node").mkdir(parents=True)
    return Config(
        owner="org",
        repo="project",
        git_dir=str(tmp_path),
        dependency_probe_path="vendor/node",
        dependencies=[DependencyConfig(owner="org", repo="node", dir="vendor/node")],
    )


@pytest.fixture
def git_factory(config):
    primary = FakeGit(
        config.git_dir,
        old_hashes=[OLD, RELEASED],
        commits=PRIMARY_COMMITS,
        pins={("v3.0.0", "vendor/node"): "a" * 40, ("v3.0.1", "vendor/node"): "b" * 40},
    )
    dependency = FakeGit("vendor/node", commits=[raw(DEP_FIX, "fix: plug a leak (#40)")])

    def factory(directory):
        return primary if directory == config.git_dir else dependency

    return factory


class TestGetNotes:
    def test_pipeline(self, config, git_factory):
        client = FakeClient(PULLS)
        notes = get_notes(config, "v3.0.0", "v3.0.1", client, git_factory)

        assert notes.ref == "v3.0.1"
        assert [c.hash for c in notes[Category.FEATURE]] == [FEAT]
        assert sorted(c.hash for c in notes[Category.FIX]) == [BACKPORT, DEP_FIX]
        assert notes[Category.UNKNOWN] == []
        assert len(notes) == 3

        backport = next(c for c in notes[Category.FIX] if c.hash == BACKPORT)
        assert backport.note == "Fix crash on exit"
        assert backport.original_pr.number == 12

        # reverted pair and released commit never hit the API
        assert ("org", "project", 11) not in client.calls
        assert ("org", "project", 13) not in client.calls

    def test_cross_major_skips_dependencies(self, config, git_factory):
        notes = get_notes(config, "v2.0.0", "v3.0.1", FakeClient(PULLS), git_factory)
        assert [c.hash for c in notes[Category.FIX]] == [BACKPORT]

    def test_requires_primary_repository(self, git_factory):
        with pytest.raises(ValueError):
            get_notes(Config(), "v3.0.0", "v3.0.1", FakeClient({}), git_factory)

    def test_git_failure_propagates(self, config):
        git = MagicMock()
        git.merge_base.side_effect = CommandError(["git", "merge-base"], 128, "fatal: bad revision")
        with pytest.raises(CommandError):
            get_notes(config, "v3.0.0", "v3.0.1", FakeClient({}), lambda d: git)


class TestGenerateReleaseNotes:
    def test_markdown(self, config, git_factory):
        text = generate_release_notes(config, "v3.0.0", "v3.0.1", FakeClient(PULLS), git_factory)
        assert text == (
            "# Release Notes for v3.0.1\n\n"
            "## Features\n\n * Added a `frame` option. #10\n\n"
            "## Fixes\n\n"
            " * Fixed crash on exit. #12\n"
            " * Plug a leak. [org/node:40](https://github.com/org/node/pull/40)\n\n"
        )
