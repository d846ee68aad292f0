"""Tests for dependency range resolution."""

import os
from unittest.mock import MagicMock

import pytest

from relnotes.config import Config, DependencyConfig
from relnotes.git import CommandError, RawCommit
from relnotes.releasenote.dependencies import (
    DepsVariableStrategy,
    SubmoduleStrategy,
    get_dependency_commits,
    select_strategy,
    semver_major,
    should_include_dependencies,
)
from relnotes.releasenote.pool import CommitPool

H1 = "1" * 40
H2 = "2" * 40

SUBMODULE_DEP = DependencyConfig(owner="owner", repo="libfoo", dir="vendor/libfoo")
DEPS_DEP = DependencyConfig(owner="owner", repo="node", dir="../third_party/node", deps_variable="node_version")


class FakeGit:
    def __init__(self, directory, pins=None, deps_files=None, commits=None):
        self.directory = directory
        self.pins = pins or {}
        self.deps_files = deps_files or {}
        self.commits = commits or []
        self.ranges = []

    def submodule_ref(self, point, path):
        return self.pins.get((point, path))

    def show_file(self, ref, path):
        return self.deps_files[ref]

    def merge_base(self, point1, point2):
        return point1

    def commit_hashes(self, ref):
        return []

    def commits_between(self, point1, point2):
        self.ranges.append((point1, point2))
        return list(self.commits)


def make_config(tmp_path, **kwargs):
    return Config(owner="owner", repo="repo", git_dir=str(tmp_path), **kwargs)


# ---------------------------------------------------------------------------
# Semantic versions
# ---------------------------------------------------------------------------


class TestSemver:
    @pytest.mark.parametrize("ref,major", [
        ("v3.0.0", 3),
        ("3.1.2", 3),
        ("v4.0.0-beta.1", 4),
        ("v1.2.3+build.5", 1),
        ("v1.2", None),
        ("master", None),
        ("", None),
        (None, None),
    ])
    def test_major(self, ref, major):
        assert semver_major(ref) == major

    def test_same_major_included(self):
        assert should_include_dependencies("v3.0.0", "v3.1.0")

    def test_different_major_excluded(self):
        assert not should_include_dependencies("v2.9.0", "v3.0.0")

    def test_non_semver_excluded(self):
        assert not should_include_dependencies("master", "v3.0.0")


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class TestSelectStrategy:
    def test_submodule_when_probe_exists(self, tmp_path):
        (tmp_path / "vendor" / "libfoo").mkdir(parents=True)
        strategy = select_strategy(FakeGit(str(tmp_path)), "vendor/libfoo")
        assert isinstance(strategy, SubmoduleStrategy)

    def test_deps_when_probe_missing(self, tmp_path):
        strategy = select_strategy(FakeGit(str(tmp_path)), "vendor/libfoo")
        assert isinstance(strategy, DepsVariableStrategy)

    def test_deps_when_no_probe_configured(self, tmp_path):
        assert isinstance(select_strategy(FakeGit(str(tmp_path)), None), DepsVariableStrategy)


class TestSubmoduleStrategy:
    def test_pinned_ref(self):
        git = FakeGit("/repo", pins={("v1.0.0", "vendor/libfoo"): H1})
        assert SubmoduleStrategy(git).pinned_ref(SUBMODULE_DEP, "v1.0.0") == H1

    def test_only_applies_to_submodules(self):
        strategy = SubmoduleStrategy(FakeGit("/repo"))
        assert strategy.applies_to(SUBMODULE_DEP)
        assert not strategy.applies_to(DEPS_DEP)

    def test_merges_pinned_range(self):
        primary = FakeGit("/repo", pins={("v1.0.0", "vendor/libfoo"): H1, ("v1.1.0", "vendor/libfoo"): H2})
        dep_git = FakeGit("/repo/vendor/libfoo", commits=[
            RawCommit(hash="c" * 40, parent_hashes=[], email="", message="fix: leak (#3)"),
        ])
        pool = CommitPool()

        merged = SubmoduleStrategy(primary).add_dependency_commits(
            pool, [SUBMODULE_DEP, DEPS_DEP], "v1.0.0", "v1.1.0", git_factory=lambda d: dep_git
        )

        assert merged == ["owner/libfoo"]
        assert dep_git.ranges == [(H1, H2)]
        commit = pool.commits[0]
        assert (commit.owner, commit.repo) == ("owner", "libfoo")
        assert (commit.pr.repo, commit.pr.number) == ("libfoo", 3)

    def test_unpinned_dependency_skipped(self):
        primary = FakeGit("/repo", pins={("v1.1.0", "vendor/libfoo"): H2})
        pool = CommitPool()
        merged = SubmoduleStrategy(primary).add_dependency_commits(
            pool, [SUBMODULE_DEP], "v1.0.0", "v1.1.0", git_factory=MagicMock()
        )
        assert merged == []
        assert len(pool) == 0


class TestDepsVariableStrategy:
    def test_pinned_ref_reads_deps_file(self):
        git = FakeGit("/repo", deps_files={"v1.0.0": "vars = {'node_version': 'abc'}"})
        seen = {}

        def tool_runner(args):
            filename = args[args.index("--deps-file") + 1]
            with open(filename, encoding="utf-8") as f:
                seen["contents"] = f.read()
            seen["args"] = args
            seen["filename"] = filename
            return "abc\n"

        strategy = DepsVariableStrategy(git, tool_runner=tool_runner)
        assert strategy.pinned_ref(DEPS_DEP, "v1.0.0") == "abc"
        assert seen["contents"] == "vars = {'node_version': 'abc'}"
        assert seen["args"][:2] == ["gclient", "getdep"]
        assert seen["args"][-2:] == ["--var", "node_version"]
        assert not os.path.exists(seen["filename"])

    def test_tool_failure_propagates(self):
        git = FakeGit("/repo", deps_files={"v1.0.0": ""})

        def tool_runner(args):
            raise CommandError(args, 1, "gclient: not found")

        with pytest.raises(CommandError):
            DepsVariableStrategy(git, tool_runner=tool_runner).pinned_ref(DEPS_DEP, "v1.0.0")

    def test_only_applies_to_deps_variables(self):
        strategy = DepsVariableStrategy(FakeGit("/repo"))
        assert strategy.applies_to(DEPS_DEP)
        assert not strategy.applies_to(SUBMODULE_DEP)


# ---------------------------------------------------------------------------
# get_dependency_commits
# ---------------------------------------------------------------------------


class TestGetDependencyCommits:
    def test_cross_major_skips_dependencies(self, tmp_path):
        strategy = MagicMock()
        config = make_config(tmp_path, dependencies=[SUBMODULE_DEP])
        assert get_dependency_commits(CommitPool(), config, "v2.0.0", "v3.0.0", strategy=strategy) == []
        strategy.add_dependency_commits.assert_not_called()

    def test_no_dependencies_configured(self, tmp_path):
        strategy = MagicMock()
        assert get_dependency_commits(CommitPool(), make_config(tmp_path), "v3.0.0", "v3.0.1", strategy=strategy) == []
        strategy.add_dependency_commits.assert_not_called()

    def test_same_major_uses_strategy(self, tmp_path):
        strategy = MagicMock()
        strategy.add_dependency_commits.return_value = ["owner/libfoo"]
        config = make_config(tmp_path, dependencies=[SUBMODULE_DEP])
        pool = CommitPool()

        assert get_dependency_commits(pool, config, "v3.0.0", "v3.0.1", strategy=strategy) == ["owner/libfoo"]
        args = strategy.add_dependency_commits.call_args.args
        assert args[0] is pool
        assert args[2:4] == ("v3.0.0", "v3.0.1")
        assert "owner/libfoo" in args[5]

    def test_probes_primary_checkout(self, tmp_path):
        (tmp_path / "vendor" / "libfoo").mkdir(parents=True)
        primary = FakeGit(str(tmp_path), pins={("v3.0.0", "vendor/libfoo"): H1, ("v3.0.1", "vendor/libfoo"): H2})
        dep_git = FakeGit(str(tmp_path / "vendor" / "libfoo"))
        config = make_config(tmp_path, dependencies=[SUBMODULE_DEP], dependency_probe_path="vendor/libfoo")

        def factory(directory):
            return primary if directory == str(tmp_path) else dep_git

        merged = get_dependency_commits(CommitPool(), config, "v3.0.0", "v3.0.1", git_factory=factory)
        assert merged == ["owner/libfoo"]
        assert dep_git.ranges == [(H1, H2)]
