"""Thin wrapper around the git command line."""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import List, Optional


FIELD_SEP = "||"
# hash, parent hashes, author email, raw body
COMMIT_FORMAT = FIELD_SEP.join(["%H", "%P", "%aE", "%B"])
SUBMODULE_MODE = "160000"


class CommandError(RuntimeError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, args: List[str], returncode: int, stderr: str):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(stderr or f"{' '.join(args)} exited with status {returncode}")


@dataclass(frozen=True)
class RawCommit:
    hash: str
    parent_hashes: List[str]
    email: str
    message: str


def run_command(args: List[str], cwd: Optional[str] = None) -> str:
    """Run a command and return its stripped stdout.

    Raises:
        CommandError: if the command exits with a non-zero status
    """
    logger = logging.getLogger(__name__)
    logger.debug(f"Running {' '.join(args)} in {cwd or os.getcwd()}")

    proc = subprocess.run(
        args,
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
    )
    if proc.returncode != 0:
        raise CommandError(args, proc.returncode, proc.stderr.strip())
    return proc.stdout.strip()


class GitRepository:
    """Read-only git queries against one working copy."""

    def __init__(self, directory: str):
        self.directory = directory

    def run(self, args: List[str], cwd: Optional[str] = None) -> str:
        return run_command(["git", *args], cwd=cwd or self.directory)

    def merge_base(self, point1: str, point2: str) -> str:
        return self.run(["merge-base", point1, point2])

    def commit_hashes(self, ref: str) -> List[str]:
        """Return every commit hash reachable from ``ref``."""
        output = self.run(["log", "-z", "--format=%H", ref])
        return [h.strip() for h in output.split("\0") if h.strip()]

    def commits_between(self, point1: str, point2: str) -> List[RawCommit]:
        """Return first-parent commits in ``point1..point2`` not already cherry-picked into ``point1``."""
        args = [
            "log", "-z", "--cherry-pick", "--right-only", "--first-parent",
            f"--format={COMMIT_FORMAT}", f"{point1}..{point2}",
        ]
        commits = []
        for entry in self.run(args).split("\0"):
            entry = entry.strip()
            if not entry:
                continue
            fields = [f.strip() for f in entry.split(FIELD_SEP, 3)]
            fields += [""] * (4 - len(fields))
            commit_hash, parents, email, message = fields
            commits.append(RawCommit(
                hash=commit_hash,
                parent_hashes=parents.split(),
                email=email,
                message=message,
            ))
        return commits

    def submodule_ref(self, point: str, path: str) -> Optional[str]:
        """Return the revision a submodule is pinned to at ``point``.

        ``path`` is relative to this repository. Returns None when ``path``
        is not a submodule at ``point``.
        """
        # e.g. '160000 commit 028b0af83076cec898f4ebce208b7fadb715656e\tvendor/node'
        output = self.run(["ls-tree", "-t", point, path])
        for line in output.split("\n"):
            if line.startswith(SUBMODULE_MODE):
                tokens = line.split()
                if len(tokens) >= 3:
                    return tokens[2]
        return None

    def show_file(self, ref: str, path: str) -> str:
        return self.run(["show", f"{ref}:{path}"])
