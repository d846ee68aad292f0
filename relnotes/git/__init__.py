"""Local git access."""

from .runner import CommandError, GitRepository, RawCommit, run_command

__all__ = [
    "CommandError",
    "GitRepository",
    "RawCommit",
    "run_command",
]
