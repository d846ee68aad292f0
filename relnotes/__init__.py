"""Relnotes - release notes from git history and GitHub pull requests."""

__version__ = "0.1.0"
