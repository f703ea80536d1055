"""
Version control system (VCS) integration.

This package contains the :class:`GitClient` used to read the status
of a working directory, read committed and working content, stage
files and create commits.
"""

from .git_client import AuthorIdentity, FileStatusFlags, GitClient, GitError  # noqa: F401
