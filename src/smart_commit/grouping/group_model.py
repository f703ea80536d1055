"""
Data models for commit grouping.

The :class:`CommitGroup` represents a set of related files that should
be committed together with a proposed message. :class:`RunConfig`
holds the per-invocation switches that drive the commit loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass
class CommitGroup:
    """Representation of a grouped commit.

    Attributes
    ----------
    files : List[str]
        Files included in the group, in the order proposed.
    commit_message : str
        Proposed commit message.
    """

    files: List[str]
    commit_message: str


@dataclass(frozen=True)
class RunConfig:
    """Switches for a single invocation.

    Attributes
    ----------
    auto_approve : bool
        Commit every group without asking and continue past failures.
    dry_run : bool
        Report what would be staged and committed without doing it.
    verbose : bool
        Enable debug logging.
    """

    auto_approve: bool = False
    dry_run: bool = False
    verbose: bool = False
