"""
Pre-conditions and outcomes of a commit run.

A run ends in one of the :class:`RunOutcome` values. Besides ``OK``,
the outcomes are expected early exits that the CLI reports without
treating them as failures. Fatal conditions are raised as exceptions
by the individual collaborators.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Tuple

from smart_commit.diff.models import ChangeRecord
from smart_commit.vcs.git_client import FileStatusFlags


StatusSnapshot = Sequence[Tuple[str, FileStatusFlags]]


class RunOutcome(str, Enum):
    OK = "ok"
    NO_CHANGES = "no_changes"
    ALREADY_STAGED = "already_staged"
    ABORTED = "aborted"


def find_staged_files(snapshot: StatusSnapshot) -> List[str]:
    """Return files whose index entry differs from HEAD."""
    return [path for path, flags in snapshot if flags.index != flags.head]


def find_unstaged_changes(snapshot: StatusSnapshot) -> List[Tuple[str, FileStatusFlags]]:
    """Return entries whose working copy differs from the index."""
    return [(path, flags) for path, flags in snapshot if flags.working != flags.index]


def check_preconditions(snapshot: StatusSnapshot) -> Optional[RunOutcome]:
    """Return an early-exit outcome for ``snapshot``, or None to proceed.

    Already staged files take precedence over an empty change set so the
    user's index is never committed as part of a group.
    """
    if find_staged_files(snapshot):
        return RunOutcome.ALREADY_STAGED
    if not find_unstaged_changes(snapshot):
        return RunOutcome.NO_CHANGES
    return None


def check_records(records: Sequence[ChangeRecord]) -> Optional[RunOutcome]:
    """Return ``NO_CHANGES`` when no change record could be produced."""
    if not records:
        return RunOutcome.NO_CHANGES
    return None
