"""
Classification of file changes from raw status flags.

The classifier is a pure function of the three status ordinals so that
it can be unit tested without a repository.
"""

from __future__ import annotations

from smart_commit.diff.models import ABSENT, ChangeStatus, FileStatusFlags


def classify_status(head: int, working: int, index: int) -> ChangeStatus:
    """Classify a change from its HEAD, working copy and index flags.

    Parameters
    ----------
    head : int
        Presence of the file in the last commit (``0`` = absent).
    working : int
        Presence of the file in the working directory.
    index : int
        Presence of the file in the index.

    Returns
    -------
    ChangeStatus
        The first matching rule wins: absent from both HEAD and index is
        ``untracked``, absent from disk is ``deleted``, absent from HEAD
        is ``added`` and everything else is ``modified``.
    """
    if head == ABSENT and index == ABSENT:
        return ChangeStatus.UNTRACKED
    if working == ABSENT:
        return ChangeStatus.DELETED
    if head == ABSENT:
        return ChangeStatus.ADDED
    return ChangeStatus.MODIFIED


def classify_flags(flags: FileStatusFlags) -> ChangeStatus:
    """Convenience wrapper around :func:`classify_status`."""
    return classify_status(flags.head, flags.working, flags.index)
