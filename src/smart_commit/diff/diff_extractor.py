"""
Diff extraction for changed files.

This module turns the changed entries of a status snapshot into
:class:`ChangeRecord` objects. The caller provides a VCS client that
implements ``read_committed_blob(path)`` and ``read_working_file(path)``.
Each file is processed independently: a file that cannot be read or
diffed is logged and left out, and the remaining files are still
processed in their original order.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from smart_commit.diff.binary_detector import is_binary_file
from smart_commit.diff.change_classifier import classify_flags
from smart_commit.diff.line_differ import diff_lines, render_unified
from smart_commit.diff.models import ABSENT, ChangeRecord, FileStatusFlags
from smart_commit.vcs.git_client import GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def read_committed_content(vcs_client: object, file_path: str, flags: FileStatusFlags) -> bytes:
    """Return the last committed content, or ``b""`` if there is none."""
    if flags.head == ABSENT:
        return b""
    try:
        return vcs_client.read_committed_blob(file_path)  # type: ignore[attr-defined]
    except GitError as exc:
        logger.debug("No committed version of %s: %s", file_path, exc)
        return b""


def read_working_content(vcs_client: object, file_path: str, flags: FileStatusFlags) -> bytes:
    """Return the content on disk, or ``b""`` if the file is absent."""
    if flags.working == ABSENT:
        return b""
    try:
        return vcs_client.read_working_file(file_path)  # type: ignore[attr-defined]
    except FileNotFoundError:
        return b""


def build_change_record(vcs_client: object, file_path: str, flags: FileStatusFlags) -> ChangeRecord:
    """Compute the :class:`ChangeRecord` for a single file."""
    committed = read_committed_content(vcs_client, file_path, flags)
    working = read_working_content(vcs_client, file_path, flags)
    status = classify_flags(flags)

    if is_binary_file(file_path, committed, working):
        return ChangeRecord(
            filename=file_path,
            status=status,
            is_binary=True,
            diff_text=f"Binary file {status.value}",
        )

    committed_text = _decode(committed)
    working_text = _decode(working)

    return ChangeRecord(
        filename=file_path,
        status=status,
        is_binary=False,
        diff_text=render_unified(committed_text, working_text),
        line_changes=tuple(diff_lines(committed_text, working_text)),
    )


def extract_diffs(
    vcs_client: object,
    changes: Iterable[Tuple[str, FileStatusFlags]],
) -> List[ChangeRecord]:
    """Build change records for a list of changed files.

    Parameters
    ----------
    vcs_client : object
        The VCS client instance. Must implement ``read_committed_blob``
        and ``read_working_file``.
    changes : Iterable[Tuple[str, FileStatusFlags]]
        Changed files with their status flags, in snapshot order.

    Returns
    -------
    List[ChangeRecord]
        One record per file that could be processed, in input order.
    """
    records: List[ChangeRecord] = []
    for file_path, flags in changes:
        try:
            record = build_change_record(vcs_client, file_path, flags)
        except (OSError, GitError, UnicodeError, ValueError) as exc:
            logger.error("Error getting diff for %s: %s", file_path, exc)
            continue
        logger.debug(
            "Diffed %s: %s, binary=%s, %d line change(s)",
            file_path,
            record.status.value,
            record.is_binary,
            len(record.line_changes),
        )
        records.append(record)
    return records
