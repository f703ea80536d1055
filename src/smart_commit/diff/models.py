"""
Data models shared by the diff pipeline.

A :class:`ChangeRecord` is produced for every changed file and carries
the derived :class:`ChangeStatus`, the binary flag, the rendered diff
text and the positional line changes. Records are frozen so that they
can be handed to the grouping step without risk of mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

from smart_commit.vcs.git_client import ABSENT, FileStatusFlags  # noqa: F401


class ChangeStatus(str, Enum):
    """Classification of a changed file relative to the last commit."""

    UNTRACKED = "untracked"
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AddedLine:
    line_number: int
    new_content: str


@dataclass(frozen=True)
class RemovedLine:
    line_number: int
    old_content: str


@dataclass(frozen=True)
class ModifiedLine:
    line_number: int
    old_content: str
    new_content: str


LineChange = Union[AddedLine, RemovedLine, ModifiedLine]


@dataclass(frozen=True)
class ChangeRecord:
    """Description of a single changed file.

    Attributes
    ----------
    filename : str
        Path relative to the repository root.
    status : ChangeStatus
        Classification derived from the status flags.
    is_binary : bool
        Whether the content was treated as binary; no line diff is
        computed in that case.
    diff_text : str
        Unified rendering of the change, or ``"Binary file <status>"``.
    line_changes : Tuple[LineChange, ...]
        Positional line changes, empty for binary files.
    """

    filename: str
    status: ChangeStatus
    is_binary: bool
    diff_text: str
    line_changes: Tuple[LineChange, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Serialisable view used when building the grouping prompt."""
        return {
            "filename": self.filename,
            "changeType": self.status.value,
            "diffText": self.diff_text,
            "isBinary": self.is_binary,
        }
