"""
Positional line differ.

Lines are compared index by index; there is no longest-common-subsequence
alignment. An insertion near the top of a file therefore shows up as a
cascade of modified lines followed by one added line. The commit
planner prompt is written against this output, so the behaviour must
stay as it is.

An empty string has zero lines, which makes an absent file and an empty
file indistinguishable.
"""

from __future__ import annotations

from itertools import zip_longest
from typing import Iterator, List, Optional, Tuple

from smart_commit.diff.models import AddedLine, LineChange, ModifiedLine, RemovedLine


def split_lines(text: str) -> List[str]:
    """Split on ``\\n``; the empty string yields no lines."""
    if text == "":
        return []
    return text.split("\n")


def _paired_lines(committed: str, working: str) -> Iterator[Tuple[int, Optional[str], Optional[str]]]:
    pairs = zip_longest(split_lines(committed), split_lines(working))
    for index, (old, new) in enumerate(pairs):
        yield index + 1, old, new


def diff_lines(committed: str, working: str) -> List[LineChange]:
    """Return the positional line changes between two snapshots.

    Line numbers are 1-based positions in the longer of the two line
    sequences. Equal positions produce no entry.
    """
    changes: List[LineChange] = []
    for line_number, old, new in _paired_lines(committed, working):
        if old is None:
            changes.append(AddedLine(line_number, new))
        elif new is None:
            changes.append(RemovedLine(line_number, old))
        elif old != new:
            changes.append(ModifiedLine(line_number, old, new))
    return changes


def render_unified(committed: str, working: str) -> str:
    """Render the positional diff in unified style.

    Unchanged lines are prefixed with a space, removed lines with ``-``
    and added lines with ``+``. A modified line is rendered as a removal
    followed by an addition. No header is emitted and no trailing newline
    is appended.
    """
    rendered: List[str] = []
    for _, old, new in _paired_lines(committed, working):
        if old is None:
            rendered.append(f"+{new}")
        elif new is None:
            rendered.append(f"-{old}")
        elif old != new:
            rendered.append(f"-{old}")
            rendered.append(f"+{new}")
        else:
            rendered.append(f" {old}")
    return "\n".join(rendered)
