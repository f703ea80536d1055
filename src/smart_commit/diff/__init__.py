"""
Change classification and diff computation.

The :mod:`smart_commit.diff.diff_extractor` module combines the status
classifier, the binary detector and the line differ into one
:class:`~smart_commit.diff.models.ChangeRecord` per changed file.
"""

from .binary_detector import is_binary_file  # noqa: F401
from .change_classifier import classify_status  # noqa: F401
from .diff_extractor import extract_diffs  # noqa: F401
from .line_differ import diff_lines, render_unified  # noqa: F401
from .models import ChangeRecord, ChangeStatus, FileStatusFlags  # noqa: F401
