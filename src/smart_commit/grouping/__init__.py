"""
Commit grouping and application.

See :mod:`smart_commit.grouping.group_model` for the data models and
:mod:`smart_commit.grouping.commit_engine` for the loop that stages and
commits each group.
"""

from .commit_engine import CommitApplyError, GroupCommitEngine, GroupOutcome, GroupState  # noqa: F401
from .group_model import CommitGroup, RunConfig  # noqa: F401
