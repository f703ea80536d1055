"""
Sequential application of commit groups.

:class:`GroupCommitEngine` walks the proposed groups in order. Each
group is displayed, confirmed (or auto-approved), then staged and
committed as one pair. In dry-run mode nothing is staged or committed.

When a stage or commit fails, the outcome depends on the mode: with
auto-approve the failure is logged and the next group is attempted;
interactively the failure is raised as :class:`CommitApplyError` and
no further group is attempted. In both modes the failed group's files
are unstaged first, so a later commit never picks them up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from smart_commit.grouping.group_model import CommitGroup, RunConfig
from smart_commit.vcs.git_client import AuthorIdentity, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ConfirmFn = Callable[[str], bool]
DisplayFn = Callable[[CommitGroup, int, int], None]


class GroupState(str, Enum):
    PENDING = "pending"
    DISPLAYED = "displayed"
    CONFIRMED = "confirmed"
    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class GroupOutcome:
    """Final state of one commit group.

    ``index`` is 1-based. ``dry_run`` is set for groups that were only
    reported as applied.
    """

    index: int
    group: CommitGroup
    state: GroupState = GroupState.PENDING
    dry_run: bool = False
    error: Optional[Exception] = None


class CommitApplyError(Exception):
    """Raised when staging or committing a group fails interactively."""

    def __init__(self, index: int, group: CommitGroup, cause: Exception) -> None:
        super().__init__(f"Failed to commit group {index}: {cause}")
        self.index = index
        self.group = group
        self.cause = cause


class GroupCommitEngine:
    """Stage and commit a sequence of commit groups.

    Parameters
    ----------
    repository : object
        VCS client implementing ``stage_files(files)``,
        ``unstage_files(files)`` and ``commit(message, author_name, author_email)``.
    author : AuthorIdentity
        Author recorded on every commit.
    confirm : callable, optional
        ``confirm(question) -> bool``; required unless auto-approving.
    display : callable, optional
        ``display(group, index, total)`` called before each decision.
    """

    def __init__(
        self,
        repository: object,
        author: AuthorIdentity,
        confirm: Optional[ConfirmFn] = None,
        display: Optional[DisplayFn] = None,
    ) -> None:
        self.repository = repository
        self.author = author
        self.confirm = confirm
        self.display = display

    def _should_commit(self, config: RunConfig) -> bool:
        if config.auto_approve:
            return True
        if self.confirm is None:
            raise ValueError("A confirm callback is required unless auto_approve is set")
        return self.confirm("Commit this group?")

    def _stage_and_commit(self, group: CommitGroup) -> None:
        logger.info("Staging files: %s", ", ".join(group.files))
        self.repository.stage_files(list(group.files))  # type: ignore[attr-defined]
        logger.info("Creating commit: %s", group.commit_message)
        self.repository.commit(  # type: ignore[attr-defined]
            group.commit_message,
            self.author.name,
            self.author.email,
        )

    def _unstage_failed(self, index: int, group: CommitGroup, cause: Exception) -> None:
        try:
            self.repository.unstage_files(list(group.files))  # type: ignore[attr-defined]
        except (GitError, OSError) as exc:
            logger.error("Failed to unstage files of group %d: %s", index, exc)
            raise CommitApplyError(index, group, cause) from exc

    def apply(self, groups: Sequence[CommitGroup], config: RunConfig) -> List[GroupOutcome]:
        """Apply ``groups`` in order and return one outcome per group.

        Raises
        ------
        CommitApplyError
            If a group fails to stage or commit while ``auto_approve`` is
            off. Groups after the failing one are not attempted. Also
            raised in auto-approve mode when the files of a failed group
            cannot be unstaged.
        """
        total = len(groups)
        outcomes: List[GroupOutcome] = []
        if config.auto_approve:
            logger.info("Auto-approve enabled: committing all %d group(s)", total)

        for index, group in enumerate(groups, start=1):
            outcome = GroupOutcome(index=index, group=group)
            outcomes.append(outcome)

            if self.display is not None:
                self.display(group, index, total)
            outcome.state = GroupState.DISPLAYED

            if not self._should_commit(config):
                outcome.state = GroupState.SKIPPED
                logger.info("Skipped commit group %d", index)
                continue
            outcome.state = GroupState.CONFIRMED

            if config.dry_run:
                logger.info("[dry-run] Would stage: %s", ", ".join(group.files))
                logger.info("[dry-run] Would commit: %s", group.commit_message)
                outcome.state = GroupState.APPLIED
                outcome.dry_run = True
                continue

            try:
                self._stage_and_commit(group)
            except (GitError, OSError) as exc:
                outcome.state = GroupState.FAILED
                outcome.error = exc
                logger.error("Failed to commit group %d: %s", index, exc)
                self._unstage_failed(index, group, exc)
                if not config.auto_approve:
                    raise CommitApplyError(index, group, exc) from exc
                logger.warning("Continuing with the next group after failure of group %d", index)
                continue

            outcome.state = GroupState.APPLIED
            logger.info("Committed: %s", group.commit_message)

        return outcomes
