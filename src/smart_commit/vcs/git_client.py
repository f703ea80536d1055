"""
Git client implementation for smart_commit.

This module wraps the Git operations required by the commit pipeline:
reading a status snapshot, reading committed and working content,
staging, committing and looking up the author identity. All commands
go through :meth:`GitClient._run` so that unit tests can mock them
easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple

from smart_commit.config.loader import ConfigError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


ABSENT = 0

# Status ordinals, following the usual status-matrix convention.
HEAD_PRESENT = 1
WORKING_SAME_AS_HEAD = 1
WORKING_CHANGED = 2
INDEX_SAME_AS_HEAD = 1
INDEX_SAME_AS_WORKING = 2
INDEX_CHANGED = 3


class FileStatusFlags(NamedTuple):
    """Status of a file in HEAD, the working directory and the index.

    ``head`` is 0 (absent) or 1 (present). ``working`` is 0 (absent),
    1 (same as HEAD) or 2 (different from HEAD). ``index`` is 0
    (absent), 1 (same as HEAD), 2 (same as the working copy) or 3
    (different from both).
    """

    head: int
    working: int
    index: int


@dataclass(frozen=True)
class AuthorIdentity:
    name: str
    email: str


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def flags_from_porcelain(code: str) -> Optional[FileStatusFlags]:
    """Translate a two-letter porcelain status code into status flags.

    Returns ``None`` for ignored entries. Unmerged entries are reported
    as changed in the index so that they count as staged.
    """
    if code == "!!":
        return None
    if code == "??":
        return FileStatusFlags(ABSENT, WORKING_CHANGED, ABSENT)

    x, y = code[0], code[1]
    if "U" in code or code in ("AA", "DD"):
        return FileStatusFlags(HEAD_PRESENT, WORKING_CHANGED, INDEX_CHANGED)

    if code == " A":
        # Intent-to-add entries behave like untracked files.
        return FileStatusFlags(ABSENT, WORKING_CHANGED, ABSENT)

    head = ABSENT if x == "A" else HEAD_PRESENT

    if x == " ":
        index = INDEX_SAME_AS_HEAD
    elif x == "D":
        index = ABSENT
    elif y == " ":
        index = INDEX_SAME_AS_WORKING
    else:
        index = INDEX_CHANGED

    if y == "D" or (x == "D" and y == " "):
        working = ABSENT
    else:
        working = WORKING_CHANGED

    return FileStatusFlags(head, working, index)


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True, binary: bool = False) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        With ``binary=True`` the output is returned as raw bytes.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is
            True, or if ``git`` cannot be executed.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        text_options = {} if binary else {"text": True, "encoding": "utf-8", "errors": "replace"}
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **text_options,
            )
        except OSError as exc:
            logger.error("Failed to execute git: %s", exc)
            raise GitError(f"Failed to execute git: {exc}") from exc

        if check and result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace") if binary else result.stderr
            stdout = "" if binary else result.stdout
            logger.error(
                "Git command failed: %s\nSTDERR: %s",
                " ".join(full_cmd),
                stderr,
            )
            raise GitError(stderr.strip() or stdout.strip() or f"git {args[0]} failed")
        return result

    # ------------------------------------------------------------------
    # Status and content
    # ------------------------------------------------------------------
    def status_snapshot(self) -> List[Tuple[str, FileStatusFlags]]:
        """Return the status flags of every changed file.

        Files identical in HEAD, index and working directory are not
        listed. Renames are reported as a deletion plus an addition.

        Raises
        ------
        GitError
            If the git status command fails.
        """
        result = self._run(
            ["status", "--porcelain=v1", "-z", "--no-renames", "--untracked-files=all"],
            check=True,
        )
        snapshot: List[Tuple[str, FileStatusFlags]] = []
        for entry in result.stdout.split("\0"):
            # Each entry is "XY path"
            if len(entry) < 4:
                continue
            flags = flags_from_porcelain(entry[:2])
            if flags is None:
                continue
            snapshot.append((entry[3:], flags))
        return snapshot

    def read_committed_blob(self, file_path: str) -> bytes:
        """Return the content of ``file_path`` in HEAD.

        Raises
        ------
        GitError
            If the file has no committed version.
        """
        result = self._run(["show", f"HEAD:{file_path}"], check=True, binary=True)
        return result.stdout

    def read_working_file(self, file_path: str) -> bytes:
        """Return the content of ``file_path`` on disk.

        Raises
        ------
        FileNotFoundError
            If the file does not exist in the working directory.
        """
        return (self.repo_root / file_path).read_bytes()

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_files(self, files: List[str]) -> None:
        """Stage the given files for commit.

        For files deleted from disk, ``git rm`` is used; otherwise ``git add``.
        """
        for file in files:
            if (self.repo_root / file).exists():
                self._run(["add", "--", file], check=True)
            else:
                self._run(["rm", "--cached", "--quiet", "--", file], check=True)

    def unstage_files(self, files: List[str]) -> None:
        """Reset the index entries of ``files`` to their HEAD state.

        Files without a committed version are removed from the index.
        """
        if files:
            self._run(["reset", "--quiet", "--", *files], check=True)

    def commit(self, message: str, author_name: str, author_email: str) -> None:
        """Create a commit from the index with the given message and author."""
        self._run(["commit", "-m", message, "--author", f"{author_name} <{author_email}>"], check=True)

    def author_identity(self) -> AuthorIdentity:
        """Return the configured author name and email.

        Raises
        ------
        ConfigError
            If ``user.name`` or ``user.email`` is not configured.
        """
        name = self._run(["config", "user.name"], check=False).stdout.strip()
        email = self._run(["config", "user.email"], check=False).stdout.strip()
        if not name or not email:
            raise ConfigError(
                "Git user.name and user.email must be configured. Run:\n"
                'git config --global user.name "Your Name"\n'
                'git config --global user.email "your.email@example.com"'
            )
        return AuthorIdentity(name=name, email=email)
