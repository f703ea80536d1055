"""Status snapshot to commits, with in-memory collaborators."""

import json
import unittest
from unittest.mock import Mock

from smart_commit.diff.diff_extractor import extract_diffs
from smart_commit.diff.models import ChangeStatus, FileStatusFlags
from smart_commit.grouping.commit_engine import GroupCommitEngine, GroupState
from smart_commit.grouping.group_model import RunConfig
from smart_commit.llm.commit_planner import CommitPlanner
from smart_commit.vcs.git_client import AuthorIdentity, GitError
from smart_commit.workflow import check_preconditions, find_unstaged_changes


class InMemoryRepository:
    def __init__(self):
        self.committed = {"a.txt": b"hello\nworld"}
        self.working = {"a.txt": b"hello\nthere", "b.png": b"\x89PNG\r\n\x1a\n\x00"}
        self.calls = []

    def status_snapshot(self):
        return [
            ("a.txt", FileStatusFlags(1, 2, 1)),
            ("b.png", FileStatusFlags(0, 2, 0)),
        ]

    def read_committed_blob(self, path):
        if path not in self.committed:
            raise GitError("missing")
        return self.committed[path]

    def read_working_file(self, path):
        return self.working[path]

    def stage_files(self, files):
        self.calls.append(("stage", tuple(files)))

    def unstage_files(self, files):
        self.calls.append(("unstage", tuple(files)))

    def commit(self, message, author_name, author_email):
        self.calls.append(("commit", message))


class TestEndToEnd(unittest.TestCase):
    def test_snapshot_to_commits(self) -> None:
        repo = InMemoryRepository()
        snapshot = repo.status_snapshot()
        self.assertIsNone(check_preconditions(snapshot))

        records = extract_diffs(repo, find_unstaged_changes(snapshot))
        self.assertEqual([r.filename for r in records], ["a.txt", "b.png"])
        self.assertEqual(records[0].status, ChangeStatus.MODIFIED)
        self.assertEqual(records[0].diff_text, " hello\n-world\n+there")
        self.assertTrue(records[1].is_binary)
        self.assertTrue(records[1].diff_text.startswith("Binary file"))

        oracle = Mock()
        oracle.generate.return_value = json.dumps([
            {"files": ["a.txt"], "commitMessage": "fix(a): update greeting"},
            {"files": ["b.png"], "commitMessage": "feat: add logo"},
        ])
        groups = CommitPlanner(oracle).plan(records)

        engine = GroupCommitEngine(repo, AuthorIdentity("Ada", "ada@example.com"))
        outcomes = engine.apply(groups, RunConfig(auto_approve=True))

        self.assertEqual(
            repo.calls,
            [
                ("stage", ("a.txt",)),
                ("commit", "fix(a): update greeting"),
                ("stage", ("b.png",)),
                ("commit", "feat: add logo"),
            ],
        )
        self.assertTrue(all(o.state is GroupState.APPLIED for o in outcomes))


if __name__ == "__main__":
    unittest.main()
