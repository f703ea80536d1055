import dataclasses
import unittest

from smart_commit.grouping.group_model import CommitGroup, RunConfig


class TestGroupModel(unittest.TestCase):
    def test_commit_group_dataclass(self) -> None:
        group = CommitGroup(files=["a.py", "b.py"], commit_message="refactor(a): tidy helpers")
        self.assertEqual(group.files, ["a.py", "b.py"])
        self.assertTrue(group.commit_message.startswith("refactor"))

    def test_run_config_defaults(self) -> None:
        config = RunConfig()
        self.assertFalse(config.auto_approve)
        self.assertFalse(config.dry_run)
        self.assertFalse(config.verbose)

    def test_run_config_is_immutable(self) -> None:
        config = RunConfig(auto_approve=True)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.dry_run = True  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
