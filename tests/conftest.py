import pytest


@pytest.fixture(autouse=True)
def isolate_home_config(tmp_path, monkeypatch):
    """Point the Ollama configuration lookup at an empty temporary directory.

    Tests must never read the user's real ``~/.ollama_server`` settings.
    Tests that need a configuration write it into the returned directory.
    """
    config_dir = tmp_path / "ollama_server"
    config_dir.mkdir()
    monkeypatch.setattr("smart_commit.config.loader._get_config_directory", lambda: config_dir)
    return config_dir
