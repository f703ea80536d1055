import json

import pytest

from smart_commit.config.loader import ConfigError, load_config, load_rules


def write_config(config_dir, data):
    (config_dir / ".ollama_config.json").write_text(json.dumps(data), encoding="utf-8")


def test_load_config_success(isolate_home_config):
    write_config(isolate_home_config, {
        "base_url": "http://localhost",
        "port": 11434,
        "model": "llama3",
        "request_timeout": 30,
        "max_tokens": 512,
    })
    result = load_config()
    assert result["base_url"] == "http://localhost"
    assert result["port"] == 11434
    assert result["model"] == "llama3"
    assert result["request_timeout"] == 30
    assert result["max_tokens"] == 512


def test_load_config_missing_file():
    with pytest.raises(ConfigError, match="Missing Ollama configuration file"):
        load_config()


def test_load_config_invalid_json(isolate_home_config):
    (isolate_home_config / ".ollama_config.json").write_text("{invalid}")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_config()


@pytest.mark.parametrize(
    "data, message",
    [
        ({"base_url": "http://", "port": 1}, "model"),
        ([1, 2, 3], "JSON object"),
        ({"base_url": 1, "port": 1, "model": "m"}, "base_url"),
        ({"base_url": "http://", "port": "11434", "model": "m"}, "port"),
        ({"base_url": "http://", "port": True, "model": "m"}, "port"),
        ({"base_url": "http://", "port": 1, "model": None}, "model"),
        ({"base_url": "http://", "port": 1, "model": "m", "request_timeout": "fast"}, "request_timeout"),
        ({"base_url": "http://", "port": 1, "model": "m", "max_tokens": 1.5}, "max_tokens"),
    ],
)
def test_load_config_invalid_values(isolate_home_config, data, message):
    write_config(isolate_home_config, data)
    with pytest.raises(ConfigError, match=message):
        load_config()


def test_load_rules_default_file(tmp_path):
    (tmp_path / ".smartcommit-rules").write_text("\n  Keep docs separate.  \n", encoding="utf-8")
    assert load_rules(tmp_path) == "Keep docs separate."


def test_load_rules_default_file_absent(tmp_path):
    assert load_rules(tmp_path) == ""


def test_load_rules_explicit_path(tmp_path):
    rules = tmp_path / "my-rules.txt"
    rules.write_text("One commit per package\n", encoding="utf-8")
    (tmp_path / ".smartcommit-rules").write_text("ignored", encoding="utf-8")
    assert load_rules(tmp_path, rules) == "One commit per package"


def test_load_rules_explicit_path_missing(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read rules file"):
        load_rules(tmp_path, tmp_path / "nope.txt")
