"""
Configuration loading for smart_commit.

Two kinds of configuration are read here:

* The Ollama server settings, stored as JSON in
  ``~/.ollama_server/.ollama_config.json``. A missing, malformed or
  incomplete file raises :class:`ConfigError`.
* The optional grouping rules, a plain-text file whose stripped contents
  are handed to the language model as free-form guidance. An explicitly
  requested rules file must exist; the default ``.smartcommit-rules`` at
  the repository root is optional.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE_NAME = ".ollama_config.json"
DEFAULT_RULES_FILE_NAME = ".smartcommit-rules"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the Ollama configuration file."""
    return Path.home() / ".ollama_server"


def load_config() -> Dict[str, Any]:
    """Load and validate the Ollama configuration.

    Returns:
        A dictionary with the keys:
        - base_url (str): The base URL of the Ollama server
        - port (int): The port number
        - model (str): The model name
        - request_timeout (int|float, optional): Request timeout in seconds
        - max_tokens (int, optional): Maximum tokens for generation

    Raises:
        ConfigError: If the configuration file is missing, malformed, or invalid.
    """
    config_dir = _get_config_directory()
    config_path = config_dir / CONFIG_FILE_NAME

    if not config_path.exists():
        logger.error("Configuration file '%s' does not exist", config_path)
        raise ConfigError(
            f"Missing Ollama configuration file: {config_path}. "
            f"Create it with at least 'base_url', 'port' and 'model'."
        )

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    required_keys = ["base_url", "port", "model"]
    missing = [key for key in required_keys if key not in data]
    if missing:
        logger.error("Configuration file missing required keys: %s", missing)
        raise ConfigError(f"Missing required configuration keys: {', '.join(missing)}")

    if not isinstance(data["base_url"], str):
        raise ConfigError("'base_url' must be a string")
    # bool is an int subclass but never a valid port
    if not isinstance(data["port"], int) or isinstance(data["port"], bool):
        raise ConfigError("'port' must be an integer")
    if not isinstance(data["model"], str):
        raise ConfigError("'model' must be a string")

    if "request_timeout" in data and not isinstance(data["request_timeout"], (int, float)):
        raise ConfigError("'request_timeout' must be a number")
    if "max_tokens" in data and not isinstance(data["max_tokens"], int):
        raise ConfigError("'max_tokens' must be an integer")

    logger.debug("Loaded Ollama configuration from: %s", config_path)
    return data


def load_rules(repo_root: Path, rules_path: Optional[Path] = None) -> str:
    """Load the grouping rules text.

    Parameters
    ----------
    repo_root : Path
        Repository root, searched for the default rules file.
    rules_path : Path, optional
        Explicit rules file. It must exist and be readable.

    Returns
    -------
    str
        The stripped rules text, or ``""`` when no default file exists.

    Raises
    ------
    ConfigError
        If an explicitly requested rules file cannot be read.
    """
    if rules_path is not None:
        try:
            text = Path(rules_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read rules file %s: %s", rules_path, exc)
            raise ConfigError(f"Cannot read rules file {rules_path}: {exc}") from exc
        logger.debug("Loaded rules from %s", rules_path)
        return text.strip()

    default_path = repo_root / DEFAULT_RULES_FILE_NAME
    if not default_path.is_file():
        return ""
    try:
        text = default_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read rules file %s: %s", default_path, exc)
        raise ConfigError(f"Cannot read rules file {default_path}: {exc}") from exc
    logger.debug("Loaded rules from %s", default_path)
    return text.strip()
