"""
Language model integration for smart_commit.

This package contains the :class:`OllamaClient` for communicating with
an Ollama LLM server and the :class:`CommitPlanner` which asks the
language model to group changes into commits.
"""

from .ollama_client import OllamaClient, LLMError  # noqa: F401
from .commit_planner import CommitPlanner, PlanParseError, parse_commit_groups  # noqa: F401
