"""
Commit grouping using an LLM.

This module provides the :class:`CommitPlanner` class, which sends the
full list of change records to the Ollama LLM (via
:class:`OllamaClient`) in a single request and turns the answer into
:class:`CommitGroup` objects. The model is asked to reply with a JSON
array of ``{"files": [...], "commitMessage": "..."}`` objects; any
other reply raises :class:`PlanParseError` before anything is staged.
"""

from __future__ import annotations

import json
import logging
import math
import re
from textwrap import dedent
from typing import Any, Iterable, List, Optional, Sequence

from smart_commit.diff.models import ChangeRecord
from smart_commit.grouping.group_model import CommitGroup
from smart_commit.llm.ollama_client import OllamaClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Rough average for English text and code.
CHARS_PER_TOKEN = 4

SYSTEM_PROMPT = dedent(
    """
    You are a git assistant that analyzes code changes and groups them into
    coherent commits with short, accurate Conventional Commit messages.

    You receive a JSON array of changed files. Each entry has "filename",
    "changeType" (untracked, added, modified or deleted), "diffText" and
    "isBinary". In "diffText", lines starting with "-" were removed, lines
    starting with "+" were added and lines starting with a space are unchanged.

    RULES:
    1. Files with changeType "modified" change existing code. Use only
       "refactor", "fix" or "chore" and verbs such as update, improve,
       change, adjust, fix. Never describe them as new features.
    2. Files with changeType "added" or "untracked" are new. Use "feat" only
       when they add genuinely new functionality.
    3. Files with changeType "deleted" use "chore" or "refactor".
    4. Every file must appear in exactly one group.

    Reply with ONLY a JSON array and no other text, for example:
    [{"files": ["src/app.py"], "commitMessage": "refactor(app): simplify startup"}]
    """
).strip()


class PlanParseError(Exception):
    """Raised when the LLM reply is not a valid list of commit groups."""

    pass


_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n(.*?)\n?```$", re.DOTALL)


def _strip_code_fence(text: str) -> str:
    match = _FENCE_RE.match(text.strip())
    return match.group(1) if match else text.strip()


def _parse_group(position: int, item: Any) -> CommitGroup:
    if not isinstance(item, dict):
        raise PlanParseError(f"Group {position} is not an object")
    files = item.get("files")
    message = item.get("commitMessage")
    if not isinstance(files, list) or not files or not all(isinstance(f, str) for f in files):
        raise PlanParseError(f"Group {position} must have a non-empty 'files' list of strings")
    if not isinstance(message, str) or not message.strip():
        raise PlanParseError(f"Group {position} must have a non-empty 'commitMessage' string")
    return CommitGroup(files=list(files), commit_message=message.strip())


def parse_commit_groups(raw: str, known_files: Optional[Iterable[str]] = None) -> List[CommitGroup]:
    """Parse the LLM reply into commit groups.

    Parameters
    ----------
    raw : str
        The model's reply. A single surrounding Markdown code fence is
        tolerated.
    known_files : Iterable[str], optional
        Filenames that were sent to the model. When given, every group
        file must be one of them and may appear in only one group.

    Returns
    -------
    List[CommitGroup]
        Groups in the order proposed by the model.

    Raises
    ------
    PlanParseError
        If the reply is not valid JSON or does not have the expected shape.
    """
    try:
        data = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as exc:
        raise PlanParseError(f"Failed to parse AI response: {exc}") from exc

    if not isinstance(data, list):
        raise PlanParseError("Failed to parse AI response: expected a JSON array of commit groups")

    groups = [_parse_group(position, item) for position, item in enumerate(data, start=1)]

    if known_files is not None:
        allowed = set(known_files)
        seen = set()
        for position, group in enumerate(groups, start=1):
            for file in group.files:
                if file not in allowed:
                    raise PlanParseError(f"Group {position} references unknown file '{file}'")
                if file in seen:
                    raise PlanParseError(f"File '{file}' appears in more than one group")
                seen.add(file)

    return groups


class CommitPlanner:
    """Ask the LLM to group change records into commits."""

    def __init__(self, ollama_client: OllamaClient) -> None:
        self.ollama_client = ollama_client

    def build_prompt(
        self,
        records: Sequence[ChangeRecord],
        extra_context: str = "",
        rules: str = "",
    ) -> str:
        """Construct the user prompt for a grouping request.

        The change records are serialised as JSON, followed by the
        optional additional context and user rules.
        """
        parts = [json.dumps([record.to_dict() for record in records], indent=2)]
        if extra_context.strip():
            parts.append(f"Additional context:\n{extra_context.strip()}")
        if rules.strip():
            parts.append(f"User rules (follow these when grouping and writing messages):\n{rules.strip()}")
        return "\n\n".join(parts)

    @staticmethod
    def estimate_tokens(text: str) -> int:
        return math.ceil(len(text) / CHARS_PER_TOKEN)

    def estimate_request_tokens(
        self,
        records: Sequence[ChangeRecord],
        extra_context: str = "",
        rules: str = "",
    ) -> int:
        """Estimate the size of the grouping request, system prompt included."""
        prompt = self.build_prompt(records, extra_context, rules)
        return self.estimate_tokens(SYSTEM_PROMPT) + self.estimate_tokens(prompt)

    def request_groups(
        self,
        records: Sequence[ChangeRecord],
        extra_context: str = "",
        rules: str = "",
    ) -> str:
        """Send the grouping request and return the raw reply.

        Raises
        ------
        LLMError
            If the request fails.
        """
        prompt = self.build_prompt(records, extra_context, rules)
        logger.debug("Requesting commit groups for %d file(s)", len(records))
        return self.ollama_client.generate(prompt, system=SYSTEM_PROMPT)

    def plan(
        self,
        records: Sequence[ChangeRecord],
        extra_context: str = "",
        rules: str = "",
    ) -> List[CommitGroup]:
        """Request and parse commit groups for ``records``.

        Raises
        ------
        LLMError
            If the request fails.
        PlanParseError
            If the reply cannot be parsed or references unknown files.
        """
        raw = self.request_groups(records, extra_context, rules)
        groups = parse_commit_groups(raw, known_files=[record.filename for record in records])
        logger.debug("LLM proposed %d commit group(s)", len(groups))
        return groups
