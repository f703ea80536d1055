"""
Client for interacting with an Ollama LLM server.

This client wraps HTTP requests to the Ollama REST API. A single
non-streaming request is made to the ``/api/generate`` endpoint per
call. On error conditions (connection errors, timeouts, HTTP errors,
unexpected bodies), a :class:`LLMError` is raised.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class LLMError(Exception):
    """Raised when communication with the LLM server fails."""

    pass


_THINKING_PATTERNS = [
    r"<think>.*?</think>",
    r"<thinking>.*?</thinking>",
    r"<thought>.*?</thought>",
    r"<reasoning>.*?</reasoning>",
]


def strip_thinking_tags(text: str) -> str:
    """Remove reasoning blocks such as ``<think>...</think>`` from a response.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>[]")
    '[]'
    """
    result = text
    for pattern in _THINKING_PATTERNS:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


@dataclass
class OllamaClient:
    """Client for interacting with an Ollama server.

    Parameters
    ----------
    base_url : str
        Base URL of the Ollama server, e.g. ``"http://localhost"``.
    port : int
        Port number of the Ollama server, e.g. ``11434``.
    model : str
        Name of the model to use for generation, e.g. ``"llama3"``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 60 seconds.
    max_tokens : int, optional
        Maximum number of tokens to generate, passed as ``num_predict``.
    """

    base_url: str
    port: int
    model: str
    request_timeout: float = 60.0
    max_tokens: Optional[int] = None

    def _endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}:{self.port}/api/generate"

    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        """Generate a completion from the model.

        Parameters
        ----------
        prompt : str
            The prompt to send to the model.
        system : str, optional
            System prompt overriding the model's default.

        Returns
        -------
        str
            The generated text with reasoning blocks removed.

        Raises
        ------
        LLMError
            If the request fails or the server returns an error.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }
        if system:
            payload["system"] = system
        if self.max_tokens is not None:
            payload["options"] = {"num_predict": self.max_tokens}

        url = self._endpoint()
        logger.debug("Sending request to LLM at %s (model=%s, %d prompt chars)", url, self.model, len(prompt))
        try:
            response = requests.post(url, json=payload, timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to connect to LLM: %s", exc)
            raise LLMError(str(exc)) from exc

        if response.status_code != 200:
            logger.error("LLM returned non-200 status %s: %s", response.status_code, response.text)
            raise LLMError(f"LLM returned status {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Failed to parse LLM response: %s", exc)
            raise LLMError("Failed to parse LLM response") from exc

        if isinstance(data, dict):
            if isinstance(data.get("response"), str):
                return strip_thinking_tags(data["response"])
            message = data.get("message")
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                return strip_thinking_tags(message["content"])
        raise LLMError("Unexpected response structure from LLM")
