import json
import unittest
from types import SimpleNamespace
from unittest.mock import Mock, patch

import requests

from smart_commit.llm.ollama_client import LLMError, OllamaClient, strip_thinking_tags


class DummyResponse(SimpleNamespace):
    def json(self):
        return json.loads(self.text)


class TestOllamaClient(unittest.TestCase):
    def test_generate_success(self) -> None:
        def fake_post(url, *_args, **kwargs):
            return DummyResponse(status_code=200, text=json.dumps({"response": "Hello"}))

        with patch("requests.post", fake_post):
            client = OllamaClient("http://localhost", 11434, "model")
            self.assertEqual(client.generate("prompt"), "Hello")

    def test_generate_payload(self) -> None:
        mock_post = Mock(return_value=DummyResponse(status_code=200, text=json.dumps({"response": "[]"})))
        with patch("requests.post", mock_post):
            client = OllamaClient("http://localhost/", 11434, "llama3", request_timeout=5, max_tokens=256)
            client.generate("prompt", system="be brief")

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "http://localhost:11434/api/generate")
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(
            kwargs["json"],
            {
                "model": "llama3",
                "prompt": "prompt",
                "stream": False,
                "system": "be brief",
                "options": {"num_predict": 256},
            },
        )

    def test_generate_chat_style_body(self) -> None:
        body = {"message": {"role": "assistant", "content": "<think>hmm</think>[]"}}
        with patch("requests.post", return_value=DummyResponse(status_code=200, text=json.dumps(body))):
            client = OllamaClient("http://localhost", 11434, "model")
            self.assertEqual(client.generate("prompt"), "[]")

    def test_generate_error_status(self) -> None:
        with patch("requests.post", return_value=DummyResponse(status_code=500, text="Internal error")):
            client = OllamaClient("http://localhost", 11434, "model")
            with self.assertRaises(LLMError):
                client.generate("prompt")

    def test_generate_invalid_json(self) -> None:
        with patch("requests.post", return_value=DummyResponse(status_code=200, text="not json")):
            client = OllamaClient("http://localhost", 11434, "model")
            with self.assertRaises(LLMError):
                client.generate("prompt")

    def test_generate_unexpected_structure(self) -> None:
        with patch("requests.post", return_value=DummyResponse(status_code=200, text=json.dumps({"done": True}))):
            client = OllamaClient("http://localhost", 11434, "model")
            with self.assertRaises(LLMError):
                client.generate("prompt")

    def test_generate_connection_error(self) -> None:
        with patch("requests.post", side_effect=requests.ConnectionError("refused")):
            client = OllamaClient("http://localhost", 11434, "model")
            with self.assertRaises(LLMError) as ctx:
                client.generate("prompt")
        self.assertIn("refused", str(ctx.exception))


class TestStripThinkingTags(unittest.TestCase):
    def test_removes_all_known_tags(self) -> None:
        text = "<think>a</think><THINKING>b\nc</THINKING><thought>d</thought><reasoning>e</reasoning>\n[1]"
        self.assertEqual(strip_thinking_tags(text), "[1]")

    def test_leaves_plain_text_untouched(self) -> None:
        self.assertEqual(strip_thinking_tags("  plain  "), "plain")


if __name__ == "__main__":
    unittest.main()
