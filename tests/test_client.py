"""Tests for recipe_extract.extraction.client.

Mocking strategy:
- ``_get_llm`` is patched with a MagicMock so no provider is contacted.
- Provider construction is checked by patching the LangChain chat classes at
  their import location.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from langchain_core.messages import HumanMessage, SystemMessage

from recipe_extract.config import settings
from recipe_extract.extraction.client import TEMPERATURE, LLMExtractionClient, _get_llm
from recipe_extract.extraction.models import ExtractionPrompt

_PROMPT = ExtractionPrompt(system_instruction="You extract recipes.", user_prompt="Content:\nflour")


def _mock_llm(content) -> MagicMock:
    llm = MagicMock()
    llm.invoke.return_value = SimpleNamespace(content=content)
    return llm


class TestLLMExtractionClient:
    def test_returns_raw_text(self) -> None:
        llm = _mock_llm('{"title": "Bread"}')
        with patch("recipe_extract.extraction.client._get_llm", return_value=llm):
            result = LLMExtractionClient().extract(_PROMPT)

        assert result == '{"title": "Bread"}'

    def test_sends_system_and_user_messages(self) -> None:
        llm = _mock_llm("{}")
        with patch("recipe_extract.extraction.client._get_llm", return_value=llm):
            LLMExtractionClient().extract(_PROMPT)

        messages = llm.invoke.call_args[0][0]
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == "You extract recipes."
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "Content:\nflour"

    def test_content_blocks_joined(self) -> None:
        llm = _mock_llm([{"type": "text", "text": '{"a": '}, {"type": "text", "text": "1}"}])
        with patch("recipe_extract.extraction.client._get_llm", return_value=llm):
            assert LLMExtractionClient().extract(_PROMPT) == '{"a": 1}'

    def test_empty_response_returns_none(self) -> None:
        llm = _mock_llm("   ")
        with patch("recipe_extract.extraction.client._get_llm", return_value=llm):
            assert LLMExtractionClient().extract(_PROMPT) is None

    def test_engine_error_returns_none(self) -> None:
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("rate limited")
        with patch("recipe_extract.extraction.client._get_llm", return_value=llm):
            assert LLMExtractionClient().extract(_PROMPT) is None


class TestGetLlm:
    def test_openai_json_mode(self) -> None:
        with patch.object(settings, "llm_provider", "openai"), \
             patch("langchain_openai.ChatOpenAI") as chat_cls:
            llm = _get_llm()

        kwargs = chat_cls.call_args.kwargs
        assert kwargs["model"] == settings.openai_chat_model
        assert kwargs["temperature"] == TEMPERATURE
        chat_cls.return_value.bind.assert_called_once_with(response_format={"type": "json_object"})
        assert llm is chat_cls.return_value.bind.return_value

    def test_ollama_json_mode(self) -> None:
        with patch.object(settings, "llm_provider", "ollama"), \
             patch("langchain_ollama.ChatOllama") as chat_cls:
            llm = _get_llm()

        kwargs = chat_cls.call_args.kwargs
        assert kwargs["format"] == "json"
        assert kwargs["base_url"] == settings.ollama_base_url
        assert kwargs["temperature"] == TEMPERATURE
        assert llm is chat_cls.return_value
