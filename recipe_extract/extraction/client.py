"""Completion-engine access for recipe extraction.

Engine providers
----------------
``openai`` (default)
    ``langchain_openai.ChatOpenAI`` bound to the JSON-object response format.
    Requires ``OPENAI_API_KEY``; configure the model via ``OPENAI_CHAT_MODEL``.

``ollama``
    ``langchain_ollama.ChatOllama`` in JSON mode against ``OLLAMA_BASE_URL``.

Set ``LLM_PROVIDER=ollama`` in your ``.env`` to switch providers.

Any object with a matching ``extract`` method can stand in for
:class:`LLMExtractionClient`; the pipeline never talks to a global client.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from langchain_core.messages import HumanMessage, SystemMessage

from recipe_extract.config import settings
from recipe_extract.extraction.models import ExtractionPrompt

logger = logging.getLogger(__name__)

TEMPERATURE = 0.2


class ExtractionClient(Protocol):
    def extract(self, prompt: ExtractionPrompt) -> str | None:
        """Return the engine's raw JSON text, or ``None`` when it yields nothing."""
        ...


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def _get_llm() -> Any:
    """Return a JSON-mode LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(
            model=settings.openai_chat_model,
            temperature=TEMPERATURE,
            timeout=settings.llm_timeout,
            max_retries=0,
        )
        return llm.bind(response_format={"type": "json_object"})

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        base_url=settings.ollama_base_url,
        temperature=TEMPERATURE,
        format="json",
    )


def _content_text(content: Any) -> str:
    """Flatten LangChain message content (a string or a list of blocks)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class LLMExtractionClient:
    """Single-shot, non-streaming extraction call through LangChain."""

    def extract(self, prompt: ExtractionPrompt) -> str | None:
        messages = [
            SystemMessage(content=prompt.system_instruction),
            HumanMessage(content=prompt.user_prompt),
        ]
        logger.info(
            "Sending extraction request (%s, prompt length %d)",
            settings.llm_provider, len(prompt.user_prompt),
        )
        try:
            response = _get_llm().invoke(messages)
        except Exception:
            logger.error("Completion engine call failed", exc_info=True)
            return None

        raw = response.content if hasattr(response, "content") else response
        text = _content_text(raw).strip()
        if not text:
            logger.error("Empty response from completion engine")
            return None

        logger.debug("Received %d characters from completion engine", len(text))
        return text
