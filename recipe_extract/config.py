"""Centralised settings for the recipe extraction pipeline.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "15.0"))
    )
    fetch_max_bytes: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_MAX_BYTES", str(10 * 1024 * 1024)))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("FETCH_USER_AGENT", _DEFAULT_USER_AGENT)
    )

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------
    prompt_content_limit: int = field(
        default_factory=lambda: int(os.environ.get("PROMPT_CONTENT_LIMIT", "60000"))
    )

    # ------------------------------------------------------------------
    # Completion engine
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    llm_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "120.0"))
    )

    # ------------------------------------------------------------------
    # Normalizer
    # ------------------------------------------------------------------
    default_image_url: str = field(
        default_factory=lambda: os.environ.get("DEFAULT_IMAGE_URL", "default-recipe.jpg")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )


# Module-level singleton; import this everywhere:
#   from recipe_extract.config import settings
settings = Settings()


def configure_logging() -> None:
    """Apply ``settings.log_level`` to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
