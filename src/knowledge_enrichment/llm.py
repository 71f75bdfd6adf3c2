"""LLM initialisation — single place to swap providers.

Supports two modes:

1. **OpenAI cloud** (default) — set ``OPENAI_API_KEY``.
2. **OpenAI-compatible endpoint** — set ``LLM_BASE_URL`` to a local model
   runner or vLLM service.  Those expose ``/v1/chat/completions``, so
   ``ChatOpenAI`` works unchanged.

The vision-capable model is the same client pointed at
``VISION_MODEL_NAME`` (falling back to ``LLM_MODEL_NAME``).
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI

from knowledge_enrichment.config import settings

logger = logging.getLogger(__name__)


def _build_chat_model(model: str, temperature: float) -> ChatOpenAI:
    kwargs: dict = {
        "model": model,
        "temperature": temperature,
        "timeout": settings.llm_timeout,
    }

    if settings.llm_base_url:
        logger.info("Using OpenAI-compatible endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
        # Local runners don't need a real key; LangChain requires a non-empty value.
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(**kwargs)


def get_llm(temperature: float = 0.0) -> ChatOpenAI:
    """Return the configured text chat model."""
    return _build_chat_model(settings.llm_model_name, temperature)


def get_vision_llm(temperature: float = 0.0) -> ChatOpenAI:
    """Return the chat model used for image captioning."""
    return _build_chat_model(settings.vision_model_name or settings.llm_model_name, temperature)
