"""Captioner — image + nearby text → short description from a vision model."""

from __future__ import annotations

import logging
from typing import Any

from knowledge_enrichment.prompts import build_caption_message

logger = logging.getLogger(__name__)


def placeholder_caption(page_number: int) -> str:
    """Deterministic description used whenever the vision model fails."""
    return f"Image on page {page_number} of the document."


class Captioner:
    """Vision-model captioning helper.

    Parameters
    ----------
    llm:
        A LangChain chat model accepting multimodal ``HumanMessage``
        content.  When *None*, :func:`~knowledge_enrichment.llm.get_vision_llm`
        is used on first call.
    """

    def __init__(self, llm: Any = None) -> None:
        self._llm = llm

    @property
    def llm(self) -> Any:
        if self._llm is None:
            from knowledge_enrichment.llm import get_vision_llm

            self._llm = get_vision_llm()
        return self._llm

    def caption(self, image_png: bytes, page_number: int, context: str = "") -> str:
        """Describe *image_png* in 2-3 sentences.

        Never raises; blank answers and invocation errors both yield
        :func:`placeholder_caption`.
        """
        try:
            messages = build_caption_message(image_png, page_number, context)
            result = self.llm.invoke(messages).content
        except Exception as exc:
            logger.warning("LLM image description failed on page %d: %s", page_number, exc)
            return placeholder_caption(page_number)

        if not isinstance(result, str) or not result.strip():
            return placeholder_caption(page_number)
        return result
