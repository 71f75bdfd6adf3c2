"""Figure references in page text, and their LLM descriptions.

Detection is a regex heuristic that favours recall over precision: the
word "Figure" used in prose produces an extra record, whereas a
missed figure is lost from the index for good.  The detector is a
pluggable strategy so a learned detector can replace it without touching
the page analyser.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Protocol

from knowledge_enrichment.config import settings
from knowledge_enrichment.models import FigureRecord
from knowledge_enrichment.prompts import build_figure_prompt

logger = logging.getLogger(__name__)

FIGURE_PATTERN = re.compile(
    r"\b(Figure|Figs?\.?|Chart|Table|Image|Graph|Diagram|Illustration)s?(?![a-z])"
    r"\s*(\d+)?[.:]?\s*([^\n.]+)",
    re.IGNORECASE,
)

# Caption-like context for an embedded image. Case-sensitive.
IMAGE_CONTEXT_PATTERN = re.compile(r"(Figure|Fig\.?|Chart|Table|Image)\s+\d+[.:]\s*([^\n.]+)")

_KIND_ALIASES = {"fig": "figure", "fig.": "figure", "figs": "figure", "figs.": "figure"}


class FigureDetector(Protocol):
    """Strategy interface: page text in, figure records out (scan order)."""

    def detect_figures(self, text: str) -> list[FigureRecord]: ...


class RegexFigureDetector:
    """Default detector built on :data:`FIGURE_PATTERN`."""

    def __init__(self, pattern: re.Pattern[str] = FIGURE_PATTERN) -> None:
        self.pattern = pattern

    def detect_figures(self, text: str) -> list[FigureRecord]:
        records: list[FigureRecord] = []
        for match in self.pattern.finditer(text or ""):
            kind = match.group(1).lower()
            caption = match.group(3).strip()
            if not caption:
                continue
            records.append(
                FigureRecord(kind=_KIND_ALIASES.get(kind, kind), caption=caption, number=match.group(2))
            )
        return records


def summarize_context(text: str, max_chars: int = settings.max_context_chars) -> str:
    """Bound *text* to a prompt-sized preview without a tokenizer."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars].strip() + "..."


def extract_image_context(page_text: str, max_chars: int = settings.max_context_chars) -> str:
    """Context to pair with an image: the first caption on the page, else a preview."""
    if not page_text or not page_text.strip():
        return ""
    match = IMAGE_CONTEXT_PATTERN.search(page_text)
    return match.group(0) if match else summarize_context(page_text, max_chars)


class FigureDescriber:
    """Asks the LLM to describe a figure known only from its caption.

    Never raises: on a failed or blank model call the description is the
    literal ``"{kind} on the page: {caption}"``.
    """

    def __init__(self, llm: Any = None, *, max_context_chars: int = settings.max_context_chars) -> None:
        self._llm = llm
        self.max_context_chars = max_context_chars

    @property
    def llm(self) -> Any:
        if self._llm is None:
            from knowledge_enrichment.llm import get_llm

            self._llm = get_llm()
        return self._llm

    def describe(self, figure: FigureRecord, page_text: str) -> str:
        fallback = f"{figure.kind} on the page: {figure.caption}"
        prompt = build_figure_prompt(
            figure.kind,
            figure.number,
            figure.caption,
            summarize_context(page_text, self.max_context_chars),
        )
        try:
            description = self.llm.invoke(prompt).content
        except Exception as exc:
            logger.warning("LLM figure description failed: %s", exc)
            return fallback
        if not isinstance(description, str) or not description.strip():
            return fallback
        return description
