"""Text chunking in two phases.

1. :func:`chunk_documents` — token-bounded windows with overlap.  Tokens
   are *estimated* (≈4 chars/token), so no tokenizer has to be downloaded.
2. :func:`normalize_chunk_sizes` — a hard character ceiling required by
   the storage backend.  It is independent of phase 1: the
   ceiling is a storage contract and must hold whatever the estimator's
   error.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from langchain_text_splitters import RecursiveCharacterTextSplitter

from knowledge_enrichment.config import settings
from knowledge_enrichment.models import ContentUnit

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough token count: ``ceil(len / 4)``."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def chunk_documents(
    documents: list[Document],
    chunk_size: int = settings.chunk_size,
    chunk_overlap: int = settings.chunk_overlap,
    min_chunk_chars: int = settings.min_chunk_chars,
) -> list[Document]:
    """Split *documents* into overlapping, token-bounded chunks.

    Parameters
    ----------
    documents:
        Source documents produced by a loader.
    chunk_size:
        Maximum number of estimated tokens per chunk.
    chunk_overlap:
        Number of estimated tokens shared by consecutive chunks.
    min_chunk_chars:
        Chunks whose stripped text is shorter than this are dropped as noise.

    Returns
    -------
    list[Document]
        Chunked documents; each inherits its source document's metadata.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})")

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=estimate_tokens,
        separators=["\n\n", "\n", ". ", " ", ""],
    )
    chunks = splitter.split_documents(documents)
    kept = [c for c in chunks if len(c.page_content.strip()) >= min_chunk_chars]
    if len(kept) < len(chunks):
        logger.debug("Dropped %d chunk(s) shorter than %d chars", len(chunks) - len(kept), min_chunk_chars)
    return kept


def normalize_chunk_sizes(
    units: list[ContentUnit],
    max_chars: int = settings.max_chunk_chars,
    window_chars: int = settings.chunk_window_chars,
) -> list[ContentUnit]:
    """Enforce ``len(text) <= max_chars`` on every unit.

    Oversized units are re-split into consecutive *window_chars* windows
    (the last may be shorter), each with a copy of the original metadata.
    Concatenating the windows gives back the original text.
    """
    if window_chars <= 0 or window_chars > max_chars:
        raise ValueError(f"window_chars ({window_chars}) must be in 1..max_chars ({max_chars})")

    normalized: list[ContentUnit] = []
    for unit in units:
        if len(unit.text) <= max_chars:
            normalized.append(unit)
            continue
        for start in range(0, len(unit.text), window_chars):
            normalized.append(
                ContentUnit(text=unit.text[start : start + window_chars], metadata=dict(unit.metadata))
            )
    return normalized
