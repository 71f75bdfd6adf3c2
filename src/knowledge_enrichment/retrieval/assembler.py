"""Retrieval-augmented question answering over the stored units.

Usage::

    from knowledge_enrichment.retrieval.assembler import RetrievalAssembler

    assembler = RetrievalAssembler()
    response = assembler.chat("What does figure 2 show?")
    print(response.answer)
    for unit in response.supporting_units:
        print(unit.metadata.get("source_name"), unit.metadata.get("page"))

A chat request performs at most one store query and at most one model
call; retries belong to the store / model clients.
"""

from __future__ import annotations

import logging
from typing import Any

from knowledge_enrichment.config import settings
from knowledge_enrichment.models import GROUP_KEY, ContentUnit
from knowledge_enrichment.prompts import build_rag_prompt
from knowledge_enrichment.retrieval.base import VectorStoreBase
from knowledge_enrichment.retrieval.models import ChatResponse, MetadataFilter

logger = logging.getLogger(__name__)

NO_CONTEXT_ANSWER = "No relevant information found to answer your question."


def build_context(units: list[ContentUnit]) -> str:
    """Unit texts, one per line, in store order."""
    return "\n".join(u.text for u in units)


class RetrievalAssembler:
    """Store query → context block → prompt → LLM answer.

    Parameters
    ----------
    store:
        A concrete vector-store backend.  When *None*, a default
        :class:`~knowledge_enrichment.retrieval.chroma_store.ChromaVectorStore`
        is created from the global settings.
    llm:
        Chat model used to answer.  Created lazily so that empty-context
        requests never build a client.
    top_k:
        Number of units requested from the store.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        llm: Any = None,
        *,
        top_k: int = settings.retrieval_k,
    ) -> None:
        if store is None:
            from knowledge_enrichment.retrieval.chroma_store import ChromaVectorStore

            store = ChromaVectorStore()
        self._store = store
        self._llm = llm
        self.top_k = top_k

    @property
    def llm(self) -> Any:
        if self._llm is None:
            from knowledge_enrichment.llm import get_llm

            self._llm = get_llm()
        return self._llm

    def chat(self, question: str, *, group_key: str | None = None) -> ChatResponse:
        """Answer *question* strictly from stored context.

        Parameters
        ----------
        question:
            The user's natural-language question.
        group_key:
            When given, only units ingested under this grouping key are
            considered.

        Returns
        -------
        ChatResponse
            The model's answer and the units used as context, or the
            fixed fallback with no units when nothing matched (no model
            call is made in that case).
        """
        filters = [MetadataFilter.equals(GROUP_KEY, group_key)] if group_key else None
        units = self._store.similarity_search(question, k=self.top_k, filters=filters)

        if not units:
            logger.info("No stored units matched %r; returning fallback answer", question)
            return ChatResponse(answer=NO_CONTEXT_ANSWER, supporting_units=[])

        prompt = build_rag_prompt(build_context(units), question)
        answer = self.llm.invoke(prompt).content
        logger.info("Answered %r from %d unit(s)", question, len(units))
        return ChatResponse(answer=answer, supporting_units=units)
