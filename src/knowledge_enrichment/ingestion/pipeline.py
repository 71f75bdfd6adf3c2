"""LangGraph ingestion workflow — one upload in, stored units out.

Graph topology::

      ┌────────┐
      │ parse  │── markdown ──────────┐
      └───┬────┘                      │
          │ pdf                       │
          ▼                           │
      ┌────────┐                      │
      │analyze │  (parallel per page) │
      └───┬────┘                      │
          ▼                           │
      ┌────────┐◄─────────────────────┘
      │ chunk  │
      └───┬────┘
          ▼
      ┌──────────┐
      │normalize │
      └───┬──────┘
          ▼
      ┌────────┐
      │  tag   │
      └───┬────┘
          ▼
      ┌────────┐
      │ store  │
      └───┬────┘
          ▼
       [ END ]

Only ``parse`` can fail the request (:class:`DocumentParseError`,
:class:`UnsupportedDocumentError`); every later stage degrades instead.
Nothing reaches the store before the ``store`` node, so an aborted
request leaves the store untouched.
"""

from __future__ import annotations

import logging
from typing import TypedDict

from langchain_core.documents import Document
from langgraph.graph import END, StateGraph

from knowledge_enrichment.config import settings
from knowledge_enrichment.ingestion.analyzer import DocumentAnalyzer
from knowledge_enrichment.ingestion.chunker import chunk_documents, normalize_chunk_sizes
from knowledge_enrichment.ingestion.loader import (
    detect_document_type,
    load_markdown,
    load_pdf_pages,
    parse_pdf,
)
from knowledge_enrichment.ingestion.tagging import tag_units
from knowledge_enrichment.models import ContentUnit
from knowledge_enrichment.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class IngestionState(TypedDict, total=False):
    """State flowing through the ingestion graph.

    Attributes
    ----------
    group_key:
        Caller-supplied identifier correlating all units of one batch.
    source_name:
        Original filename of the upload.
    raw_bytes:
        The uploaded document.
    document_type:
        ``"pdf"`` or ``"markdown"``, set by ``parse``.
    body_documents:
        Extracted body text (one document per PDF page or Markdown section).
    figure_units:
        Image-caption and figure-description units from ``analyze``.
    units:
        Units being chunked, normalised, and tagged on their way to storage.
    stored_count:
        Number of units handed to the store.
    """

    group_key: str
    source_name: str
    raw_bytes: bytes
    document_type: str
    body_documents: list[Document]
    figure_units: list[ContentUnit]
    units: list[ContentUnit]
    stored_count: int


class IngestionPipeline:
    """Compiles and runs the ingestion graph.

    Parameters
    ----------
    store:
        Destination vector store.  Defaults to
        :class:`~knowledge_enrichment.retrieval.chroma_store.ChromaVectorStore`.
    analyzer:
        PDF figure analyser.  Defaults to a :class:`DocumentAnalyzer`
        with the configured LLM clients.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        analyzer: DocumentAnalyzer | None = None,
        *,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        min_chunk_chars: int = settings.min_chunk_chars,
        max_chunk_chars: int = settings.max_chunk_chars,
        chunk_window_chars: int = settings.chunk_window_chars,
    ) -> None:
        if store is None:
            from knowledge_enrichment.retrieval.chroma_store import ChromaVectorStore

            store = ChromaVectorStore()
        self.store = store
        self.analyzer = analyzer or DocumentAnalyzer()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_chars = min_chunk_chars
        self.max_chunk_chars = max_chunk_chars
        self.chunk_window_chars = chunk_window_chars
        self.graph = self._build_graph()

    # -- public API -----------------------------------------------------------

    def ingest(self, group_key: str, filename: str, raw_bytes: bytes) -> int:
        """Extract, enrich, chunk, and store one document.

        Returns
        -------
        int
            Number of units added to the store (``0`` when nothing usable
            was extracted).

        Raises
        ------
        DocumentParseError
            The bytes are not a readable document of the detected type.
        UnsupportedDocumentError
            The upload is neither PDF nor Markdown.
        """
        result = self.graph.invoke(
            {"group_key": group_key, "source_name": filename, "raw_bytes": raw_bytes}
        )
        return result.get("stored_count", 0)

    # -- graph ----------------------------------------------------------------

    def _build_graph(self):  # noqa: ANN202
        workflow = StateGraph(IngestionState)

        workflow.add_node("parse", self._parse)
        workflow.add_node("analyze", self._analyze)
        workflow.add_node("chunk", self._chunk)
        workflow.add_node("normalize", self._normalize)
        workflow.add_node("tag", self._tag)
        workflow.add_node("store", self._store)

        workflow.set_entry_point("parse")
        workflow.add_conditional_edges(
            "parse",
            _route_after_parse,
            {"analyze": "analyze", "chunk": "chunk"},
        )
        workflow.add_edge("analyze", "chunk")
        workflow.add_edge("chunk", "normalize")
        workflow.add_edge("normalize", "tag")
        workflow.add_edge("tag", "store")
        workflow.add_edge("store", END)

        return workflow.compile()

    # -- nodes ----------------------------------------------------------------

    def _parse(self, state: IngestionState) -> dict:
        source_name = state["source_name"]
        raw_bytes = state["raw_bytes"]
        document_type = detect_document_type(source_name, raw_bytes)

        if document_type == "pdf":
            body = load_pdf_pages(parse_pdf(raw_bytes, source_name))
        else:
            body = load_markdown(raw_bytes, source_name)

        logger.info("Parsed [%s] as %s: %d body section(s)", source_name, document_type, len(body))
        return {"document_type": document_type, "body_documents": body, "figure_units": []}

    def _analyze(self, state: IngestionState) -> dict:
        return {"figure_units": self.analyzer.analyze(state["raw_bytes"], state["source_name"])}

    def _chunk(self, state: IngestionState) -> dict:
        chunks = chunk_documents(
            state.get("body_documents", []),
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            min_chunk_chars=self.min_chunk_chars,
        )
        logger.info("Chunked [%s] into %d text chunk(s)", state["source_name"], len(chunks))
        units = [ContentUnit.from_document(c) for c in chunks]
        return {"units": units + state.get("figure_units", [])}

    def _normalize(self, state: IngestionState) -> dict:
        return {
            "units": normalize_chunk_sizes(
                state["units"], max_chars=self.max_chunk_chars, window_chars=self.chunk_window_chars
            )
        }

    def _tag(self, state: IngestionState) -> dict:
        return {"units": tag_units(state["units"], state["group_key"], state["source_name"])}

    def _store(self, state: IngestionState) -> dict:
        units = [u for u in state["units"] if u.text.strip()]
        if not units:
            logger.warning("No chunks extracted from document: %s", state["source_name"])
            return {"stored_count": 0}

        self.store.add(units)
        logger.info("Ingestion complete for [%s]: %d unit(s) stored", state["source_name"], len(units))
        return {"stored_count": len(units)}


def _route_after_parse(state: IngestionState) -> str:
    """Conditional edge after ``parse``: only PDFs have pages to analyse."""
    if state.get("document_type") == "pdf":
        return "analyze"
    return "chunk"
