"""
Retrieval — vector store access and grounded question answering.

This module wraps the vector store behind a clean interface so that
ingestion and chat never need to know which DB is backing retrieval.

Public surface
--------------
- :class:`RetrievalAssembler` — question → context → prompt → answer.
- :class:`VectorStoreBase` — abstract backend (subclass for Elasticsearch, etc.).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`ChatResponse`, :class:`MetadataFilter` — data models.
"""

from knowledge_enrichment.retrieval.assembler import NO_CONTEXT_ANSWER, RetrievalAssembler
from knowledge_enrichment.retrieval.base import VectorStoreBase
from knowledge_enrichment.retrieval.models import ChatResponse, MetadataFilter

__all__ = [
    "ChatResponse",
    "ChromaVectorStore",
    "MetadataFilter",
    "NO_CONTEXT_ANSWER",
    "RetrievalAssembler",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from knowledge_enrichment.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
