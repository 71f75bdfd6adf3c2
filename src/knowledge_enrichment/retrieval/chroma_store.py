"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

import chromadb
from langchain_huggingface import HuggingFaceEmbeddings

from knowledge_enrichment.config import settings
from knowledge_enrichment.models import ContentUnit
from knowledge_enrichment.retrieval.base import VectorStoreBase
from knowledge_enrichment.retrieval.models import MetadataFilter

logger = logging.getLogger(__name__)

# Metadata values are stored as strings, so Chroma range operators never apply.
_OP_MAP = {
    "eq": "$eq",
    "ne": "$ne",
    "in": "$in",
    "nin": "$nin",
}


def _build_chroma_where(filters: list[MetadataFilter]) -> dict[str, Any] | None:
    """Convert a list of :class:`MetadataFilter` to Chroma ``where`` syntax."""
    if not filters:
        return None

    clauses: list[dict[str, Any]] = []
    for f in filters:
        chroma_op = _OP_MAP.get(f.operator)
        if chroma_op is None:
            raise ValueError(f"Unsupported filter operator: {f.operator!r}")
        clauses.append({f.field: {chroma_op: f.value}})

    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    embedding_model:
        HuggingFace model id used for text → embedding conversion.
    batch_size:
        Units embedded per forward pass in :meth:`add`.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        embedding_model: str = settings.embedding_model,
        batch_size: int = settings.embed_batch_size,
    ) -> None:
        super().__init__(collection_name)
        self._client = chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(collection_name)
        self._embedder = HuggingFaceEmbeddings(model_name=embedding_model)
        self.batch_size = max(1, batch_size)

    # -- VectorStoreBase overrides --------------------------------------------

    def add(self, units: list[ContentUnit]) -> None:
        for start in range(0, len(units), self.batch_size):
            batch = units[start : start + self.batch_size]
            texts = [u.text for u in batch]
            self._collection.add(
                ids=[uuid4().hex for _ in batch],
                documents=texts,
                metadatas=[dict(u.metadata) for u in batch],
                embeddings=self._embedder.embed_documents(texts),
            )
        logger.info("Stored %d unit(s) in collection %r", len(units), self.collection_name)

    def similarity_search(
        self,
        query: str,
        *,
        k: int = 4,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ContentUnit]:
        results = self._collection.query(
            query_embeddings=[self._embedder.embed_query(query)],
            n_results=k,
            where=_build_chroma_where(filters) if filters else None,
            include=["documents", "metadatas"],
        )

        docs = results.get("documents", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        return [ContentUnit(text=content or "", metadata=meta or {}) for content, meta in zip(docs, metas)]

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str]) -> None:
        self._collection.delete(ids=ids)
