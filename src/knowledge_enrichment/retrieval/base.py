"""Abstract base class for vector-store backends.

Adding a new backend (Elasticsearch, Pinecone, Qdrant …) only requires
subclassing :class:`VectorStoreBase` and implementing the three abstract
methods.  Index layout, similarity metric, and persistence stay owned by
the backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from knowledge_enrichment.models import ContentUnit
from knowledge_enrichment.retrieval.models import MetadataFilter


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add(self, units: list[ContentUnit]) -> None:
        """Embed and persist *units*.  Ownership passes to the store."""
        ...

    @abstractmethod
    def similarity_search(
        self,
        query: str,
        *,
        k: int = 4,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ContentUnit]:
        """Return up to *k* stored units most similar to *query*, best first.

        Parameters
        ----------
        query:
            Natural-language query; the backend embeds it.
        k:
            Number of results to return.
        filters:
            Optional metadata filters applied server-side.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete(self, ids: list[str]) -> None:
        """Delete units by their IDs.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")
