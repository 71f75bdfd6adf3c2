"""Domain models shared by the ingestion and retrieval stages.

A :class:`ContentUnit` is the only entity that outlives an ingestion
request: once handed to the vector store it is owned by the store and
never re-read or mutated by the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from langchain_core.documents import Document
from pydantic import BaseModel, Field, field_validator

# Metadata keys stamped on stored units.
GROUP_KEY = "group_key"
SOURCE_NAME = "source_name"
PAGE = "page"
KIND = "kind"
WIDTH = "width"
HEIGHT = "height"

IMAGE_KIND = "image"


class ContentUnit(BaseModel):
    """An independently retrievable piece of text with string metadata.

    Attributes
    ----------
    text:
        The content that gets embedded and returned to the LLM as context.
    metadata:
        Ordered ``str -> str`` mapping.  Values are always string-serialised,
        even when semantically numeric (``page``, ``width``, ``height``).
    """

    text: str
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items() if v is not None}
        return value

    # -- LangChain interop ----------------------------------------------------

    @classmethod
    def from_document(cls, document: Document) -> ContentUnit:
        return cls(text=document.page_content, metadata=dict(document.metadata))

    def to_document(self) -> Document:
        return Document(page_content=self.text, metadata=dict(self.metadata))


@dataclass(frozen=True)
class FigureRecord:
    """A figure / table / chart reference detected in page text.

    Transient: produced by a figure detector, consumed by the
    :class:`~knowledge_enrichment.ingestion.figures.FigureDescriber`.
    """

    kind: str
    caption: str
    number: str | None = None
