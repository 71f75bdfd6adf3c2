"""Exceptions that cross the ingestion boundary.

Everything below the document-parse boundary degrades instead of raising,
so these are the only errors a caller of
:meth:`~knowledge_enrichment.ingestion.pipeline.IngestionPipeline.ingest`
has to handle.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for rejected ingestion requests."""


class DocumentParseError(IngestionError):
    """The raw bytes cannot be interpreted as the declared document type."""

    def __init__(self, source_name: str, reason: str) -> None:
        super().__init__(f"Cannot parse {source_name!r}: {reason}")
        self.source_name = source_name
        self.reason = reason


class UnsupportedDocumentError(IngestionError):
    """The file is neither a PDF nor a Markdown document."""

    def __init__(self, source_name: str) -> None:
        super().__init__(f"Unsupported document type: {source_name!r} (expected PDF or Markdown)")
        self.source_name = source_name
