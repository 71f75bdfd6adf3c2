"""
Knowledge enrichment — multimodal document ingestion and grounded chat.

Public API
----------
- :class:`IngestionPipeline` — ``ingest(group_key, filename, raw_bytes)``.
- :class:`RetrievalAssembler` — ``chat(question)``.
- :class:`ContentUnit` — the stored, retrievable piece of text.
"""

from knowledge_enrichment.ingestion.pipeline import IngestionPipeline
from knowledge_enrichment.models import ContentUnit, FigureRecord
from knowledge_enrichment.retrieval.assembler import RetrievalAssembler

__all__ = [
    "ContentUnit",
    "FigureRecord",
    "IngestionPipeline",
    "RetrievalAssembler",
]
