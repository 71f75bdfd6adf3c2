"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import io
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest
from PIL import Image
from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

from knowledge_enrichment.models import ContentUnit
from knowledge_enrichment.retrieval.base import VectorStoreBase
from knowledge_enrichment.retrieval.models import MetadataFilter


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory fake that records additions and returns canned hits."""

    def __init__(self, hits: list[ContentUnit] | None = None) -> None:
        super().__init__("test-collection")
        self._hits: list[ContentUnit] = hits or []
        self.added: list[ContentUnit] = []
        self.add_calls = 0
        self.queries: list[dict[str, Any]] = []

    def add(self, units: list[ContentUnit]) -> None:
        self.add_calls += 1
        self.added.extend(units)

    def similarity_search(
        self,
        query: str,
        *,
        k: int = 4,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ContentUnit]:
        self.queries.append({"query": query, "k": k, "filters": filters})
        return self._hits[:k]

    def health_check(self) -> bool:
        return True


def fake_llm_response(content: Any) -> MagicMock:
    """Create a mock LLM response with the given content."""
    resp = MagicMock()
    resp.content = content
    return resp


def fake_llm(content: Any = "", *, error: Exception | None = None) -> MagicMock:
    """Mock chat model whose ``invoke`` returns *content* or raises *error*."""
    llm = MagicMock()
    if error is not None:
        llm.invoke.side_effect = error
    else:
        llm.invoke.return_value = fake_llm_response(content)
    return llm


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def make_pdf() -> Callable[[int], bytes]:
    """Factory for an in-memory PDF with *n* blank pages."""

    def _make(pages: int = 1) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=200, height=200)
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _make


@pytest.fixture()
def store_factory() -> Callable[..., FakeVectorStore]:
    """Factory for a :class:`FakeVectorStore` preloaded with *hits*."""
    return FakeVectorStore


@pytest.fixture()
def llm_factory() -> Callable[..., MagicMock]:
    """Factory for a mock chat model, see :func:`fake_llm`."""
    return fake_llm


@pytest.fixture()
def make_image_pdf() -> Callable[..., bytes]:
    """Factory for a PDF with one embedded raster image per page.

    Pillow writes each image as a page-sized ``/Image`` XObject.
    """

    def _make(*sizes: tuple[int, int]) -> bytes:
        images = [Image.new("RGB", size, "steelblue") for size in sizes]
        buffer = io.BytesIO()
        images[0].save(buffer, format="PDF", save_all=True, append_images=images[1:])
        return buffer.getvalue()

    return _make


@pytest.fixture()
def make_text_pdf() -> Callable[..., bytes]:
    """Factory for a PDF whose pages each show one line of Helvetica text."""

    def _make(*lines: str) -> bytes:
        writer = PdfWriter()
        font = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Font"),
                NameObject("/Subtype"): NameObject("/Type1"),
                NameObject("/BaseFont"): NameObject("/Helvetica"),
            }
        )
        for line in lines:
            page = writer.add_blank_page(width=612, height=792)
            page[NameObject("/Resources")] = DictionaryObject(
                {NameObject("/Font"): DictionaryObject({NameObject("/F1"): font})}
            )
            content = DecodedStreamObject()
            content.set_data(f"BT /F1 12 Tf 72 720 Td ({line}) Tj ET".encode("latin-1"))
            page.replace_contents(content)
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _make
