"""Document loaders — raw upload bytes to pages and LangChain documents."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Literal

from langchain_core.documents import Document
from langchain_text_splitters import MarkdownHeaderTextSplitter
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from knowledge_enrichment.errors import DocumentParseError, UnsupportedDocumentError
from knowledge_enrichment.models import PAGE

if TYPE_CHECKING:
    from pypdf import PageObject

logger = logging.getLogger(__name__)

DocumentType = Literal["pdf", "markdown"]

_MARKDOWN_SUFFIXES = (".md", ".markdown")
_MARKDOWN_HEADERS = [("#", "h1"), ("##", "h2"), ("###", "h3")]


def detect_document_type(filename: str, raw_bytes: bytes) -> DocumentType:
    """Classify an upload as PDF or Markdown from its name and magic bytes."""
    name = (filename or "").lower()
    if name.endswith(".pdf") or raw_bytes.startswith(b"%PDF"):
        return "pdf"
    if name.endswith(_MARKDOWN_SUFFIXES):
        return "markdown"
    raise UnsupportedDocumentError(filename)


def parse_pdf(raw_bytes: bytes, source_name: str = "document.pdf") -> PdfReader:
    """Open *raw_bytes* as a PDF.

    Raises
    ------
    DocumentParseError
        When the stream is not a readable PDF or has zero pages.
    """
    try:
        reader = PdfReader(io.BytesIO(raw_bytes))
        page_count = len(reader.pages)
    except (PyPdfError, ValueError, KeyError) as exc:
        raise DocumentParseError(source_name, str(exc)) from exc
    if page_count == 0:
        raise DocumentParseError(source_name, "document has no pages")
    return reader


def extract_page_text(page: PageObject, page_number: int) -> str:
    """Return the plain text of *page*, or ``""`` when extraction fails."""
    try:
        return page.extract_text() or ""
    except Exception as exc:
        logger.warning("Text extraction failed on page %d: %s", page_number, exc)
        return ""


def load_pdf_pages(reader: PdfReader) -> list[Document]:
    """One ``Document`` per page, carrying its 1-based ``page`` number."""
    return [
        Document(page_content=extract_page_text(page, number), metadata={PAGE: str(number)})
        for number, page in enumerate(reader.pages, start=1)
    ]


def load_markdown(raw_bytes: bytes, source_name: str = "markdown_content.md") -> list[Document]:
    """Decode a Markdown upload and split it into header sections.

    Headers stay in the section text so nothing is lost for retrieval;
    header titles are also recorded as metadata.
    """
    try:
        markdown = raw_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentParseError(source_name, f"not valid UTF-8 ({exc.reason})") from exc

    if not markdown.strip():
        return []
    splitter = MarkdownHeaderTextSplitter(headers_to_split_on=_MARKDOWN_HEADERS, strip_headers=False)
    return splitter.split_text(markdown)
