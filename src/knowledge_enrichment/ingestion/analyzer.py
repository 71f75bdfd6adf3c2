"""Per-page figure analysis and its fan-out across a whole PDF.

Page contract
-------------
* Each worker thread opens its own ``PdfReader`` over the raw bytes on
  first use and reuses it for later pages, so no parser state is shared
  between threads and no locks are needed.
* Any exception inside a page is caught at the page boundary and turned
  into an empty result; one corrupt page never aborts the document.
* Units from different pages come back in no guaranteed order.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from knowledge_enrichment.config import settings
from knowledge_enrichment.errors import DocumentParseError
from knowledge_enrichment.ingestion.captioner import Captioner
from knowledge_enrichment.ingestion.figures import (
    FigureDescriber,
    FigureDetector,
    RegexFigureDetector,
    extract_image_context,
)
from knowledge_enrichment.ingestion.images import filter_small_images, walk_page_images
from knowledge_enrichment.ingestion.loader import extract_page_text, parse_pdf
from knowledge_enrichment.models import HEIGHT, IMAGE_KIND, KIND, PAGE, WIDTH, ContentUnit

logger = logging.getLogger(__name__)


class PageAnalyzer:
    """Turns one page into image-caption and figure-description units."""

    def __init__(
        self,
        *,
        captioner: Captioner | None = None,
        describer: FigureDescriber | None = None,
        detector: FigureDetector | None = None,
        min_image_width: int = settings.min_image_width,
        min_image_height: int = settings.min_image_height,
        max_context_chars: int = settings.max_context_chars,
    ) -> None:
        self.captioner = captioner or Captioner()
        self.describer = describer or FigureDescriber(max_context_chars=max_context_chars)
        self.detector = detector or RegexFigureDetector()
        self.min_image_width = min_image_width
        self.min_image_height = min_image_height
        self.max_context_chars = max_context_chars

    def analyze_page(self, page: Any, page_number: int) -> list[ContentUnit]:
        """Analyse *page*; exceptions propagate (see :meth:`analyze_page_safe`)."""
        page_text = extract_page_text(page, page_number)
        figures = self.detector.detect_figures(page_text)

        units: list[ContentUnit] = []
        images = filter_small_images(
            walk_page_images(page), self.min_image_width, self.min_image_height
        )
        context = extract_image_context(page_text, self.max_context_chars) if images else ""
        for image in images:
            description = self.captioner.caption(image.to_png(), page_number, context)
            units.append(
                ContentUnit(
                    text=description,
                    metadata={
                        PAGE: page_number,
                        KIND: IMAGE_KIND,
                        WIDTH: image.width,
                        HEIGHT: image.height,
                    },
                )
            )

        for figure in figures:
            units.append(
                ContentUnit(
                    text=self.describer.describe(figure, page_text),
                    metadata={PAGE: page_number, KIND: figure.kind},
                )
            )
        return units

    def analyze_page_safe(self, page: Any, page_number: int) -> list[ContentUnit]:
        """Same as :meth:`analyze_page` but returns ``[]`` on any failure."""
        try:
            return self.analyze_page(page, page_number)
        except Exception as exc:
            logger.warning("Error processing page %d: %s", page_number, exc)
            return []


class DocumentAnalyzer:
    """Fans a :class:`PageAnalyzer` out over every page of a PDF.

    Parameters
    ----------
    page_analyzer:
        Per-page worker.  Defaults to a :class:`PageAnalyzer` with the
        configured LLM clients.
    max_workers:
        Size of the page worker pool.
    """

    def __init__(
        self,
        page_analyzer: PageAnalyzer | None = None,
        *,
        max_workers: int = settings.page_workers,
    ) -> None:
        self.page_analyzer = page_analyzer or PageAnalyzer()
        self.max_workers = max(1, max_workers)

    def analyze(self, raw_bytes: bytes, source_name: str = "document.pdf") -> list[ContentUnit]:
        """Return the flattened units of all pages.

        An unparseable document is reported and yields ``[]``.
        """
        try:
            page_count = len(parse_pdf(raw_bytes, source_name).pages)
        except DocumentParseError as exc:
            logger.warning("Failed to load PDF [%s]: %s", source_name, exc.reason)
            return []

        readers = threading.local()
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="page") as pool:
            per_page = pool.map(
                lambda index: self._analyze_page_at(readers, raw_bytes, source_name, index),
                range(page_count),
            )
            units = [unit for page_units in per_page for unit in page_units]

        logger.info("Analysed %d page(s) of [%s]: %d figure unit(s)", page_count, source_name, len(units))
        return units

    def _analyze_page_at(
        self, readers: threading.local, raw_bytes: bytes, source_name: str, index: int
    ) -> list[ContentUnit]:
        try:
            reader = getattr(readers, "reader", None)
            if reader is None:
                reader = readers.reader = parse_pdf(raw_bytes, source_name)
            page = reader.pages[index]
        except Exception as exc:
            logger.warning("Error opening page %d of [%s]: %s", index + 1, source_name, exc)
            return []
        return self.page_analyzer.analyze_page_safe(page, index + 1)
