"""Unit tests for figure detection, context summarisation, and description."""

from __future__ import annotations

import pytest

from knowledge_enrichment.ingestion.figures import (
    FigureDescriber,
    RegexFigureDetector,
    extract_image_context,
    summarize_context,
)
from knowledge_enrichment.models import FigureRecord


@pytest.fixture()
def detector() -> RegexFigureDetector:
    return RegexFigureDetector()


# ── RegexFigureDetector ────────────────────────────────────────────────


class TestRegexFigureDetector:
    def test_numbered_figure_with_colon(self, detector: RegexFigureDetector) -> None:
        records = detector.detect_figures("Figure 2: Revenue growth by quarter")
        assert records == [FigureRecord(kind="figure", caption="Revenue growth by quarter", number="2")]

    def test_fig_abbreviation_normalised(self, detector: RegexFigureDetector) -> None:
        records = detector.detect_figures("See Fig. 3: Network topology\n")
        assert records[0].kind == "figure"
        assert records[0].number == "3"
        assert records[0].caption == "Network topology"

    def test_case_insensitive_and_scan_order(self, detector: RegexFigureDetector) -> None:
        text = "TABLE 4: Operating costs\nThe results follow.\nchart 5. Sales by region\n"
        records = detector.detect_figures(text)
        assert [(r.kind, r.number, r.caption) for r in records] == [
            ("table", "4", "Operating costs"),
            ("chart", "5", "Sales by region"),
        ]

    def test_unnumbered_reference(self, detector: RegexFigureDetector) -> None:
        records = detector.detect_figures("Diagram: system overview")
        assert records == [FigureRecord(kind="diagram", caption="system overview", number=None)]

    def test_caption_stops_at_sentence_boundary(self, detector: RegexFigureDetector) -> None:
        records = detector.detect_figures("Graph 1 shows latency. It is low.")
        assert records[0].caption == "shows latency"

    def test_plural_reference_is_detected(self, detector: RegexFigureDetector) -> None:
        records = detector.detect_figures("Figures 3 and 4 show the revenue split")
        assert records == [FigureRecord(kind="figure", caption="and 4 show the revenue split", number="3")]

    def test_plural_abbreviation_normalised(self, detector: RegexFigureDetector) -> None:
        (record,) = detector.detect_figures("Figs. 5: Blade wear")
        assert (record.kind, record.number, record.caption) == ("figure", "5", "Blade wear")

    def test_embedded_words_are_not_matched(self, detector: RegexFigureDetector) -> None:
        assert detector.detect_figures("Imagery from the survey was subtable") == []

    def test_empty_text(self, detector: RegexFigureDetector) -> None:
        assert detector.detect_figures("") == []


# ── Context helpers ────────────────────────────────────────────────────


class TestSummarizeContext:
    def test_short_text_unchanged(self) -> None:
        assert summarize_context("short page") == "short page"

    def test_exactly_at_bound_unchanged(self) -> None:
        text = "a" * 500
        assert summarize_context(text) == text

    def test_long_text_truncated_with_ellipsis(self) -> None:
        text = "b" * 600
        summary = summarize_context(text)
        assert summary == "b" * 500 + "..."

    def test_truncation_strips_trailing_whitespace(self) -> None:
        text = "c" * 495 + "     " + "d" * 100
        assert summarize_context(text) == "c" * 495 + "..."


class TestExtractImageContext:
    def test_prefers_first_caption(self) -> None:
        text = "Intro paragraph.\nFigure 1: Sales by region\nTable 2: Costs\n"
        assert extract_image_context(text) == "Figure 1: Sales by region"

    def test_falls_back_to_preview(self) -> None:
        text = "Nothing captioned here, just prose"
        assert extract_image_context(text) == text

    def test_caption_match_is_case_sensitive(self) -> None:
        text = "figure 1: lower case caption"
        assert extract_image_context(text) == text

    def test_blank_page_gives_empty_context(self) -> None:
        assert extract_image_context("   \n") == ""


# ── FigureDescriber ────────────────────────────────────────────────────


FIGURE = FigureRecord(kind="figure", caption="Revenue growth by quarter", number="2")


class TestFigureDescriber:
    def test_returns_model_description(self, llm_factory) -> None:
        llm = llm_factory("A bar chart of quarterly revenue rising steadily.")
        describer = FigureDescriber(llm=llm)
        assert describer.describe(FIGURE, "page text") == "A bar chart of quarterly revenue rising steadily."

    def test_prompt_embeds_figure_fields(self, llm_factory) -> None:
        llm = llm_factory("ok")
        FigureDescriber(llm=llm).describe(
            FigureRecord(kind="table", caption="Costs"), "Quarterly report " * 100
        )
        prompt = llm.invoke.call_args.args[0]
        assert "Type: table" in prompt
        assert "Number: N/A" in prompt
        assert "Caption: Costs" in prompt
        assert "Page Context: Quarterly report" in prompt
        assert prompt.count("Quarterly report") < 100

    def test_failure_falls_back_to_literal(self, llm_factory) -> None:
        llm = llm_factory(error=TimeoutError("model timed out"))
        describer = FigureDescriber(llm=llm)
        assert describer.describe(FIGURE, "") == "figure on the page: Revenue growth by quarter"

    def test_blank_answer_falls_back_to_literal(self, llm_factory) -> None:
        describer = FigureDescriber(llm=llm_factory("   "))
        assert describer.describe(FIGURE, "") == "figure on the page: Revenue growth by quarter"
