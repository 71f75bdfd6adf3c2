"""Prompt templates for captioning, figure description, and question answering.

Every LLM call in the package uses a prompt from this module.  Keeping
prompts in one place makes them easy to audit, version, and A/B test.
"""

from __future__ import annotations

import base64

from langchain_core.messages import HumanMessage
from langchain_core.prompts import PromptTemplate

# ── 1. Image captioning ───────────────────────────────────────────────


def build_caption_text(page_number: int, context: str) -> str:
    """Instruction sent alongside an image to the vision model."""
    parts = [
        f"You are analyzing an image from page {page_number} of a PDF document. ",
        "Provide a detailed description of what you see: subject, visual elements, "
        "visible text, charts, or diagrams. ",
    ]
    if context.strip():
        parts.append(f'This image appears with the following context: "{context}". ')
    parts.append(
        "Your description should be 2-3 sentences, concise but informative, "
        "useful for future search or summarization."
    )
    return "".join(parts)


def build_caption_message(image_png: bytes, page_number: int, context: str) -> list[HumanMessage]:
    """Build the multimodal message for the ``Captioner``.

    The image travels as a base64 ``data:`` URL inside an ``image_url``
    content block, which OpenAI-compatible vision endpoints accept.
    """
    b64 = base64.b64encode(image_png).decode("ascii")
    return [
        HumanMessage(
            content=[
                {"type": "text", "text": build_caption_text(page_number, context)},
                {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{b64}"}},
            ]
        )
    ]


# ── 2. Text-only figure description ───────────────────────────────────


def build_figure_prompt(kind: str, number: str | None, caption: str, page_context: str) -> str:
    """Prompt asking the LLM to describe a figure it can only read about."""
    return (
        "Analyze the following figure information:\n"
        f"Type: {kind}\n"
        f"Number: {number or 'N/A'}\n"
        f"Caption: {caption}\n"
        f"Page Context: {page_context}\n\n"
        "Provide a concise, informative description of what this figure likely represents. "
        "If the information is insufficient, generate a plausible description based on the context."
    )


# ── 3. Grounded question answering ────────────────────────────────────

RAG_PROMPT = PromptTemplate.from_template(
    """\
You are an expert assistant. Use the following context to answer the user's question.
If the context does not contain the answer, reply with "I don't know."

Context:
{context}

Question:
{question}
"""
)


def build_rag_prompt(context: str, question: str) -> str:
    """Fill the two-slot question-answering template."""
    return RAG_PROMPT.format(context=context, question=question)
