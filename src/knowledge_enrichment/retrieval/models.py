"""Domain models for store queries and chat answers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from knowledge_enrichment.models import ContentUnit


class MetadataFilter(BaseModel):
    """Declarative metadata filter for vector-store queries.

    Attributes
    ----------
    field:
        The metadata key to filter on (e.g. ``"group_key"``, ``"kind"``).
    operator:
        Comparison operator — one of ``eq``, ``ne``, ``in``, ``nin``.
        Stored metadata values are strings, so there are no range operators.
    value:
        The value (or list of values for ``in`` / ``nin``) to compare against.
    """

    field: str
    operator: str = "eq"
    value: Any = None

    # -- helpers for common filters ------------------------------------------

    @classmethod
    def equals(cls, field: str, value: Any) -> MetadataFilter:
        return cls(field=field, operator="eq", value=value)

    @classmethod
    def not_equals(cls, field: str, value: Any) -> MetadataFilter:
        return cls(field=field, operator="ne", value=value)

    @classmethod
    def one_of(cls, field: str, values: list[Any]) -> MetadataFilter:
        return cls(field=field, operator="in", value=values)


class ChatResponse(BaseModel):
    """An answer together with the units it was grounded on.

    ``supporting_units`` keep their full metadata so callers can cite the
    source file, page, and kind of every passage.
    """

    answer: str
    supporting_units: list[ContentUnit] = Field(default_factory=list)
