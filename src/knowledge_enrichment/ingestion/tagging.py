"""Document-identity stamping for content units."""

from __future__ import annotations

from knowledge_enrichment.models import GROUP_KEY, SOURCE_NAME, ContentUnit


def tag_unit(unit: ContentUnit, group_key: str, source_name: str) -> ContentUnit:
    """Return a copy of *unit* carrying ``group_key`` and ``source_name``.

    Existing keys keep their position; re-tagging with the same values
    yields equal metadata.
    """
    metadata = dict(unit.metadata)
    metadata[GROUP_KEY] = group_key
    metadata[SOURCE_NAME] = source_name
    return ContentUnit(text=unit.text, metadata=metadata)


def tag_units(units: list[ContentUnit], group_key: str, source_name: str) -> list[ContentUnit]:
    return [tag_unit(u, group_key, source_name) for u in units]
