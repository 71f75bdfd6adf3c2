"""Raster-image discovery in a PDF page's resource tree.

A page's ``/Resources`` → ``/XObject`` dictionary maps names to either
image leaves (``/Subtype /Image``) or form groups (``/Subtype /Form``),
reusable drawing blocks that carry their own ``/Resources``.  Images are
often referenced through such a form, so the walk descends into forms,
but only one level: resource graphs can be cyclic or adversarially deep.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Iterator

from knowledge_enrichment.config import settings

logger = logging.getLogger(__name__)

MAX_FORM_DEPTH = 1


@dataclass(frozen=True)
class PageImage:
    """An image XObject found on a page, with its pixel dimensions."""

    name: str
    width: int
    height: int
    xobject: Any

    def to_png(self) -> bytes:
        """Decode the XObject and re-encode it as PNG bytes."""
        image = self.xobject.decode_as_image()
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


def walk_page_images(page: Any) -> list[PageImage]:
    """Collect the images referenced by *page*, in resource order.

    Returns an empty list when the page has no resource tree.
    """
    resources = page.get("/Resources")
    if resources is None:
        return []
    return list(_walk_xobjects(resources.get_object(), depth=0))


def _walk_xobjects(resources: Any, *, depth: int) -> Iterator[PageImage]:
    xobjects = resources.get("/XObject")
    if xobjects is None:
        return
    xobjects = xobjects.get_object()

    for name in xobjects:
        obj = xobjects[name].get_object()
        subtype = obj.get("/Subtype")
        if subtype == "/Image":
            yield PageImage(
                name=str(name),
                width=int(obj.get("/Width", 0)),
                height=int(obj.get("/Height", 0)),
                xobject=obj,
            )
        elif subtype == "/Form" and depth < MAX_FORM_DEPTH:
            form_resources = obj.get("/Resources")
            if form_resources is not None:
                yield from _walk_xobjects(form_resources.get_object(), depth=depth + 1)


def filter_small_images(
    images: list[PageImage],
    min_width: int = settings.min_image_width,
    min_height: int = settings.min_image_height,
) -> list[PageImage]:
    """Drop decorative artefacts: bullets, glyphs, hairline separators."""
    kept: list[PageImage] = []
    for image in images:
        if image.width < min_width or image.height < min_height:
            logger.debug("Skipping %s (%dx%d): below size floor", image.name, image.width, image.height)
            continue
        kept.append(image)
    return kept
