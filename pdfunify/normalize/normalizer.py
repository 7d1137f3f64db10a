"""Rescale pages to a common width while preserving their aspect ratio."""

from __future__ import annotations

import logging
import math

from ..core.geometry import scaling
from ..core.model import Container, Page
from ..exceptions import PreconditionError

LOGGER = logging.getLogger("pdfunify.normalize")

# ISO A4 width in PostScript points.
A4_WIDTH = 595.2764


def normalize_page(page: Page, target_width: float = A4_WIDTH) -> float:
    """Scale *page* uniformly so its media box is *target_width* wide.

    Returns the applied scale factor.  Pages already at the target width are
    left untouched and report ``1.0``.

    Raises:
        PreconditionError: If the page has no usable media box or its width
            is not positive.
    """

    if target_width <= 0:
        raise PreconditionError(f"Target width must be positive, got {target_width}")

    box = page.media_box
    if box.width <= 0:
        raise PreconditionError(
            f"Page {page.object_id} has a degenerate media box width of {box.width}"
        )

    scale = target_width / box.width
    if math.isclose(scale, 1.0, rel_tol=1e-9):
        LOGGER.debug("Page %d already at target width", page.object_id)
        return 1.0

    page.apply_transformation(scaling(scale))
    LOGGER.debug(
        "Scaled page %d by %.6f to %.4f x %.4f",
        page.object_id,
        scale,
        box.width * scale,
        box.height * scale,
    )
    return scale


def normalize(container: Container, target_width: float = A4_WIDTH) -> None:
    """Normalize every page of *container* to *target_width* in place."""

    if target_width <= 0:
        raise PreconditionError(f"Target width must be positive, got {target_width}")
    for page in container.pages():
        normalize_page(page, target_width)
    LOGGER.info("Normalized %d page(s) to width %s", container.page_count, target_width)


__all__ = ["A4_WIDTH", "normalize", "normalize_page"]
