"""PyMuPDF implementation of the graphic rendering adapter."""

from __future__ import annotations

import logging
from xml.etree import ElementTree

from ..core.model import Container
from ..core.parser import load
from ..exceptions import ParseError, RenderError

LOGGER = logging.getLogger("pdfunify.render")


def _ensure_svg_root(markup: bytes) -> None:
    """Reject markup whose root element is not ``<svg>``.

    MuPDF's SVG loader accepts other markup (HTML, for one) and lays it out
    as text pages, so the root is checked before the backend sees it.
    """

    try:
        root = ElementTree.fromstring(markup)
    except ElementTree.ParseError as exc:
        raise RenderError(f"Vector graphic is not well-formed XML: {exc}") from exc
    local_name = root.tag.rsplit("}", 1)[-1]
    if local_name != "svg":
        raise RenderError(f"Vector graphic root element is <{local_name}>, expected <svg>")


class PyMuPDFRenderer:
    """Render SVG markup to PDF pages through MuPDF.

    The page size follows the graphic's intrinsic ``width``/``height`` (or
    ``viewBox``) as interpreted by MuPDF.
    """

    filetype = "svg"

    def render(self, markup: bytes) -> Container:
        if not markup or not markup.strip():
            raise RenderError("Vector graphic is empty")
        _ensure_svg_root(markup)

        try:
            import pymupdf
        except (ImportError, OSError) as exc:
            LOGGER.error("PyMuPDF is not available: %s", exc)
            raise RenderError("Rendering backend PyMuPDF is not available") from exc

        try:
            with pymupdf.open(stream=markup, filetype=self.filetype) as document:
                if document.page_count == 0:
                    raise RenderError("Rendering produced no page")
                pdf_bytes = document.convert_to_pdf()
        except RenderError:
            raise
        except Exception as exc:  # pragma: no cover - backend errors vary
            LOGGER.error("Failed to render vector graphic: %s", exc)
            raise RenderError(f"Failed to render vector graphic: {exc}") from exc

        try:
            container = load(pdf_bytes)
        except ParseError as exc:
            raise RenderError("Renderer produced an unreadable PDF") from exc
        if container.page_count == 0:
            raise RenderError("Rendering produced no page")

        LOGGER.debug("Rendered vector graphic into %d page(s)", container.page_count)
        return container


__all__ = ["PyMuPDFRenderer"]
