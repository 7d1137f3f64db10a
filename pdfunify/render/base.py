"""Rendering adapter protocol for vector graphics."""

from __future__ import annotations

from typing import Protocol

from ..core.model import Container


class GraphicRenderer(Protocol):
    """Protocol for services turning vector-graphic markup into pages."""

    def render(self, markup: bytes) -> Container:
        """Render *markup* and return a container sized to the graphic.

        Implementations raise :class:`~pdfunify.exceptions.RenderError` on
        malformed markup or when their backend is unavailable.  The result
        may hold more than one page.
        """
