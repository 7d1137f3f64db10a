"""Vector graphic rendering adapters."""

from __future__ import annotations

from .base import GraphicRenderer
from .pymupdf_renderer import PyMuPDFRenderer

__all__ = ["GraphicRenderer", "PyMuPDFRenderer"]
