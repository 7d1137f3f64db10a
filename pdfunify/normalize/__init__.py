"""Page geometry normalization."""

from __future__ import annotations

from .normalizer import A4_WIDTH, normalize, normalize_page

__all__ = ["A4_WIDTH", "normalize", "normalize_page"]
