"""Validation helpers shared by pdfunify tools."""

from __future__ import annotations

from pathlib import Path

from ..exceptions import UnifyIOError
from .utils import resolve_path

SUPPORTED_SUFFIXES = (".pdf", ".svg")


def ensure_source_exists(path: str | Path) -> Path:
    resolved = resolve_path(path)
    if not resolved.exists():
        raise UnifyIOError(f"Input file not found: {resolved}")
    if resolved.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnifyIOError(f"Expected a PDF or SVG file, got: {resolved}")
    return resolved


def ensure_output_parent(path: str | Path) -> Path:
    resolved = resolve_path(path)
    try:
        resolved.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise UnifyIOError(f"Cannot create output directory {resolved.parent}") from exc
    return resolved
