"""Pipeline orchestrating import, conversion, merge and normalization."""

from __future__ import annotations

from .pipeline import PipelineState, UnifyPipeline, build_document_info, unify, unify_files
from .sources import Source, SourceKind, classify_path

__all__ = [
    "PipelineState",
    "UnifyPipeline",
    "Source",
    "SourceKind",
    "build_document_info",
    "classify_path",
    "unify",
    "unify_files",
]
