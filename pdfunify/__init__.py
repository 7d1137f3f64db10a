"""Combine PDF documents and SVG graphics into one PDF with a uniform page width."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

from .core import Box, Container, Page, load, serialize
from .exceptions import (
    GraphIntegrityError,
    ParseError,
    PreconditionError,
    RenderError,
    UnifyError,
    UnifyIOError,
)
from .merge import isolate_page, merge_container, merge_page, merge_pages
from .normalize import A4_WIDTH, normalize, normalize_page
from .render import GraphicRenderer, PyMuPDFRenderer
from .tools import load_builtin_plugins
from .tools.common.interfaces import ConversionContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry
from .unify import (
    PipelineState,
    Source,
    SourceKind,
    UnifyPipeline,
    unify,
    unify_files,
)

load_builtin_plugins()

__version__ = "1.0.0"

__all__ = [
    "A4_WIDTH",
    "Box",
    "Container",
    "Page",
    "load",
    "serialize",
    "merge_page",
    "merge_pages",
    "merge_container",
    "isolate_page",
    "normalize",
    "normalize_page",
    "GraphicRenderer",
    "PyMuPDFRenderer",
    "PipelineState",
    "Source",
    "SourceKind",
    "UnifyPipeline",
    "unify",
    "unify_files",
    "unify_documents",
    "merge_documents",
    "normalize_document",
    "ConversionContext",
    "ToolRegistry",
    "registry",
    "register_tool",
    "UnifyError",
    "ParseError",
    "GraphIntegrityError",
    "RenderError",
    "UnifyIOError",
    "PreconditionError",
]


def unify_documents(
    inputs: Iterable[str | Path],
    output: str | Path,
    *,
    renderer: GraphicRenderer | None = None,
    target_width: float = A4_WIDTH,
    document_info: Mapping[str, object] | None = None,
    max_workers: int = 1,
) -> Path:
    """Convenience wrapper around the unify plugin."""

    context = ConversionContext(
        output_path=output,
        renderer=renderer,
        config={
            "inputs": list(inputs),
            "target_width": target_width,
            "document_info": document_info,
            "max_workers": max_workers,
        },
    )
    tool = registry.create("unify", context)
    return tool.run()


def merge_documents(inputs: Iterable[str | Path], output: str | Path, **config) -> Path:
    """Convenience wrapper around the merge plugin."""

    context = ConversionContext(output_path=output, config={"inputs": list(inputs), **config})
    tool = registry.create("merge", context)
    return tool.run()


def normalize_document(
    input: str | Path,
    output: str | Path,
    *,
    target_width: float = A4_WIDTH,
) -> Path:
    """Convenience wrapper around the normalize plugin."""

    context = ConversionContext(
        input_path=input,
        output_path=output,
        config={"target_width": target_width},
    )
    tool = registry.create("normalize", context)
    return tool.run()
