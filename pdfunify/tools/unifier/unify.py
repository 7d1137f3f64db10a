"""Plugins exposing unify, merge and normalize through the registry."""

from __future__ import annotations

from pathlib import Path

from ...core.model import Container
from ...core.parser import load
from ...core.utils import get_logger
from ...core.validator import ensure_output_parent, ensure_source_exists
from ...core.writer import serialize
from ...exceptions import UnifyError, UnifyIOError
from ...merge.merger import merge_container
from ...normalize.normalizer import A4_WIDTH, normalize
from ...unify.pipeline import build_document_info, unify_files
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfunify.tools.unify")


def _read_pdf(path: Path) -> Container:
    resolved = ensure_source_exists(path)
    try:
        data = resolved.read_bytes()
    except OSError as exc:
        raise UnifyIOError(f"Failed to read {resolved}") from exc
    return load(data)


def _write_pdf(container: Container, destination: Path) -> Path:
    output_path = ensure_output_parent(destination)
    data = serialize(container)
    try:
        output_path.write_bytes(data)
    except OSError as exc:
        LOGGER.error("Failed to write PDF to %s: %s", output_path, exc)
        raise UnifyIOError(f"Failed to write PDF to {output_path}") from exc
    return output_path


@register_tool("unify")
class UnifyTool(BaseTool):
    name = "unify"

    def run(self) -> Path:
        context = self.context
        inputs = context.input_paths()
        if not inputs:
            raise UnifyError("No input files provided")

        output = context.output_path
        if output is None:
            raise UnifyError("Unify tool requires an output path")

        target_width = context.config.get("target_width")
        if target_width is None:
            target_width = A4_WIDTH
        document_info = context.config.get("document_info")
        max_workers = context.config.get("max_workers") or 1

        LOGGER.debug("Unifying %d input(s) into %s", len(inputs), output)
        result = unify_files(
            inputs,
            output,
            renderer=context.renderer,
            target_width=target_width,
            document_info=document_info,
            max_workers=max_workers,
        )
        context.resources["result"] = result
        return result


@register_tool("merge")
class MergeTool(BaseTool):
    """Concatenate PDFs without touching page geometry."""

    name = "merge"

    def run(self) -> Path:
        context = self.context
        inputs = context.input_paths()
        if not inputs:
            raise UnifyError("No input PDFs provided")

        output = context.output_path
        if output is None:
            raise UnifyError("Merge tool requires an output path")

        destination = Container()
        for path in inputs:
            LOGGER.debug("Adding pages from %s", path)
            source = _read_pdf(path)
            merge_container(destination, source)
            if not destination.info:
                destination.info = dict(source.info)

        document_info = context.config.get("document_info")
        if document_info:
            destination.info = build_document_info(document_info)

        result = _write_pdf(destination, output)
        LOGGER.info("Merged %d PDFs into %s", len(inputs), result)
        context.resources["result"] = result
        return result


@register_tool("normalize")
class NormalizeTool(BaseTool):
    """Rescale every page of one PDF to a common width."""

    name = "normalize"

    def run(self) -> Path:
        context = self.context
        if context.input_path is None or context.output_path is None:
            raise UnifyError("Normalize tool requires input and output paths")

        target_width = context.config.get("target_width")
        if target_width is None:
            target_width = A4_WIDTH
        container = _read_pdf(context.input_path)
        normalize(container, target_width)
        result = _write_pdf(container, context.output_path)
        context.resources["result"] = result
        return result
