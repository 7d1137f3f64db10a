"""Sequential pipeline turning tagged sources into one normalized PDF."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Mapping, Sequence, TypeVar

from ..core.model import Container
from ..core.parser import load
from ..core.validator import ensure_output_parent
from ..core.writer import serialize
from ..exceptions import RenderError, UnifyError, UnifyIOError
from ..merge.merger import isolate_page, merge_container
from ..normalize.normalizer import A4_WIDTH, normalize
from ..render.base import GraphicRenderer
from ..render.pymupdf_renderer import PyMuPDFRenderer
from .sources import Source, SourceKind

LOGGER = logging.getLogger("pdfunify.unify")

T = TypeVar("T")
R = TypeVar("R")

_METADATA_KEY_MAP = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
}


class PipelineState(str, Enum):
    IDLE = "idle"
    IMPORTING = "importing"
    CONVERTING = "converting"
    MERGING = "merging"
    NORMALIZING = "normalizing"
    SERIALIZED = "serialized"
    DONE = "done"
    FAILED = "failed"


_STATE_ORDER = (
    PipelineState.IDLE,
    PipelineState.IMPORTING,
    PipelineState.CONVERTING,
    PipelineState.MERGING,
    PipelineState.NORMALIZING,
    PipelineState.SERIALIZED,
    PipelineState.DONE,
)


def build_document_info(document_info: Mapping[str, object]) -> dict[str, str]:
    """Translate user supplied metadata into PDF information keys."""

    info: dict[str, str] = {}
    for key, value in document_info.items():
        if value is None:
            continue
        string_value = str(value).strip()
        if not string_value:
            continue
        pdf_key = _METADATA_KEY_MAP.get(key.lower())
        if pdf_key is None:
            pdf_key = key if str(key).startswith("/") else f"/{key}"
        info[pdf_key] = string_value
    return info


class UnifyPipeline:
    """Single-use state machine running import, conversion, merge and normalization.

    States only move forward through ``IDLE, IMPORTING, CONVERTING, MERGING,
    NORMALIZING, SERIALIZED, DONE``.  Any exception moves the pipeline to
    ``FAILED``, is recorded in :attr:`failure` and is re-raised; no bytes are
    produced in that case.
    """

    def __init__(
        self,
        renderer: GraphicRenderer | None = None,
        *,
        target_width: float = A4_WIDTH,
        document_info: Mapping[str, object] | None = None,
        max_workers: int = 1,
    ) -> None:
        self.renderer = renderer if renderer is not None else PyMuPDFRenderer()
        self.target_width = target_width
        self.document_info = dict(document_info) if document_info else None
        self.max_workers = max(1, int(max_workers))
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]
        self.failure: BaseException | None = None

    # -- State handling -------------------------------------------------------

    def _transition(self, state: PipelineState) -> None:
        if self.state in (PipelineState.DONE, PipelineState.FAILED):
            raise UnifyError(f"Pipeline already finished in state '{self.state.value}'")
        if _STATE_ORDER.index(state) <= _STATE_ORDER.index(self.state):
            raise UnifyError(
                f"Illegal transition from '{self.state.value}' to '{state.value}'"
            )
        LOGGER.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _fail(self, exc: BaseException) -> None:
        LOGGER.error("Unification failed while %s: %s", self.state.value, exc)
        self.failure = exc
        self.state = PipelineState.FAILED
        self.history.append(PipelineState.FAILED)

    # -- Entry point ------------------------------------------------------------

    def unify(self, sources: Iterable[Source]) -> bytes:
        """Resolve, merge, normalize and serialize *sources* in input order."""

        if self.state is not PipelineState.IDLE:
            raise UnifyError("UnifyPipeline instances are single-use")

        try:
            source_list = list(sources)
            if not source_list:
                raise UnifyError("No input sources provided")

            self._transition(PipelineState.IMPORTING)
            resolved = self._import_documents(source_list)

            self._transition(PipelineState.CONVERTING)
            self._convert_graphics(source_list, resolved)

            self._transition(PipelineState.MERGING)
            destination = self._merge(source_list, resolved)

            self._transition(PipelineState.NORMALIZING)
            normalize(destination, self.target_width)

            data = serialize(destination)
            self._transition(PipelineState.SERIALIZED)
        except BaseException as exc:
            self._fail(exc)
            raise

        self._transition(PipelineState.DONE)
        LOGGER.info(
            "Unified %d source(s) into %d page(s)", len(source_list), destination.page_count
        )
        return data

    # -- Steps ------------------------------------------------------------------

    def _map(self, func: Callable[[T], R], items: Sequence[T]) -> list[R]:
        if self.max_workers > 1 and len(items) > 1:
            # Executor.map yields results in submission order.
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(func, items))
        return [func(item) for item in items]

    def _import_documents(self, sources: Sequence[Source]) -> list[Container | None]:
        resolved: list[Container | None] = [None] * len(sources)
        positions = [i for i, source in enumerate(sources) if source.kind is SourceKind.DOCUMENT]
        containers = self._map(lambda i: self._load_document(sources[i]), positions)
        for position, container in zip(positions, containers):
            resolved[position] = container
        return resolved

    def _load_document(self, source: Source) -> Container:
        LOGGER.debug("Loading document %r", source)
        return load(source.data)

    def _convert_graphics(
        self, sources: Sequence[Source], resolved: list[Container | None]
    ) -> None:
        positions = [i for i, source in enumerate(sources) if source.kind is SourceKind.GRAPHIC]
        containers = self._map(lambda i: self._render_graphic(sources[i]), positions)
        for position, container in zip(positions, containers):
            resolved[position] = container

    def _render_graphic(self, source: Source) -> Container:
        LOGGER.debug("Rendering graphic %r", source)
        rendered = self.renderer.render(source.data)
        if rendered.page_count == 0:
            raise RenderError(f"Rendering {source.name or 'graphic'} produced no page")
        if rendered.page_count > 1:
            LOGGER.debug(
                "Renderer returned %d pages for %r; keeping the last one",
                rendered.page_count,
                source,
            )
        return isolate_page(rendered, -1)

    def _merge(
        self, sources: Sequence[Source], resolved: Sequence[Container | None]
    ) -> Container:
        destination = Container()
        for source, container in zip(sources, resolved):
            if container is None:
                raise UnifyError(f"Source {source!r} was not resolved")
            merge_container(destination, container)
            if (
                self.document_info is None
                and not destination.info
                and source.kind is SourceKind.DOCUMENT
                and container.info
            ):
                destination.info = dict(container.info)
        if self.document_info is not None:
            destination.info = build_document_info(self.document_info)
        return destination


def unify(
    sources: Iterable[Source],
    renderer: GraphicRenderer | None = None,
    *,
    target_width: float = A4_WIDTH,
    document_info: Mapping[str, object] | None = None,
    max_workers: int = 1,
) -> bytes:
    """Run a fresh :class:`UnifyPipeline` over *sources* and return the PDF bytes."""

    pipeline = UnifyPipeline(
        renderer,
        target_width=target_width,
        document_info=document_info,
        max_workers=max_workers,
    )
    return pipeline.unify(sources)


def unify_files(
    inputs: Iterable[str | Path],
    output: str | Path,
    *,
    renderer: GraphicRenderer | None = None,
    target_width: float = A4_WIDTH,
    document_info: Mapping[str, object] | None = None,
    max_workers: int = 1,
) -> Path:
    """Unify the PDF and SVG files in *inputs* into *output* and return its path."""

    paths = list(inputs)
    if not paths:
        raise UnifyError("No input files provided")
    sources = [Source.from_path(path) for path in paths]

    data = unify(
        sources,
        renderer,
        target_width=target_width,
        document_info=document_info,
        max_workers=max_workers,
    )

    output_path = ensure_output_parent(output)
    try:
        output_path.write_bytes(data)
    except OSError as exc:
        LOGGER.error("Failed to write unified PDF to %s: %s", output_path, exc)
        raise UnifyIOError(f"Failed to write unified PDF to {output_path}") from exc

    LOGGER.info("Unified %d file(s) into %s", len(paths), output_path)
    return output_path


__all__ = [
    "PipelineState",
    "UnifyPipeline",
    "build_document_info",
    "unify",
    "unify_files",
]
