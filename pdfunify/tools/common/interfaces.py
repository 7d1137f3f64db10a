"""Core interfaces and context objects shared by pdfunify tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...core.utils import resolve_path
from ...render.base import GraphicRenderer


@dataclass
class ConversionContext:
    """Holds shared execution state for a tool invocation."""

    input_path: Path | None = None
    output_path: Path | None = None
    renderer: GraphicRenderer | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.input_path, (str, Path)) and self.input_path is not None:
            self.input_path = resolve_path(self.input_path)
        if isinstance(self.output_path, (str, Path)) and self.output_path is not None:
            self.output_path = resolve_path(self.output_path)

    def input_paths(self) -> list[Path]:
        """Return ``config["inputs"]`` or, failing that, ``[input_path]``."""

        inputs = self.config.get("inputs")
        if inputs is None:
            return [self.input_path] if self.input_path is not None else []
        return [resolve_path(path) for path in inputs]


class BaseTool:
    """Base class for all pluggable pdfunify tools."""

    name: str

    def __init__(self, context: ConversionContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError
