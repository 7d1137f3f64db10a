"""Input sources accepted by the unification pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..core.validator import ensure_source_exists
from ..exceptions import UnifyIOError


class SourceKind(str, Enum):
    DOCUMENT = "document"
    GRAPHIC = "graphic"


_SUFFIX_KINDS = {
    ".pdf": SourceKind.DOCUMENT,
    ".svg": SourceKind.GRAPHIC,
}


def classify_path(path: str | Path) -> SourceKind:
    """Return the :class:`SourceKind` implied by the file suffix of *path*."""

    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIX_KINDS[suffix]
    except KeyError as exc:
        raise UnifyIOError(f"Unsupported input type '{suffix or path}'; expected .pdf or .svg") from exc


@dataclass(frozen=True, slots=True)
class Source:
    """One tagged input of the pipeline."""

    kind: SourceKind
    data: bytes
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", SourceKind(self.kind))

    def __repr__(self) -> str:
        label = self.name or "<bytes>"
        return f"Source(kind={self.kind.value}, name={label!r}, size={len(self.data)})"

    @classmethod
    def from_path(cls, path: str | Path) -> "Source":
        """Read *path* and classify it by suffix."""

        kind = classify_path(path)
        resolved = ensure_source_exists(path)
        try:
            data = resolved.read_bytes()
        except OSError as exc:
            raise UnifyIOError(f"Failed to read {resolved}") from exc
        return cls(kind=kind, data=data, name=str(resolved))


__all__ = ["Source", "SourceKind", "classify_path"]
