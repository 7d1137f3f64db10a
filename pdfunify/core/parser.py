"""Load PDF bytes into a :class:`~pdfunify.core.model.Container`.

The parser relies on :class:`pypdf.PdfReader` for tokenizing, cross-reference
handling and decryption, then walks the object graph reachable from every
page and converts it into the plain-Python container model.  Each indirect
object of the file is visited once, so cyclic graphs (annotations pointing
back at their page, for instance) terminate.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

from pypdf import PasswordType, PdfReader
from pypdf.generic import (
    ArrayObject,
    BooleanObject,
    ByteStringObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    NullObject,
    NumberObject,
    StreamObject,
    TextStringObject,
)

from ..exceptions import ParseError, UnifyError
from .model import INHERITABLE_PAGE_KEYS, PAGE_TYPE, Container, Name, Reference, Stream

__all__ = ["load", "open_reader"]

LOGGER = logging.getLogger("pdfunify.core")


def open_reader(data: bytes) -> PdfReader:
    """Return a decrypted :class:`PdfReader` over *data*."""

    if not data:
        raise ParseError("Empty input; expected PDF bytes")
    try:
        reader = PdfReader(BytesIO(data))
    except Exception as exc:  # pragma: no cover - dependency exceptions vary
        LOGGER.error("Failed to open PDF: %s", exc)
        raise ParseError(f"Unable to read PDF: {exc}") from exc

    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF")
        try:
            result = reader.decrypt("")
        except Exception as exc:  # pragma: no cover - decrypt errors vary
            raise ParseError("Unable to decrypt encrypted PDF") from exc
        if result == PasswordType.NOT_DECRYPTED:
            raise ParseError("Encrypted PDF requires a password")
    return reader


def load(data: bytes) -> Container:
    """Parse *data* and return the page container it describes.

    Raises:
        ParseError: If the bytes are not a readable PDF or if any object
            reachable from a page references an object the file does not
            define.
    """

    reader = open_reader(data)
    try:
        container = _GraphBuilder(reader).build()
    except UnifyError:
        raise
    except Exception as exc:  # pragma: no cover - dependency exceptions vary
        LOGGER.error("Malformed PDF structure: %s", exc)
        raise ParseError(f"Malformed PDF structure: {exc}") from exc

    LOGGER.debug(
        "Loaded container with %d page(s) and %d object(s)",
        container.page_count,
        len(container.objects),
    )
    return container


class _GraphBuilder:
    """Convert the page-reachable part of a reader's graph into a container."""

    def __init__(self, reader: PdfReader) -> None:
        self.reader = reader
        self.container = Container()
        self._ids: dict[tuple[int, int], int] = {}
        self._pending: list[tuple[int, IndirectObject]] = []

    def build(self) -> Container:
        container = self.container
        container.version = _header_version(self.reader)

        root = self.reader.trailer.get("/Root")
        catalog = self.reader.get_object(root) if isinstance(root, IndirectObject) else root
        if not isinstance(catalog, DictionaryObject):
            raise ParseError("Document has no catalog (/Root)")

        for number, page in enumerate(self.reader.pages):
            indirect = page.indirect_reference
            if indirect is None:
                # Direct page dictionaries are not addressable; give them an id.
                reference = container.add(self._convert_page(page))
            else:
                reference = self._reference(indirect)
            LOGGER.debug("Page %d mapped to object %d", number, reference.object_id)
            container.page_ids.append(reference.object_id)
            self._drain()

        container.info = self._read_info()
        return container

    # -- Traversal ----------------------------------------------------------

    def _reference(self, indirect: IndirectObject) -> Reference:
        key = (indirect.idnum, indirect.generation)
        object_id = self._ids.get(key)
        if object_id is None:
            object_id = self.container.allocate()
            self._ids[key] = object_id
            self._pending.append((object_id, indirect))
        return Reference(object_id)

    def _drain(self) -> None:
        while self._pending:
            object_id, indirect = self._pending.pop()
            resolved = self.reader.get_object(indirect)
            if resolved is None:
                raise ParseError(
                    f"Reference {indirect.idnum} {indirect.generation} R points to a missing object"
                )
            if isinstance(resolved, DictionaryObject) and resolved.get("/Type") == PAGE_TYPE:
                self.container.objects[object_id] = self._convert_page(resolved)
            else:
                self.container.objects[object_id] = self._convert(resolved)

    def _convert_page(self, page: DictionaryObject) -> dict[str, Any]:
        converted = {
            str(key): self._convert(value)
            for key, value in page.items()
            if key != "/Parent"
        }
        for key in INHERITABLE_PAGE_KEYS:
            if key not in converted:
                inherited = _inherit(page, key)
                if inherited is not None:
                    converted[key] = self._convert(inherited)
        return converted

    def _convert(self, value: Any) -> Any:
        if isinstance(value, IndirectObject):
            return self._reference(value)
        if value is None or isinstance(value, NullObject):
            return None
        if isinstance(value, BooleanObject):
            return bool(value.value)
        if isinstance(value, NameObject):
            return Name(value)
        if isinstance(value, FloatObject):
            return float(value)
        if isinstance(value, NumberObject):
            return int(value)
        if isinstance(value, TextStringObject):
            return str(value)
        if isinstance(value, ByteStringObject):
            return bytes(value)
        if isinstance(value, StreamObject):
            dictionary = {
                str(key): self._convert(item)
                for key, item in value.items()
                if key != "/Length"
            }
            return Stream(dictionary, bytes(value._data))  # type: ignore[attr-defined]
        if isinstance(value, DictionaryObject):
            return {str(key): self._convert(item) for key, item in value.items()}
        if isinstance(value, ArrayObject):
            return [self._convert(item) for item in value]
        raise ParseError(f"Unsupported PDF object type: {type(value).__name__}")

    # -- Document level data --------------------------------------------------

    def _read_info(self) -> dict[str, str]:
        try:
            metadata = self.reader.metadata
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            LOGGER.warning("Failed to read document information: %s", exc)
            return {}
        if not metadata:
            return {}
        info: dict[str, str] = {}
        for key, value in metadata.items():
            if isinstance(value, IndirectObject):
                value = value.get_object()
            if isinstance(value, str):
                info[str(key)] = str(value)
        return info


def _header_version(reader: PdfReader) -> str:
    header = reader.pdf_header
    if header.startswith("%PDF-"):
        return header[5:].strip() or "1.7"
    return "1.7"


def _inherit(page: DictionaryObject, key: str) -> Any | None:
    """Look *key* up along the ``/Parent`` chain of *page*."""

    visited: set[int] = set()
    current: DictionaryObject | None = page
    while current is not None:
        obj_id = id(current)
        if obj_id in visited:
            break
        visited.add(obj_id)
        candidate = current.get(key)
        if candidate is not None:
            return candidate
        parent = current.get("/Parent")
        parent_resolved = parent.get_object() if isinstance(parent, IndirectObject) else parent
        current = parent_resolved if isinstance(parent_resolved, DictionaryObject) else None
    return None
