"""Serialize a :class:`~pdfunify.core.model.Container` into PDF bytes.

Container objects are registered as indirect objects of a
:class:`pypdf.PdfWriter` in two passes: empty shells are added first so every
object id has a writer reference, then the shells are filled with converted
values.  Pages are appended through :meth:`PdfWriter.add_page`, which builds
the page tree; the writer emits the cross-reference table and trailer.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

from pypdf import PageObject, PdfWriter
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
    PdfObject,
    StreamObject,
    create_string_object,
)

from .model import PAGE_TYPE, Container, Name, Reference, Stream

__all__ = ["serialize", "DEFAULT_PRODUCER"]

LOGGER = logging.getLogger("pdfunify.core")

DEFAULT_PRODUCER = "pdfunify"


def serialize(container: Container, *, producer: str | None = DEFAULT_PRODUCER) -> bytes:
    """Return a self-contained PDF byte string for *container*.

    Raises:
        GraphIntegrityError: If any object references an object missing
            from *container*; nothing is written in that case.
    """

    container.verify()

    writer = PdfWriter()
    writer.pdf_header = f"%PDF-{container.version}"
    builder = _ObjectBuilder(writer, container)
    builder.build()

    for object_id in container.page_ids:
        writer.add_page(builder.pages[object_id])

    metadata: dict[str, str] = {}
    if producer:
        metadata["/Producer"] = producer
    for key, value in container.info.items():
        metadata[key if key.startswith("/") else f"/{key}"] = value
    if metadata:
        writer.add_metadata(metadata)
    writer.generate_file_identifiers()

    output = BytesIO()
    writer.write(output)
    LOGGER.debug(
        "Serialized %d page(s) from %d object(s)",
        container.page_count,
        len(container.objects),
    )
    return output.getvalue()


class _ObjectBuilder:
    """Mirror the container's objects as indirect objects of *writer*."""

    def __init__(self, writer: PdfWriter, container: Container) -> None:
        self.writer = writer
        self.container = container
        self.references: dict[int, IndirectObject] = {}
        self.pages: dict[int, PageObject] = {}
        self._shells: dict[int, PdfObject] = {}

    def build(self) -> None:
        page_ids = set(self.container.page_ids)
        for object_id in sorted(self.container.objects):
            value = self.container.objects[object_id]
            if object_id in page_ids:
                shell: PdfObject = PageObject(self.writer)
                self.pages[object_id] = shell
            elif isinstance(value, Stream):
                shell = StreamObject()
            elif isinstance(value, dict):
                shell = DictionaryObject()
            elif isinstance(value, list):
                shell = ArrayObject()
            else:
                shell = self.convert(value)
            self.references[object_id] = self.writer._add_object(shell)
            self._shells[object_id] = shell

        for object_id, shell in self._shells.items():
            value = self.container.objects[object_id]
            if isinstance(value, Stream):
                self._fill_dictionary(shell, value.dictionary)
                shell.set_data(value.data)
            elif isinstance(value, dict):
                self._fill_dictionary(shell, value)
            elif isinstance(value, list):
                shell.extend(self.convert(item) for item in value)

        for page in self.pages.values():
            page[NameObject("/Type")] = NameObject(PAGE_TYPE)

    def _fill_dictionary(self, target: DictionaryObject, value: dict[str, Any]) -> None:
        for key, item in value.items():
            target[NameObject(key)] = self.convert(item)

    def convert(self, value: Any) -> PdfObject:
        if isinstance(value, Reference):
            return self.references[value.object_id]
        if value is None:
            return NullObject()
        if isinstance(value, bool):
            return BooleanObject(value)
        if isinstance(value, Name):
            return NameObject(value)
        if isinstance(value, int):
            return NumberObject(value)
        if isinstance(value, float):
            return FloatObject(value)
        if isinstance(value, str):
            return create_string_object(value)
        if isinstance(value, bytes):
            return ByteStringObject(value)
        if isinstance(value, Stream):
            # Streams are always indirect in a PDF file.
            stream = StreamObject()
            self._fill_dictionary(stream, value.dictionary)
            stream.set_data(value.data)
            return self.writer._add_object(stream)
        if isinstance(value, dict):
            dictionary = DictionaryObject()
            self._fill_dictionary(dictionary, value)
            return dictionary
        if isinstance(value, list):
            return ArrayObject(self.convert(item) for item in value)
        raise TypeError(f"Cannot serialize value of type {type(value).__name__}")
