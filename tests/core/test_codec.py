from __future__ import annotations

import zlib
from io import BytesIO

import pytest
from pypdf import PdfReader

from pdfunify.core import Box, Container, Reference, load, serialize
from pdfunify.core.model import Name, Stream
from pdfunify.exceptions import GraphIntegrityError, ParseError


def _stream(payload: bytes) -> bytes:
    return b"<< /Length %d >>\nstream\n%s\nendstream" % (len(payload), payload)


def test_load_reads_pages_and_metadata(pdf_bytes_factory) -> None:
    container = load(pdf_bytes_factory([(300, 400), (600, 200)], title="Codec"))

    assert container.page_count == 2
    assert [(page.width, page.height) for page in container.pages()] == [(300, 400), (600, 200)]
    assert b"% page 1" in container.page(1).content_data
    assert "/Parent" not in container.page(0).dictionary
    assert container.info["/Title"] == "Codec"
    assert container.version.startswith("1.")
    container.verify()


def test_load_resolves_inherited_page_attributes(raw_pdf_factory) -> None:
    payload = b"0 0 10 10 re f"
    data = raw_pdf_factory(
        [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            b"<< /Type /Pages /Kids [3 0 R] /Count 1 /MediaBox [0 0 500 250]"
            b" /Resources << /ProcSet [/PDF] >> >>",
            b"<< /Type /Page /Parent 2 0 R /Contents 4 0 R >>",
            _stream(payload),
        ]
    )

    page = load(data).page(0)

    assert page.media_box == Box(0, 0, 500, 250)
    assert page.resources == {"/ProcSet": [Name("/PDF")]}
    assert page.content_data == payload


def test_load_terminates_on_cyclic_references(raw_pdf_factory) -> None:
    data = raw_pdf_factory(
        [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 100 100] /Annots [4 0 R] >>",
            b"<< /Type /Annot /Subtype /Text /Rect [0 0 10 10] /P 3 0 R >>",
        ]
    )

    container = load(data)

    annotation = container.page(0).annotations[0]
    assert annotation["/P"] == Reference(container.page_ids[0])
    container.verify()


def test_load_rejects_reference_to_missing_object(dangling_pdf: bytes) -> None:
    with pytest.raises(ParseError, match="missing object"):
        load(dangling_pdf)


def test_load_rejects_missing_catalog(raw_pdf_factory) -> None:
    data = raw_pdf_factory([b"<< /Type /Font >>"], root=7)
    with pytest.raises(ParseError):
        load(data)


@pytest.mark.parametrize("data", [b"", b"this is not a pdf document"])
def test_load_rejects_invalid_bytes(data: bytes) -> None:
    with pytest.raises(ParseError):
        load(data)


def test_serialize_round_trip(pdf_bytes_factory) -> None:
    container = load(pdf_bytes_factory([(300, 400), (100, 100)], title="Round"))

    data = serialize(container)

    reader = PdfReader(BytesIO(data))
    assert len(reader.pages) == 2
    assert float(reader.pages[0].mediabox.width) == 300
    assert float(reader.pages[1].mediabox.height) == 100
    assert reader.metadata.title == "Round"
    reloaded = load(data)
    assert b"% page 0" in reloaded.page(0).content_data
    assert b"% page 1" in reloaded.page(1).content_data


def test_serialize_is_self_contained(container_factory) -> None:
    data = serialize(container_factory([(100, 200), (100, 200)]))

    reader = PdfReader(BytesIO(data))
    assert reader.metadata.producer == "pdfunify"

    reloaded = load(data)
    first, second = reloaded.pages()
    assert b"(page 1)" in second.content_data
    assert isinstance(first.dictionary["/Resources"], Reference)
    assert first.dictionary["/Resources"] == second.dictionary["/Resources"]


def test_serialize_writes_page_tree_and_file_identifier(container_factory) -> None:
    container = container_factory([(100, 200), (300, 400)])
    container.version = "1.6"

    data = serialize(container)

    assert data.startswith(b"%PDF-1.6")
    reader = PdfReader(BytesIO(data))
    assert len(reader.trailer["/ID"]) == 2
    catalog = reader.trailer["/Root"]
    assert catalog["/Pages"]["/Count"] == 2
    for page in reader.pages:
        assert page.raw_get("/Parent").idnum == catalog.raw_get("/Pages").idnum
    assert [float(page.mediabox.width) for page in reader.pages] == [100, 300]


def test_serialize_keeps_encoded_stream_bytes() -> None:
    container = Container()
    encoded = zlib.compress(b"0 0 10 10 re f")
    content = container.add(Stream({"/Filter": Name("/FlateDecode")}, encoded))
    page = container.add({"/Type": Name("/Page"), "/MediaBox": [0, 0, 10, 10], "/Contents": content})
    container.page_ids.append(page.object_id)

    reloaded = load(serialize(container))

    assert reloaded.resolve(reloaded.page(0).dictionary["/Contents"]).data == encoded


def test_serialize_refuses_dangling_reference(container_factory) -> None:
    container = container_factory()
    container.page(0).dictionary["/Thumb"] = Reference(999)

    with pytest.raises(GraphIntegrityError):
        serialize(container)


def test_serialize_empty_container() -> None:
    reader = PdfReader(BytesIO(serialize(Container())))
    assert len(reader.pages) == 0
