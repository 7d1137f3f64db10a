from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import ArrayObject, DecodedStreamObject, DictionaryObject, FloatObject, NameObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfunify.core.model import Container, Name, Stream  # noqa: E402

SVG_MARKUP = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="400" height="200">'
    b'<rect x="10" y="10" width="380" height="180" fill="#3366cc"/>'
    b"</svg>"
)


def _pdf_bytes(
    sizes: Sequence[tuple[float, float]],
    title: str | None = None,
    *,
    annotate: bool = False,
) -> bytes:
    writer = PdfWriter()
    for index, (width, height) in enumerate(sizes):
        page = writer.add_blank_page(width=width, height=height)
        stream = DecodedStreamObject()
        stream.set_data(f"q 0 0 {width} {height} re f Q % page {index}".encode("ascii"))
        page[NameObject("/Contents")] = writer._add_object(stream)
        page[NameObject("/Resources")] = DictionaryObject()
        if annotate:
            annotation = DictionaryObject()
            annotation[NameObject("/Type")] = NameObject("/Annot")
            annotation[NameObject("/Subtype")] = NameObject("/Square")
            annotation[NameObject("/Rect")] = ArrayObject(
                [FloatObject(10), FloatObject(20), FloatObject(50), FloatObject(60)]
            )
            page[NameObject("/Annots")] = ArrayObject([writer._add_object(annotation)])
    if title is not None:
        writer.add_metadata({"/Title": title, "/Author": "pdfunify-tests"})
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def pdf_bytes_factory() -> Callable[..., bytes]:
    return _pdf_bytes


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(
        filename: str,
        sizes: Sequence[tuple[float, float]] = ((72, 72),),
        title: str | None = None,
    ) -> Path:
        path = tmp_path / filename
        path.write_bytes(_pdf_bytes(sizes, title))
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", sizes=[(300, 400)], title="Document One")
    pdf2 = pdf_factory("two.pdf", sizes=[(1200, 600), (600, 600)])
    return [pdf1, pdf2]


@pytest.fixture()
def svg_file(tmp_path: Path) -> Path:
    path = tmp_path / "graphic.svg"
    path.write_bytes(SVG_MARKUP)
    return path


def _raw_pdf(objects: Sequence[bytes], root: int = 1) -> bytes:
    """Assemble a classic PDF from object bodies numbered from 1."""

    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"
    xref = len(output)
    output += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode("ascii")
    output += f"trailer\n<< /Size {len(objects) + 1} /Root {root} 0 R >>\n".encode("ascii")
    output += f"startxref\n{xref}\n%%EOF\n".encode("ascii")
    return bytes(output)


@pytest.fixture()
def raw_pdf_factory() -> Callable[..., bytes]:
    return _raw_pdf


@pytest.fixture()
def dangling_pdf() -> bytes:
    return _raw_pdf(
        [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 100 100] /Contents 42 0 R >>",
        ]
    )


def _container(
    sizes: Sequence[tuple[float, float]] = ((100, 200),),
    *,
    shared_resources: bool = True,
) -> Container:
    """Build an in-memory container whose pages share one resource dictionary."""

    container = Container()
    font = container.add({"/Type": Name("/Font"), "/Subtype": Name("/Type1"), "/BaseFont": Name("/Helvetica")})
    shared = container.add({"/Font": {"/F1": font}})
    for index, (width, height) in enumerate(sizes):
        content = container.add(Stream(data=f"BT /F1 12 Tf (page {index}) Tj ET".encode("ascii")))
        resources = shared if shared_resources else container.add({"/Font": {"/F1": font}})
        page = container.add(
            {
                "/Type": Name("/Page"),
                "/MediaBox": [0, 0, width, height],
                "/Resources": resources,
                "/Contents": content,
            }
        )
        container.page_ids.append(page.object_id)
    return container


@pytest.fixture()
def container_factory() -> Callable[..., Container]:
    return _container


class FakeRenderer:
    """Renderer double producing *pages* pages tagged by their index."""

    def __init__(self, pages: int = 1, width: float = 400, height: float = 200) -> None:
        self.pages = pages
        self.width = width
        self.height = height
        self.calls: list[bytes] = []

    def render(self, markup: bytes) -> Container:
        self.calls.append(markup)
        container = Container()
        for index in range(self.pages):
            content = container.add(Stream(data=f"% rendered page {index}".encode("ascii")))
            page = container.add(
                {
                    "/Type": Name("/Page"),
                    "/MediaBox": [0, 0, self.width, self.height],
                    "/Resources": {},
                    "/Contents": content,
                }
            )
            container.page_ids.append(page.object_id)
        return container


@pytest.fixture()
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def renderer_factory() -> Callable[..., FakeRenderer]:
    return FakeRenderer
