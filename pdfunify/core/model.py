"""In-memory page container model.

A :class:`Container` owns an arena of PDF objects keyed by integer object
ids.  Objects are plain Python values:

* ``dict`` for dictionaries (keys are PDF names such as ``"/Type"``),
* ``list`` for arrays,
* :class:`Stream` for streams (raw, still encoded payload),
* ``None``, ``bool``, ``int``, ``float``, ``str``, ``bytes`` and
  :class:`Name` for primitives,
* :class:`Reference` for links to other objects of the same container.

Pages are page dictionaries listed, in order, by :attr:`Container.page_ids`.
The page tree itself (``/Parent`` and ``/Kids`` links) is not part of the
model; it is rebuilt when the container is serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from pypdf import Transformation

from ..exceptions import GraphIntegrityError, PreconditionError
from .geometry import Box, content_matrix_operator, transform_points

__all__ = [
    "Name",
    "Reference",
    "Stream",
    "Container",
    "Page",
    "BOX_KEYS",
    "INHERITABLE_PAGE_KEYS",
    "iter_references",
    "rewrite_references",
]

BOX_KEYS = ("/MediaBox", "/CropBox", "/BleedBox", "/TrimBox", "/ArtBox")
INHERITABLE_PAGE_KEYS = ("/Resources", "/MediaBox", "/CropBox", "/Rotate")

_POINT_LIST_KEYS = ("/QuadPoints", "/Vertices", "/L", "/CL")


class Name(str):
    """PDF name value, stored with its leading slash (``"/Page"``)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Name({str.__repr__(self)})"


@dataclass(frozen=True, slots=True)
class Reference:
    """Indirect reference to an object of the owning container."""

    object_id: int


@dataclass(slots=True)
class Stream:
    dictionary: dict[str, Any] = field(default_factory=dict)
    data: bytes = b""


PAGE_TYPE = Name("/Page")


def iter_references(value: Any) -> Iterator[Reference]:
    """Yield every :class:`Reference` nested in *value* without following it."""

    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, Reference):
            yield current
        elif isinstance(current, Stream):
            stack.extend(reversed(list(current.dictionary.values())))
        elif isinstance(current, dict):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, list):
            stack.extend(reversed(current))


def rewrite_references(value: Any, mapping: Mapping[int, int]) -> Any:
    """Return a deep copy of *value* with every reference remapped through *mapping*."""

    if isinstance(value, Reference):
        try:
            return Reference(mapping[value.object_id])
        except KeyError as exc:
            raise GraphIntegrityError(
                f"No mapping for referenced object {value.object_id}"
            ) from exc
    if isinstance(value, Stream):
        return Stream(
            {key: rewrite_references(item, mapping) for key, item in value.dictionary.items()},
            value.data,
        )
    if isinstance(value, dict):
        return {key: rewrite_references(item, mapping) for key, item in value.items()}
    if isinstance(value, list):
        return [rewrite_references(item, mapping) for item in value]
    return value


@dataclass
class Container:
    """Object graph and ordered page list of one document."""

    objects: dict[int, Any] = field(default_factory=dict)
    page_ids: list[int] = field(default_factory=list)
    info: dict[str, str] = field(default_factory=dict)
    version: str = "1.7"
    next_id: int = 1

    def __post_init__(self) -> None:
        self.next_id = max(self.next_id, max(self.objects, default=0) + 1)

    # -- Object arena -------------------------------------------------------

    def allocate(self) -> int:
        """Reserve a fresh object id; ids are never handed out twice."""

        object_id = self.next_id
        self.next_id += 1
        return object_id

    def add(self, obj: Any) -> Reference:
        object_id = self.allocate()
        self.objects[object_id] = obj
        return Reference(object_id)

    def get_object(self, object_id: int) -> Any:
        try:
            return self.objects[object_id]
        except KeyError as exc:
            raise GraphIntegrityError(
                f"Object {object_id} is not present in the container"
            ) from exc

    def resolve(self, value: Any) -> Any:
        """Follow *value* if it is a reference, otherwise return it unchanged."""

        if isinstance(value, Reference):
            return self.get_object(value.object_id)
        return value

    def dangling_references(self) -> list[tuple[int, Reference]]:
        """Return ``(owner_id, reference)`` pairs whose target is missing."""

        missing: list[tuple[int, Reference]] = []
        for object_id, obj in self.objects.items():
            for reference in iter_references(obj):
                if reference.object_id not in self.objects:
                    missing.append((object_id, reference))
        return missing

    def verify(self) -> None:
        """Raise :class:`GraphIntegrityError` unless the graph is self-contained."""

        for position, object_id in enumerate(self.page_ids):
            if not isinstance(self.objects.get(object_id), dict):
                raise GraphIntegrityError(
                    f"Page {position} refers to object {object_id}, which is not a dictionary"
                )
        missing = self.dangling_references()
        if missing:
            owner, reference = missing[0]
            raise GraphIntegrityError(
                f"Object {owner} references missing object {reference.object_id}"
                f" ({len(missing)} dangling reference(s) in total)"
            )

    # -- Pages ----------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return len(self.page_ids)

    def page(self, index: int) -> "Page":
        return Page(self, self.page_ids[index])

    def pages(self) -> list["Page"]:
        return [Page(self, object_id) for object_id in self.page_ids]

    def append_page(self, object_id: int) -> "Page":
        if not isinstance(self.get_object(object_id), dict):
            raise GraphIntegrityError(f"Object {object_id} is not a page dictionary")
        self.page_ids.append(object_id)
        return Page(self, object_id)


class Page:
    """View over a page dictionary stored in a :class:`Container`."""

    def __init__(self, container: Container, object_id: int) -> None:
        self.container = container
        self.object_id = object_id

    def __repr__(self) -> str:
        return f"Page(object_id={self.object_id})"

    @property
    def dictionary(self) -> dict[str, Any]:
        obj = self.container.get_object(self.object_id)
        if not isinstance(obj, dict):
            raise GraphIntegrityError(f"Object {self.object_id} is not a page dictionary")
        return obj

    # -- Geometry -------------------------------------------------------------

    def _box(self, key: str) -> Box | None:
        value = self.container.resolve(self.dictionary.get(key))
        if value is None:
            return None
        if not isinstance(value, list):
            raise PreconditionError(f"Page {self.object_id} has a malformed {key}")
        return Box.from_array([self.container.resolve(item) for item in value])

    @property
    def media_box(self) -> Box:
        box = self._box("/MediaBox")
        if box is None:
            raise PreconditionError(f"Page {self.object_id} has no /MediaBox")
        return box

    @property
    def width(self) -> float:
        return self.media_box.width

    @property
    def height(self) -> float:
        return self.media_box.height

    @property
    def rotation(self) -> int:
        value = self.container.resolve(self.dictionary.get("/Rotate"))
        return int(value or 0)

    def boxes(self) -> dict[str, Box]:
        found: dict[str, Box] = {}
        for key in BOX_KEYS:
            box = self._box(key)
            if box is not None:
                found[key] = box
        return found

    # -- Content and resources -----------------------------------------------

    @property
    def resources(self) -> dict[str, Any]:
        value = self.container.resolve(self.dictionary.get("/Resources"))
        return value if isinstance(value, dict) else {}

    @property
    def content_references(self) -> list[Any]:
        """Return the page content as a list of stream references."""

        value = self.dictionary.get("/Contents")
        if value is None:
            return []
        resolved = self.container.resolve(value)
        if isinstance(resolved, list):
            return list(resolved)
        return [value]

    @property
    def content_data(self) -> bytes:
        """Concatenate the raw payloads of all content streams."""

        chunks = []
        for item in self.content_references:
            stream = self.container.resolve(item)
            if isinstance(stream, Stream):
                chunks.append(stream.data)
        return b"\n".join(chunks)

    @property
    def annotations(self) -> list[dict[str, Any]]:
        value = self.container.resolve(self.dictionary.get("/Annots"))
        if not isinstance(value, list):
            return []
        annotations = []
        for item in value:
            annotation = self.container.resolve(item)
            if isinstance(annotation, dict):
                annotations.append(annotation)
        return annotations

    # -- Transforms -----------------------------------------------------------

    def apply_transformation(self, transformation: Transformation) -> None:
        """Map the whole page through *transformation*.

        Boundary boxes and annotation geometry are rewritten in place.  The
        drawing instructions are left untouched: they are wrapped between a
        ``q <matrix> cm`` prefix stream and a ``Q`` suffix stream.
        """

        page = self.dictionary
        for key, box in self.boxes().items():
            page[key] = box.transformed(transformation).to_array()

        contents = self.content_references
        if contents:
            prefix = Stream(data=b"q\n" + content_matrix_operator(transformation) + b"\n")
            suffix = Stream(data=b"\nQ\n")
            page["/Contents"] = [
                self.container.add(prefix),
                *contents,
                self.container.add(suffix),
            ]

        for annotation in self.annotations:
            _transform_annotation(self.container, annotation, transformation)


def _transform_annotation(
    container: Container, annotation: dict[str, Any], transformation: Transformation
) -> None:
    rect = container.resolve(annotation.get("/Rect"))
    if isinstance(rect, list) and len(rect) == 4:
        box = Box.from_array([container.resolve(item) for item in rect])
        annotation["/Rect"] = box.transformed(transformation).to_array()

    for key in _POINT_LIST_KEYS:
        points = container.resolve(annotation.get(key))
        if isinstance(points, list) and points:
            annotation[key] = transform_points(
                [container.resolve(item) for item in points], transformation
            )

    ink = container.resolve(annotation.get("/InkList"))
    if isinstance(ink, list):
        strokes = []
        for stroke in ink:
            stroke = container.resolve(stroke)
            if isinstance(stroke, list):
                strokes.append(
                    transform_points([container.resolve(item) for item in stroke], transformation)
                )
        annotation["/InkList"] = strokes

    differences = container.resolve(annotation.get("/RD"))
    if isinstance(differences, list) and len(differences) == 4:
        sx, sy = abs(transformation.ctm[0]), abs(transformation.ctm[3])
        left, top, right, bottom = (float(container.resolve(item)) for item in differences)
        annotation["/RD"] = [left * sx, top * sy, right * sx, bottom * sy]
