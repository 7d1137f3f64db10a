from __future__ import annotations

import math

import pytest

from pdfunify.core.model import Container, Name
from pdfunify.exceptions import PreconditionError
from pdfunify.normalize import A4_WIDTH, normalize, normalize_page


def test_pages_of_mixed_width_end_up_equal(container_factory) -> None:
    container = container_factory([(300, 400), (1200, 600)])

    normalize(container, A4_WIDTH)

    first, second = container.pages()
    assert math.isclose(first.width, A4_WIDTH)
    assert math.isclose(second.width, A4_WIDTH)
    assert math.isclose(first.height, 400 * A4_WIDTH / 300)
    assert math.isclose(second.height, 600 * A4_WIDTH / 1200)


def test_normalize_page_returns_scale_factor(container_factory) -> None:
    page = container_factory([(1200, 600)]).page(0)

    factor = normalize_page(page, 600)

    assert factor == pytest.approx(0.5)
    assert page.width == pytest.approx(600)
    assert page.height == pytest.approx(300)


def test_normalize_preserves_aspect_ratio(container_factory) -> None:
    page = container_factory([(123.5, 987.25)]).page(0)
    ratio = page.width / page.height

    normalize_page(page, A4_WIDTH)

    assert page.width / page.height == pytest.approx(ratio)


def test_normalize_is_idempotent(container_factory) -> None:
    container = container_factory([(300, 400)])
    normalize(container, A4_WIDTH)
    page = container.page(0)
    contents = list(page.dictionary["/Contents"])
    object_count = len(container.objects)

    assert normalize_page(page, A4_WIDTH) == 1.0
    assert page.dictionary["/Contents"] == contents
    assert len(container.objects) == object_count


def test_page_at_target_width_is_untouched(container_factory) -> None:
    container = container_factory([(A4_WIDTH, 842)])
    before = dict(container.page(0).dictionary)

    normalize(container, A4_WIDTH)

    assert container.page(0).dictionary == before


def test_rotation_is_left_alone(container_factory) -> None:
    container = container_factory([(300, 400)])
    container.page(0).dictionary["/Rotate"] = 90

    normalize(container, 600)

    page = container.page(0)
    assert page.rotation == 90
    assert page.width == pytest.approx(600)
    assert page.height == pytest.approx(800)


def test_offset_media_box_is_scaled_about_origin(container_factory) -> None:
    container = container_factory()
    container.page(0).dictionary["/MediaBox"] = [50, 100, 250, 300]

    normalize_page(container.page(0), 400)

    assert container.page(0).dictionary["/MediaBox"] == pytest.approx([100, 200, 500, 600])


def test_annotations_follow_the_page(container_factory) -> None:
    container = container_factory([(200, 200)])
    page = container.page(0)
    link = container.add({"/Type": Name("/Annot"), "/Subtype": Name("/Link"), "/Rect": [20, 20, 40, 40]})
    page.dictionary["/Annots"] = [link]

    normalize_page(page, 400)

    assert container.get_object(link.object_id)["/Rect"] == [40, 40, 80, 80]


def test_zero_width_page_is_rejected() -> None:
    container = Container()
    page = container.add({"/Type": Name("/Page"), "/MediaBox": [10, 0, 10, 100]})
    container.page_ids.append(page.object_id)

    with pytest.raises(PreconditionError):
        normalize(container, A4_WIDTH)


@pytest.mark.parametrize("target", [0, -10])
def test_non_positive_target_is_rejected(container_factory, target: float) -> None:
    with pytest.raises(PreconditionError):
        normalize_page(container_factory().page(0), target)


def test_non_positive_target_is_rejected_for_empty_container() -> None:
    with pytest.raises(PreconditionError):
        normalize(Container(), 0)
