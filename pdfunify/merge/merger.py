"""Copy pages between containers with object ids remapped.

One merge call copies the requested pages together with every object
transitively reachable from them.  Objects shared by those pages (fonts,
images, links between the pages) are copied once and stay shared in the
destination; objects are never shared between two containers or between two
merge calls.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..core.model import Container, Page, iter_references, rewrite_references
from ..exceptions import GraphIntegrityError

LOGGER = logging.getLogger("pdfunify.merge")


def collect_closure(container: Container, *root_ids: int) -> list[int]:
    """Return the ids of every object reachable from *root_ids*.

    Uses an explicit work stack and a visited map so cyclic graphs terminate
    and each object is listed once.

    Raises:
        GraphIntegrityError: If a reference points to an object missing from
            *container*.
    """

    visited: dict[int, None] = {}
    stack: list[tuple[int, int | None]] = [(root_id, None) for root_id in reversed(root_ids)]
    while stack:
        object_id, owner = stack.pop()
        if object_id in visited:
            continue
        if object_id not in container.objects:
            origin = f"object {owner}" if owner is not None else "the page list"
            raise GraphIntegrityError(
                f"Reference from {origin} to missing object {object_id}"
            )
        visited[object_id] = None
        for reference in iter_references(container.objects[object_id]):
            if reference.object_id not in visited:
                stack.append((reference.object_id, object_id))
    return list(visited)


def merge_pages(
    destination: Container, source: Container, page_indices: Iterable[int]
) -> list[Page]:
    """Append copies of the pages *page_indices* of *source* to *destination*.

    References between the selected pages resolve to their new copies.  The
    destination is left untouched if the source graph turns out to be broken.

    Raises:
        IndexError: If an index is out of range for *source*.
        ValueError: If the same page is requested twice.
        GraphIntegrityError: If a page references a missing object.
    """

    page_ids = [source.page_ids[index] for index in page_indices]
    if len(set(page_ids)) != len(page_ids):
        raise ValueError("A page can only be listed once per merge")

    closure = collect_closure(source, *page_ids)
    for page_id in page_ids:
        if not isinstance(source.objects[page_id], dict):
            raise GraphIntegrityError(f"Object {page_id} is not a page dictionary")

    mapping = {object_id: destination.allocate() for object_id in closure}
    for object_id in closure:
        destination.objects[mapping[object_id]] = rewrite_references(
            source.objects[object_id], mapping
        )
    pages = [destination.append_page(mapping[page_id]) for page_id in page_ids]
    LOGGER.debug(
        "Copied %d page(s) and %d object(s) into the destination",
        len(pages),
        len(closure),
    )
    return pages


def merge_page(destination: Container, source: Container, page_index: int) -> Page:
    """Append a copy of page *page_index* of *source* to *destination*."""

    return merge_pages(destination, source, [page_index])[0]


def merge_container(destination: Container, source: Container) -> list[Page]:
    """Append copies of every page of *source*, in order, to *destination*."""

    return merge_pages(destination, source, range(source.page_count))


def isolate_page(source: Container, page_index: int) -> Container:
    """Return a new container holding only a copy of one page of *source*.

    Objects used exclusively by the other pages are not carried over.
    """

    isolated = Container(info=dict(source.info), version=source.version)
    merge_page(isolated, source, page_index)
    return isolated


__all__ = ["collect_closure", "merge_pages", "merge_page", "merge_container", "isolate_page"]
