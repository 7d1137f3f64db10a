"""Object graph merging between page containers."""

from __future__ import annotations

from .merger import collect_closure, isolate_page, merge_container, merge_page, merge_pages

__all__ = ["collect_closure", "isolate_page", "merge_container", "merge_page", "merge_pages"]
