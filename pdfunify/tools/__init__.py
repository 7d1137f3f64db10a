"""Namespace for pluggable pdfunify tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .unifier import unify  # noqa: F401  # registers unify, merge and normalize


__all__ = ["registry", "load_builtin_plugins"]
