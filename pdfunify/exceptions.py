"""
Custom exceptions for pdfunify.

Every failure raised by the unification pipeline derives from
:class:`UnifyError` so callers can abort on a single exception type.
"""

from __future__ import annotations


class UnifyError(Exception):
    """Base exception for all pdfunify errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF unification error occurred."


class ParseError(UnifyError):
    """Raised when input bytes are not a valid PDF object graph."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF document."


class GraphIntegrityError(UnifyError):
    """Raised when a reference points to an object missing from its container."""

    @property
    def default_message(self) -> str:
        return "Object graph contains a dangling reference."


class RenderError(UnifyError):
    """Raised when a vector graphic cannot be converted into a page."""

    @property
    def default_message(self) -> str:
        return "Vector graphic could not be rendered."


class UnifyIOError(UnifyError, OSError):
    """Raised when reading an input or writing the output fails."""

    @property
    def default_message(self) -> str:
        return "Failed to read or write a document."


class PreconditionError(UnifyError, ValueError):
    """Raised when page geometry cannot be normalized."""

    @property
    def default_message(self) -> str:
        return "Page geometry violates a normalization precondition."


__all__ = [
    "UnifyError",
    "ParseError",
    "GraphIntegrityError",
    "RenderError",
    "UnifyIOError",
    "PreconditionError",
]
