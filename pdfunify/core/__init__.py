"""Page container model and its PDF codec."""

from __future__ import annotations

from .geometry import Box
from .model import Container, Name, Page, Reference, Stream
from .parser import load
from .writer import serialize

__all__ = ["Box", "Container", "Name", "Page", "Reference", "Stream", "load", "serialize"]
