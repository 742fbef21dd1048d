"""Public API for xmlite parsing."""

from .parser import document, parse, tags

__all__ = [
    "document",
    "parse",
    "tags",
]
