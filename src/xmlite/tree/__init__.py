"""Tree layer for xmlite.

This module provides the document node model and the builder that constructs
it from a tag stream.

Key Components:
    Element, Text: Tree nodes with copy-on-write string data
    Document: Root element plus declarations and recovered diagnostics
    TreeBuilder: Matches opening and closing tags into a nested tree
"""

from .builder import (
    Document,
    TreeBuilder,
    build_element,
)
from .node import (
    Element,
    Text,
    Xml,
    element,
    text,
)

__all__ = [
    "Document",
    "Element",
    "Text",
    "TreeBuilder",
    "Xml",
    "build_element",
    "element",
    "text",
]
