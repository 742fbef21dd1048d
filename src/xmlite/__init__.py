"""xmlite: a minimal, non-validating XML parser.

Raw text flows through a state-machine lexer, a tag assembler with
best-effort error recovery, and a tree builder that matches opening and
closing tags into a tree of elements and text nodes. Parsed strings are views
into the input until a node is mutated.

API levels:
- parse(), document(): build a tree from a string
- tags(): stream tags directly, with recovered diagnostics
- element(), text(): construct trees programmatically
"""

__version__ = "0.1.0"
__author__ = "xmlite developers"

from .api import document, parse, tags
from .shared import (
    ConfigError,
    ConfigValidationError,
    DepthLimitExceeded,
    MismatchedTag,
    ParseError,
    ParserConfig,
    TagSyntaxError,
    UnexpectedEof,
    XmliteError,
)
from .tree import Document, Element, Text, Xml, element, text

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Parsing entry points
    "document",
    "parse",
    "tags",

    # Tree model and construction
    "Document",
    "Element",
    "Text",
    "Xml",
    "element",
    "text",

    # Errors and configuration
    "ConfigError",
    "ConfigValidationError",
    "DepthLimitExceeded",
    "MismatchedTag",
    "ParseError",
    "ParserConfig",
    "TagSyntaxError",
    "UnexpectedEof",
    "XmliteError",
]
