"""Shared utilities for xmlite.

This module provides the error taxonomy, diagnostic records, configuration and
logging helpers used across all parsing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import (
    DepthLimitExceeded,
    MismatchedTag,
    ParseError,
    TagSyntaxError,
    UnexpectedEof,
    XmliteError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DepthLimitExceeded",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "MismatchedTag",
    "ParseError",
    "ParserConfig",
    "TagSyntaxError",
    "UnexpectedEof",
    "XmliteError",
    "get_logger",
]
