"""Error taxonomy for xmlite parsing.

Structural problems (premature end of input, misnested closing tags) are fatal
and raised as exceptions. Token-level problems are recovered by the tag
assembler and kept as ``TagSyntaxError`` diagnostics instead of being raised.
"""

from typing import TYPE_CHECKING, Optional

from .result import DiagnosticEntry, DiagnosticSeverity

if TYPE_CHECKING:
    from xmlite.tokenization.lexer import Position


class XmliteError(Exception):
    """Base exception for all xmlite errors."""


class ParseError(XmliteError):
    """Base exception for errors produced while parsing a document."""

    def __init__(self, message: str, position: Optional["Position"] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at {self.position}"


class UnexpectedEof(ParseError):
    """Input ended while a matching closer or tag was still expected."""

    def __init__(self, position: Optional["Position"] = None) -> None:
        super().__init__("unexpected end of input", position)


class MismatchedTag(ParseError):
    """A closing tag (or content) did not match the element being built."""

    def __init__(
        self,
        expected: str,
        found: str,
        position: Optional["Position"] = None
    ) -> None:
        super().__init__(f"expected {expected!r}, found {found!r}", position)
        self.expected = expected
        self.found = found


class DepthLimitExceeded(ParseError):
    """Element nesting went deeper than ``ParserConfig.max_depth``."""

    def __init__(self, limit: int, position: Optional["Position"] = None) -> None:
        super().__init__(f"nesting depth exceeds limit of {limit}", position)
        self.limit = limit


class TagSyntaxError(ParseError):
    """Malformed token sequence skipped by the tag assembler.

    Instances are collected as diagnostics; the pipeline never raises them.
    """

    def __init__(self, token: str, position: Optional["Position"] = None) -> None:
        super().__init__(f"unexpected token {token!r}", position)
        self.token = token

    def to_diagnostic(self, correlation_id: Optional[str] = None) -> DiagnosticEntry:
        """Convert to a shared diagnostic record."""
        position = None
        if self.position is not None:
            position = {"line": self.position.line, "column": self.position.column}
        return DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=f"recovered from syntax error: {self.message}",
            component="tag_assembler",
            position=position,
            details={"token": self.token},
            correlation_id=correlation_id,
        )
