"""Character-level XML lexer.

The lexer is a two-state machine (``CONTENT`` and ``TAG``) that scans the
source string into classified tokens. Tokens never copy character data: each
one records its span in the source. Comments are consumed and dropped here and
never reach the tag assembler.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, Tuple

from xmlite.shared.text import Borrowed

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
OPEN_BRACKETS = ("</", "<?", "<")
CLOSE_BRACKETS = ("?>", "/>", ">")
QUOTES = "\"'"

_WHITESPACE = re.compile(r"\s+")
_NAME = re.compile(r"[\w.:-]+")


class TokenKind(Enum):
    """Token classes produced by the lexer."""

    OPEN = auto()       # <  </  <?
    NAME = auto()       # element, declaration or attribute name
    EQ = auto()         # =
    VALUE = auto()      # quoted attribute value, quotes stripped
    CLOSE = auto()      # >  />  ?>
    TEXT = auto()       # character data between tags
    INVALID = auto()    # character that cannot start any token inside a tag


class LexerState(Enum):
    """State machine states, selected by the most recent token."""

    CONTENT = auto()
    TAG = auto()


@dataclass(frozen=True)
class Position:
    """Line and column of a location in the source, both 1-indexed."""

    line: int = 1
    column: int = 1

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """A classified span of the source string."""

    kind: TokenKind
    source: str = field(repr=False, compare=False)
    start: int
    end: int
    position: Position

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    def as_data(self) -> Borrowed:
        """Borrowed view of the token text."""
        return Borrowed(self.source, self.start, self.end)

    def is_kind(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        """Check the token kind and, optionally, its exact text."""
        if self.kind is not kind:
            return False
        return text is None or self.text == text


class Lexer:
    """Single-pass tokenizer with one token of lookahead.

    Examples:
        >>> [t.kind.name for t in Lexer('<a b="c"/>')]
        ['OPEN', 'NAME', 'NAME', 'EQ', 'VALUE', 'CLOSE']
    """

    def __init__(self, source: str) -> None:
        if not isinstance(source, str):
            raise TypeError(f"Lexer source must be str, got {type(source).__name__}")
        self.source = source
        self.offset = 0
        self.line = 1
        self.column = 1
        self.state = LexerState.CONTENT
        self._peeked: Optional[Token] = None

    def report(self) -> Position:
        """Current position of the cursor (after any peeked token)."""
        return Position(self.line, self.column)

    def peek(self) -> Optional[Token]:
        """Return the next token without consuming it."""
        if self._peeked is None:
            self._peeked = self._lex()
        return self._peeked

    def next(self) -> Optional[Token]:
        """Consume and return the next token, or None at end of input."""
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        return self._lex()

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next()
        if token is None:
            raise StopIteration
        return token

    def _advance(self, end: int) -> None:
        source = self.source
        newlines = source.count("\n", self.offset, end)
        if newlines:
            self.line += newlines
            self.column = end - source.rfind("\n", self.offset, end)
        else:
            self.column += end - self.offset
        self.offset = end

    def _lex(self) -> Optional[Token]:
        source = self.source
        while True:
            if self.state is LexerState.TAG:
                match = _WHITESPACE.match(source, self.offset)
                if match:
                    self._advance(match.end())
            if self.offset >= len(source):
                return None
            if source.startswith(COMMENT_OPEN, self.offset):
                # unterminated comments run to end of input
                close = source.find(COMMENT_CLOSE, self.offset + len(COMMENT_OPEN))
                end = len(source) if close == -1 else close + len(COMMENT_CLOSE)
                self._advance(end)
                continue

            start = self.offset
            position = self.report()
            kind, token_start, token_end, end = self._scan(start)
            if end <= start:
                raise RuntimeError(
                    f"xml lexer failed to advance at {position} (state {self.state.name})"
                )
            self._advance(end)
            return Token(kind, source, token_start, token_end, position)

    def _scan(self, start: int) -> Tuple[TokenKind, int, int, int]:
        """Classify the token at ``start``.

        Returns the kind, the token span and the offset just past everything
        consumed (which differs from the span end for quoted values).
        """
        source = self.source

        if source[start] == "<":
            for bracket in OPEN_BRACKETS:
                if source.startswith(bracket, start):
                    self.state = LexerState.TAG
                    end = start + len(bracket)
                    return TokenKind.OPEN, start, end, end

        if self.state is LexerState.CONTENT:
            end = source.find("<", start)
            if end == -1:
                end = len(source)
            return TokenKind.TEXT, start, end, end

        for bracket in CLOSE_BRACKETS:
            if source.startswith(bracket, start):
                self.state = LexerState.CONTENT
                end = start + len(bracket)
                return TokenKind.CLOSE, start, end, end

        char = source[start]
        if char == "=":
            return TokenKind.EQ, start, start + 1, start + 1
        if char in QUOTES:
            close = source.find(char, start + 1)
            if close == -1:
                return TokenKind.INVALID, start, len(source), len(source)
            return TokenKind.VALUE, start + 1, close, close + 1

        match = _NAME.match(source, start)
        if match:
            return TokenKind.NAME, start, match.end(), match.end()
        return TokenKind.INVALID, start, start + 1, start + 1
