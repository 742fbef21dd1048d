"""Tag assembly with synchronization-based error recovery.

The assembler groups lexer tokens into structural tags: element tags (opening,
closing, self-closing), ``<?...?>`` declarations and text runs. When the token
grammar is violated it records a ``TagSyntaxError`` diagnostic, discards tokens
up to the next synchronization point (an ``OPEN`` or ``TEXT`` token) and
resumes there, so malformed markup never stops the tag stream.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional

from xmlite.shared import ParserConfig, TagSyntaxError, get_logger
from xmlite.shared.text import Borrowed, TextData

from .lexer import Lexer, Position, Token, TokenKind

# Valid (open, close) bracket pairs for element tags and declarations
ELEMENT_BRACKETS = {("<", ">"), ("<", "/>"), ("</", ">")}
DECLARATION_BRACKETS = ("<?", "?>")

SYNC_KINDS = (TokenKind.OPEN, TokenKind.TEXT)


class TagKind(Enum):
    """Kinds of element tag."""

    OPENING = auto()        # <name ...>
    CLOSING = auto()        # </name>
    SELF_CLOSING = auto()   # <name .../>

    @property
    def is_opening(self) -> bool:
        return self is TagKind.OPENING

    @property
    def is_closing(self) -> bool:
        return self is TagKind.CLOSING

    @property
    def is_self_closing(self) -> bool:
        return self is TagKind.SELF_CLOSING


@dataclass
class Tag:
    """Base class for items produced by ``TagStream``."""

    position: Position

    @property
    def name(self) -> Optional[str]:
        return None

    @property
    def content(self) -> Optional[str]:
        return None

    def attr(self, key: str) -> Optional[str]:
        return None

    @property
    def is_opening(self) -> bool:
        return False

    @property
    def is_closing(self) -> bool:
        return False

    @property
    def is_self_closing(self) -> bool:
        return False

    @property
    def is_text(self) -> bool:
        return False

    @property
    def is_declaration(self) -> bool:
        return False


@dataclass
class _NamedTag(Tag):
    tag_name: str = ""
    attrs: Dict[str, TextData] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.tag_name

    def attr(self, key: str) -> Optional[str]:
        value = self.attrs.get(key)
        return None if value is None else value.as_str()


@dataclass
class ElementTag(_NamedTag):
    """Opening, closing or self-closing element tag."""

    kind: TagKind = TagKind.OPENING

    @property
    def is_opening(self) -> bool:
        return self.kind.is_opening

    @property
    def is_closing(self) -> bool:
        return self.kind.is_closing

    @property
    def is_self_closing(self) -> bool:
        return self.kind.is_self_closing


@dataclass
class Declaration(_NamedTag):
    """``<?name ...?>`` processing instruction; metadata only."""

    @property
    def is_declaration(self) -> bool:
        return True


@dataclass
class TextTag(Tag):
    """Literal character data between tags."""

    data: TextData = field(default_factory=lambda: Borrowed("", 0, 0))

    @property
    def content(self) -> Optional[str]:
        return self.data.as_str()

    @property
    def is_text(self) -> bool:
        return True

    @property
    def is_whitespace(self) -> bool:
        return not self.data.as_str().strip()


class _Resync(Exception):
    """Raised inside tag assembly to restart from the next sync point."""

    def __init__(self, token: Token) -> None:
        super().__init__(token.text)
        self.token = token


class TagStream:
    """Restartable stream of tags over a source string.

    Examples:
        >>> stream = TagStream('<a <b /><c />')
        >>> [tag.name for tag in stream]
        ['b', 'c']
        >>> len(stream.diagnostics())
        1
    """

    def __init__(self, source: str, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.lexer = Lexer(source)
        self.logger = get_logger(__name__, self.config.correlation_id, "tag_assembler")
        self._diagnostics: List[TagSyntaxError] = []
        self._peeked: Optional[Tag] = None

    def peek(self) -> Optional[Tag]:
        """Return the next tag without consuming it."""
        if self._peeked is None:
            self._peeked = self._assemble()
        return self._peeked

    def next(self) -> Optional[Tag]:
        """Consume and return the next tag, or None at end of input."""
        if self._peeked is not None:
            tag, self._peeked = self._peeked, None
            return tag
        return self._assemble()

    def diagnostics(self) -> List[TagSyntaxError]:
        """Syntax errors recovered so far, in source order."""
        return list(self._diagnostics)

    def report(self) -> Position:
        """Current lexer position."""
        return self.lexer.report()

    def __iter__(self) -> Iterator[Tag]:
        return self

    def __next__(self) -> Tag:
        tag = self.next()
        if tag is None:
            raise StopIteration
        return tag

    def _assemble(self) -> Optional[Tag]:
        while True:
            try:
                return self._assemble_once()
            except _Resync as resync:
                self._recover(resync.token)

    def _assemble_once(self) -> Optional[Tag]:
        lexer = self.lexer
        first = lexer.peek()
        if first is None:
            return None

        if first.is_kind(TokenKind.TEXT):
            lexer.next()
            return TextTag(position=first.position, data=first.as_data())

        open_token = self._expect(TokenKind.OPEN)
        if open_token is None:
            return None
        name_token = self._expect(TokenKind.NAME)
        if name_token is None:
            return None

        attrs: Dict[str, TextData] = {}
        while True:
            token = lexer.peek()
            if token is None:
                return None
            if token.is_kind(TokenKind.CLOSE):
                break
            if token.kind is not TokenKind.NAME:
                raise _Resync(token)
            lexer.next()

            value: TextData = Borrowed(token.source, token.end, token.end)
            eq_token = lexer.peek()
            if eq_token is not None and eq_token.is_kind(TokenKind.EQ):
                lexer.next()
                value_token = self._expect(TokenKind.VALUE)
                if value_token is None:
                    return None
                value = value_token.as_data()
            attrs[token.text] = value

        close_token = lexer.next()
        brackets = (open_token.text, close_token.text)
        if brackets in ELEMENT_BRACKETS:
            if brackets[0] == "</":
                kind = TagKind.CLOSING
            elif brackets[1] == "/>":
                kind = TagKind.SELF_CLOSING
            else:
                kind = TagKind.OPENING
            return ElementTag(
                position=open_token.position,
                tag_name=name_token.text,
                attrs=attrs,
                kind=kind,
            )
        if brackets == DECLARATION_BRACKETS:
            return Declaration(
                position=open_token.position,
                tag_name=name_token.text,
                attrs=attrs,
            )
        raise _Resync(close_token)

    def _expect(self, kind: TokenKind) -> Optional[Token]:
        token = self.lexer.peek()
        if token is None:
            return None
        if not token.is_kind(kind):
            raise _Resync(token)
        return self.lexer.next()

    def _recover(self, token: Token) -> None:
        error = TagSyntaxError(token.text, token.position)
        self._diagnostics.append(error)
        if self.config.warn_on_recovery:
            self.logger.warning(
                f"recovered from an error: {error}",
                extra={"token": token.text, "line": token.position.line,
                       "column": token.position.column}
            )

        # the offending token is consumed unless it is itself a sync point
        while True:
            upcoming = self.lexer.peek()
            if upcoming is None or upcoming.kind in SYNC_KINDS:
                break
            self.lexer.next()
