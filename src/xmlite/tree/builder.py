"""Tree building from a tag stream.

``TreeBuilder`` consumes tags from a ``TagStream`` and matches every opening
tag with its closing tag, producing ``Element``/``Text`` nodes. Nesting is
tracked on an explicit stack of open elements, so document depth is limited
only by ``ParserConfig.max_depth`` and never by the Python call stack.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from xmlite.shared import (
    DepthLimitExceeded,
    DiagnosticEntry,
    MismatchedTag,
    ParserConfig,
    TagSyntaxError,
    UnexpectedEof,
    get_logger,
)
from xmlite.tokenization import Declaration, ElementTag, Tag, TagStream, TextTag

from .node import Element, Text, Xml

ANY_OPENING_TAG = "any opening tag"
FOUND_PREVIEW_LENGTH = 40


@dataclass
class _OpenElement:
    """Element whose closing tag has not been seen yet."""

    element: Element
    has_text: bool = False
    has_elements: bool = False


@dataclass
class Document:
    """Parsed document: the root element plus parse metadata.

    Declarations and recovered syntax errors are kept here, never inside the
    tree itself.
    """

    root: Xml
    declarations: List[Declaration] = field(default_factory=list)
    diagnostics: List[TagSyntaxError] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def has_diagnostics(self) -> bool:
        return len(self.diagnostics) > 0

    def diagnostic_entries(self) -> List[DiagnosticEntry]:
        """Recovered syntax errors as shared diagnostic records."""
        return [error.to_diagnostic(self.correlation_id) for error in self.diagnostics]

    def descendants(self):
        return self.root.descendants()

    def iter(self):
        return self.root.iter()

    def render(self) -> str:
        return self.root.render()

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        return {
            "declarations": [
                {"name": decl.name,
                 "attrs": {key: value.as_str() for key, value in decl.attrs.items()}}
                for decl in self.declarations
            ],
            "root": self.root.to_dict(),
            "diagnostics": [entry.to_dict() for entry in self.diagnostic_entries()],
        }

    def __str__(self) -> str:
        return self.render()


class TreeBuilder:
    """Builds nodes from a tag stream.

    Declarations met anywhere are skipped and collected in ``declarations``.
    Structural errors are raised; they are never repaired.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.logger = get_logger(__name__, self.config.correlation_id, "tree_builder")
        self.declarations: List[Declaration] = []

    def build_element(self, tags: TagStream) -> Xml:
        """Build one node: a text node, or an element up to its closing tag.

        Raises:
            UnexpectedEof: If the stream ends before the node is complete
            MismatchedTag: If a closing tag does not match the open element
            DepthLimitExceeded: If nesting exceeds ``max_depth``
        """
        tag = self._next_significant(tags)
        if isinstance(tag, TextTag):
            return Text(tag.data)
        return self._build_from(tag, tags)

    def build_root(self, tags: TagStream) -> Element:
        """Build the document root, skipping leading whitespace and declarations.

        Raises:
            MismatchedTag: If non-whitespace text precedes the root element
        """
        while True:
            tag = self._next_significant(tags)
            if isinstance(tag, TextTag):
                if tag.is_whitespace:
                    continue
                raise MismatchedTag(ANY_OPENING_TAG, _preview(tag), tag.position)
            return self._build_from(tag, tags)

    def _next_significant(self, tags: TagStream) -> Tag:
        """Next tag that is not a declaration."""
        while True:
            tag = tags.next()
            if tag is None:
                raise UnexpectedEof(tags.report())
            if isinstance(tag, Declaration):
                self._skip_declaration(tag)
                continue
            return tag

    def _skip_declaration(self, tag: Declaration) -> None:
        self.declarations.append(tag)
        self.logger.debug(
            "Skipping declaration",
            extra={"declaration": tag.name, "line": tag.position.line}
        )

    def _build_from(self, tag: Tag, tags: TagStream) -> Element:
        if not isinstance(tag, ElementTag) or tag.is_closing:
            raise MismatchedTag(ANY_OPENING_TAG, tag.name or "", tag.position)

        root = self._new_element(tag, depth=1)
        if tag.is_self_closing:
            return root

        stack = [_OpenElement(root)]
        while stack:
            current = stack[-1]
            upcoming = tags.peek()
            if upcoming is None:
                raise UnexpectedEof(tags.report())

            if upcoming.is_closing:
                if upcoming.name != current.element.name:
                    raise MismatchedTag(
                        current.element.name, upcoming.name or "", upcoming.position
                    )
                tags.next()
                stack.pop()
                continue

            tag = tags.next()
            if isinstance(tag, Declaration):
                self._skip_declaration(tag)
            elif isinstance(tag, TextTag):
                self._add_text(current, tag)
            else:
                child = self._new_element(tag, depth=len(stack) + 1)
                self._add_element(current, child, tag)
                if not tag.is_self_closing:
                    stack.append(_OpenElement(child))

        return root

    def _new_element(self, tag: ElementTag, depth: int) -> Element:
        max_depth = self.config.max_depth
        if max_depth is not None and depth > max_depth:
            raise DepthLimitExceeded(max_depth, tag.position)
        return Element(tag.tag_name, dict(tag.attrs))

    def _add_text(self, current: _OpenElement, tag: TextTag) -> None:
        node = Text(tag.data)
        if node.is_whitespace and (
            self.config.strict_content or not self.config.keep_whitespace_text
        ):
            return
        if self.config.strict_content and (current.has_text or current.has_elements):
            # text may only be the whole body of an element
            raise MismatchedTag(current.element.name, _preview(tag), tag.position)
        current.has_text = True
        current.element.children.append(node)

    def _add_element(self, current: _OpenElement, child: Element, tag: ElementTag) -> None:
        if self.config.strict_content and current.has_text:
            raise MismatchedTag(current.element.name, child.name, tag.position)
        current.has_elements = True
        current.element.children.append(child)


def build_element(tags: TagStream, config: Optional[ParserConfig] = None) -> Xml:
    """Build one node from ``tags`` with a fresh ``TreeBuilder``."""
    return TreeBuilder(config or tags.config).build_element(tags)


def _preview(tag: TextTag) -> str:
    content = tag.data.as_str().strip()
    if len(content) > FOUND_PREVIEW_LENGTH:
        return content[:FOUND_PREVIEW_LENGTH] + "..."
    return content
