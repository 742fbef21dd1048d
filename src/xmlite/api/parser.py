"""Public parsing entry points for xmlite.

Three levels of access:
- ``parse()`` builds a ``Document`` (root element plus declarations and
  recovered diagnostics).
- ``document()`` returns just the root node.
- ``tags()`` exposes the tag stream itself for callers that want declarations
  or diagnostics without building a tree.
"""

import logging
from typing import Optional

from xmlite.shared import ParseError, ParserConfig, TagSyntaxError, get_logger
from xmlite.tokenization import Declaration, Tag, TagStream, TextTag
from xmlite.tree import Document, TreeBuilder, Xml

PREVIEW_LENGTH = 100  # Max length for content preview in logs


def parse(text: str, config: Optional[ParserConfig] = None) -> Document:
    """Parse exactly one root element from ``text``.

    An optional ``<?xml ...?>`` declaration before the root is recognized and
    kept in ``Document.declarations``; it never appears in the tree.

    Args:
        text: XML content
        config: Optional parser configuration

    Returns:
        Document with the root element and any recovered diagnostics

    Raises:
        UnexpectedEof: If the input ends before the root element is closed
        MismatchedTag: If closing tags are misnested or text precedes the root
        DepthLimitExceeded: If nesting exceeds ``config.max_depth``

    Examples:
        >>> doc = parse('<?xml version="1.0"?><can><beans kind="fava"/></can>')
        >>> doc.root.name
        'can'
        >>> doc.root.find("beans").attr("kind")
        'fava'
    """
    config = config or ParserConfig()
    logger = get_logger(__name__, config.correlation_id, "parse")
    if logger.is_enabled_for(logging.DEBUG):
        logger.debug(
            "Starting parse",
            extra={
                "content_length": len(text),
                "preview": (
                    text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text
                ),
            }
        )

    stream = TagStream(text, config)
    builder = TreeBuilder(config)
    try:
        root = builder.build_root(stream)
    except ParseError as e:
        logger.error(
            f"Parse failed: {e}",
            extra={"error_type": type(e).__name__, "content_length": len(text)}
        )
        raise
    trailing = _check_trailing(stream, builder.declarations)

    diagnostics = stream.diagnostics()
    if trailing is not None:
        diagnostics.append(trailing)

    document_result = Document(
        root=root,
        declarations=builder.declarations,
        diagnostics=diagnostics,
        correlation_id=config.correlation_id,
    )
    logger.info(
        "Parse completed",
        extra={
            "root": root.name,
            "declarations": len(document_result.declarations),
            "diagnostics": len(diagnostics),
        }
    )
    return document_result


def document(text: str, config: Optional[ParserConfig] = None) -> Xml:
    """Parse ``text`` and return the root node only.

    Examples:
        >>> str(document("<a> <b/> </a>"))
        '<a> <b/> </a>'
    """
    return parse(text, config).root


def tags(text: str, config: Optional[ParserConfig] = None) -> TagStream:
    """Stream the tags of ``text`` without building a tree.

    Examples:
        >>> [tag.name for tag in tags('<?xml version="1.0"?><a/>')]
        ['xml', 'a']
    """
    return TagStream(text, config)


def _check_trailing(
    stream: TagStream, declarations: list
) -> Optional[TagSyntaxError]:
    """Skip trailing whitespace and declarations after the root element.

    Returns a diagnostic for the first other tag found; the rest of the input
    is left unread.
    """
    while True:
        tag: Optional[Tag] = stream.next()
        if tag is None:
            return None
        if isinstance(tag, Declaration):
            declarations.append(tag)
            continue
        if isinstance(tag, TextTag):
            if tag.is_whitespace:
                continue
            return TagSyntaxError(tag.content.strip(), tag.position)
        bracket = "</" if tag.is_closing else "<"
        return TagSyntaxError(f"{bracket}{tag.name}", tag.position)
