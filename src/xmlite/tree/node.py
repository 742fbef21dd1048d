"""Document tree nodes.

A tree is made of ``Element`` and ``Text`` nodes. Parsed nodes hold their
text and attribute values as ``Borrowed`` views into the input; any mutation
stores an ``Owned`` value at the touched node only (copy-on-write), and
``to_owned()`` produces a tree that no longer references the input at all.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from xmlite.shared.text import StrLike, TextData, as_text_data


class Xml:
    """Base class for tree nodes."""

    @property
    def is_element(self) -> bool:
        return isinstance(self, Element)

    @property
    def is_text(self) -> bool:
        return isinstance(self, Text)

    def attr(self, key: str) -> Optional[str]:
        """Raw attribute value, or None (always None on text nodes)."""
        return None

    def raw_attr(self, key: str) -> Optional[TextData]:
        """Attribute value as stored, borrowed or owned."""
        return None

    def descendants(self) -> Iterator["Xml"]:
        """Iterate over all nodes below this one, pre-order, excluding self.

        Every call returns a fresh single-pass iterator.

        Examples:
            >>> tree = element("a").with_child(element("b").with_child(element("d")))
            >>> tree = tree.with_child(element("c"))
            >>> [node.name for node in tree.descendants()]
            ['b', 'd', 'c']
        """
        stack: List[Xml] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter(self) -> Iterator["Xml"]:
        """Iterate over this node followed by its descendants."""
        yield self
        yield from self.descendants()

    def render(self) -> str:
        """Render the subtree as XML text.

        Elements without children render self-closing. Attribute values are
        wrapped in double quotes and never escaped, so a value containing
        ``"`` does not survive a round trip.
        """
        parts: List[str] = []
        stack: List[Tuple[Xml, bool]] = [(self, False)]
        while stack:
            node, closing = stack.pop()
            if isinstance(node, Text):
                parts.append(node.data.as_str())
                continue
            if closing:
                parts.append(f"</{node.name}>")
                continue
            parts.append(f"<{node.name}")
            for key, value in node.attrs.items():
                parts.append(f' {key}="{value}"')
            if not node.children:
                parts.append("/>")
                continue
            parts.append(">")
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
        return "".join(parts)

    def to_owned(self) -> "Xml":
        """Deep copy with every string promoted to owned storage."""
        root = self._owned_shell()
        stack = [(self, root)]
        while stack:
            source, target = stack.pop()
            for child in source.children:
                shell = child._owned_shell()
                target.children.append(shell)
                stack.append((child, shell))
        return root

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to nested dictionaries.

        Elements map to ``{"name", "attrs"}`` plus ``"children"`` when they
        have any; text nodes map to ``{"text"}``.
        """
        result = self._shallow_dict()
        stack = [(self, result)]
        while stack:
            node, target = stack.pop()
            if not node.children:
                continue
            target["children"] = []
            for child in node.children:
                child_dict = child._shallow_dict()
                target["children"].append(child_dict)
                stack.append((child, child_dict))
        return result

    def _owned_shell(self) -> "Xml":
        raise NotImplementedError

    def _shallow_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


@dataclass(eq=False, repr=False)
class Element(Xml):
    """XML element with attributes and ordered children.

    Equality, ``repr`` and ``to_dict`` walk the tree iteratively, so they work
    at any nesting depth the builder accepts.
    """

    name: str
    attrs: Dict[str, TextData] = field(default_factory=dict)
    children: List[Xml] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the name and normalize attribute values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        self.attrs = {key: as_text_data(value) for key, value in self.attrs.items()}
        for child in self.children:
            if not isinstance(child, Xml):
                raise TypeError("Child must be an Element or Text instance")

    @property
    def content(self) -> Optional[str]:
        return None

    @property
    def text(self) -> str:
        """Concatenated content of the direct text children."""
        return "".join(child.content for child in self.children if isinstance(child, Text))

    def attr(self, key: str) -> Optional[str]:
        """Raw attribute value (never unescaped or type-coerced)."""
        value = self.attrs.get(key)
        return None if value is None else value.as_str()

    def raw_attr(self, key: str) -> Optional[TextData]:
        return self.attrs.get(key)

    def set_attr(self, key: str, value: StrLike) -> None:
        """Set or replace an attribute value on this element only."""
        if not isinstance(key, str) or not key:
            raise TypeError("Attribute name must be a non-empty string")
        self.attrs[key] = as_text_data(value).to_owned()

    def remove_attr(self, key: str) -> bool:
        """Remove an attribute, returning whether it was present."""
        return self.attrs.pop(key, None) is not None

    def append(self, child: Xml) -> None:
        """Append a child node.

        Text is merged into a trailing text child and empty text is ignored,
        so the children match what parsing the rendered element produces.
        """
        if not isinstance(child, Xml):
            raise TypeError("Child must be an Element or Text instance")
        if isinstance(child, Text):
            if not child.data:
                return
            last = self.children[-1] if self.children else None
            if isinstance(last, Text):
                last.set_content(last.data.as_str() + child.data.as_str())
                return
        self.children.append(child)

    def with_attr(self, key: str, value: StrLike) -> "Element":
        """Builder-style ``set_attr``."""
        self.set_attr(key, value)
        return self

    def with_child(self, child: Union[Xml, str]) -> "Element":
        """Builder-style ``append``; plain strings become text nodes."""
        self.append(Text(child) if isinstance(child, str) else child)
        return self

    def with_children(self, children: Sequence[Union[Xml, str]]) -> "Element":
        for child in children:
            self.with_child(child)
        return self

    def find(self, name: str) -> Optional["Element"]:
        """First descendant element with a matching name."""
        return next(self._named(name), None)

    def find_all(self, name: str) -> List["Element"]:
        """All descendant elements with a matching name, in document order."""
        return list(self._named(name))

    def _named(self, name: str) -> Iterator["Element"]:
        for node in self.descendants():
            if isinstance(node, Element) and node.name == name:
                yield node

    def __eq__(self, other: object) -> bool:
        """Structural equality: names, attribute values and children in order."""
        if not isinstance(other, Element):
            return NotImplemented
        pairs: List[Tuple[Xml, Xml]] = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if type(left) is not type(right):
                return False
            if isinstance(left, Text):
                if left.data != right.data:
                    return False
                continue
            if (left.name != right.name or left.attrs != right.attrs
                    or len(left.children) != len(right.children)):
                return False
            pairs.extend(zip(left.children, right.children))
        return True

    def __repr__(self) -> str:
        return (
            f"Element(name={self.name!r}, attrs={self.attrs!r}, "
            f"children=<{len(self.children)} nodes>)"
        )

    def _shallow_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attrs": {key: value.as_str() for key, value in self.attrs.items()},
        }

    def _owned_shell(self) -> "Element":
        return Element(
            self.name,
            {key: value.to_owned() for key, value in self.attrs.items()},
        )


@dataclass
class Text(Xml):
    """Leaf node holding character data."""

    data: TextData

    def __post_init__(self) -> None:
        self.data = as_text_data(self.data)

    @property
    def name(self) -> Optional[str]:
        return None

    @property
    def content(self) -> Optional[str]:
        return self.data.as_str()

    @property
    def children(self) -> Tuple[Xml, ...]:
        return ()

    @property
    def is_whitespace(self) -> bool:
        return not self.data.as_str().strip()

    def set_content(self, value: StrLike) -> None:
        """Replace the text of this node only."""
        self.data = as_text_data(value).to_owned()

    def _shallow_dict(self) -> Dict[str, Any]:
        return {"text": self.data.as_str()}

    def _owned_shell(self) -> "Text":
        return Text(self.data.to_owned())


def element(name: str) -> Element:
    """Create an empty element for builder-style construction.

    Examples:
        >>> str(element("div").with_attr("id", "main").with_child("hi"))
        '<div id="main">hi</div>'
    """
    return Element(name)


def text(content: StrLike) -> Text:
    """Create a text node."""
    return Text(as_text_data(content))
