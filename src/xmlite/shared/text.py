"""Copy-on-write string data for parsed documents.

Parsed text and attribute values are kept as ``Borrowed`` views into the input
string, so building a tree never copies character data. Mutating a node stores
an ``Owned`` value at that node only; views held by other nodes are untouched.
Both variants compare and hash like the string they represent.
"""

from dataclasses import dataclass
from typing import Union


class TextData:
    """String data that is either a view into the source or an owned value."""

    __slots__ = ()

    def as_str(self) -> str:
        raise NotImplementedError

    @property
    def is_borrowed(self) -> bool:
        return isinstance(self, Borrowed)

    @property
    def is_owned(self) -> bool:
        return isinstance(self, Owned)

    def to_owned(self) -> "Owned":
        """Return an owned copy that no longer references the source."""
        return Owned(self.as_str())

    def __str__(self) -> str:
        return self.as_str()

    def __len__(self) -> int:
        return len(self.as_str())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TextData):
            return self.as_str() == other.as_str()
        if isinstance(other, str):
            return self.as_str() == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(self.as_str())


@dataclass(frozen=True, eq=False)
class Borrowed(TextData):
    """Zero-copy view of ``source[start:end]``."""

    __slots__ = ("source", "start", "end")

    source: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if not (0 <= self.start <= self.end <= len(self.source)):
            raise ValueError("Borrowed span must lie within the source")

    def as_str(self) -> str:
        return self.source[self.start:self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        return f"Borrowed({self.as_str()!r})"


@dataclass(frozen=True, eq=False)
class Owned(TextData):
    """String data owned by the node that holds it."""

    __slots__ = ("value",)

    value: str

    def as_str(self) -> str:
        return self.value

    def to_owned(self) -> "Owned":
        return self

    def __repr__(self) -> str:
        return f"Owned({self.value!r})"


StrLike = Union[str, TextData]


def as_text_data(value: StrLike) -> TextData:
    """Wrap a plain string as ``Owned``; pass ``TextData`` through unchanged."""
    if isinstance(value, TextData):
        return value
    if isinstance(value, str):
        return Owned(value)
    raise TypeError(f"Expected str or TextData, got {type(value).__name__}")
