"""Input node model for array-to-XML encoding.

Loosely typed input (nested dicts, lists and scalars using the reserved
``@value`` / ``@cdata`` / ``@attr`` keys) is decoded at the boundary into an
explicit tagged variant:

    Scalar           leaf value rendered as element text
    PlainContainer   ordered entries rendered as child elements
    TaggedContainer  a value plus CDATA flag and attributes

Decoding is shallow: container entries are classified as they are visited,
so arbitrarily large inputs are never copied up front.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Dict, Iterator, Optional, Tuple, Union

VALUE_KEY = "@value"
CDATA_KEY = "@cdata"
ATTR_KEY = "@attr"
RESERVED_KEYS = (VALUE_KEY, CDATA_KEY, ATTR_KEY)


def is_scalar(value: Any) -> bool:
    """Check whether a raw value is rendered as text rather than elements."""
    return value is None or isinstance(value, (str, bytes, bool, Number))


def render_scalar(value: Any) -> Optional[str]:
    """Render a scalar as element text.

    ``None`` produces no text, booleans render as ``"1"`` and ``""``, bytes
    are decoded as UTF-8 and everything else goes through ``str``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


@dataclass(frozen=True)
class Scalar:
    """Leaf value."""

    value: Any = None

    @property
    def text(self) -> Optional[str]:
        return render_scalar(self.value)

    def to_raw(self) -> Any:
        return self.value


@dataclass(frozen=True)
class PlainContainer:
    """Ordered key/value entries without per-node metadata."""

    entries: Tuple[Tuple[Any, Any], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "PlainContainer":
        return cls(tuple(mapping.items()))

    def items(self) -> Iterator[Tuple[Any, "InputNode"]]:
        """Yield ``(key, node)`` pairs in insertion order."""
        for key, value in self.entries:
            yield key, classify(value)

    def __len__(self) -> int:
        return len(self.entries)

    def to_raw(self) -> Dict[Any, Any]:
        return {key: classify(value).to_raw() for key, value in self.entries}


@dataclass(frozen=True)
class TaggedContainer:
    """A value carrying CDATA and attribute metadata.

    ``discarded_keys`` lists sibling keys that were present next to
    ``@value`` in the raw mapping; they take no part in the output.
    ``source_entries`` keeps the raw mapping items when the node was decoded.
    """

    value: "InputNode" = field(default_factory=Scalar)
    cdata: bool = False
    attributes: Tuple[Tuple[Any, Any], ...] = ()
    discarded_keys: Tuple[Any, ...] = ()
    source_entries: Tuple[Tuple[Any, Any], ...] = field(default=(), compare=False)

    @property
    def has_scalar_value(self) -> bool:
        return isinstance(self.value, Scalar)

    def as_plain(self) -> PlainContainer:
        """View the marker mapping itself as ordinary entries.

        Used where a tagged mapping appears as the entries of another element
        (root data, or the ``@value`` of a tagged container): the reserved
        keys then become elements like any other key.
        """
        if self.source_entries:
            return PlainContainer(self.source_entries)
        return PlainContainer(tuple(self.to_raw().items()))

    def to_raw(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {VALUE_KEY: self.value.to_raw()}
        if self.cdata:
            raw[CDATA_KEY] = True
        if self.attributes:
            raw[ATTR_KEY] = dict(self.attributes)
        return raw


InputNode = Union[Scalar, PlainContainer, TaggedContainer]


def _classify_tagged(raw: Mapping) -> TaggedContainer:
    attributes = raw.get(ATTR_KEY)
    return TaggedContainer(
        value=classify(raw[VALUE_KEY]),
        cdata=raw.get(CDATA_KEY) is True,
        attributes=tuple(attributes.items()) if isinstance(attributes, Mapping) else (),
        discarded_keys=tuple(key for key in raw if key not in RESERVED_KEYS),
        source_entries=tuple(raw.items()),
    )


def classify(raw: Any) -> InputNode:
    """Decode a raw value into an input node.

    Mappings containing ``@value`` are tagged containers, other mappings and
    lists/tuples are plain containers (lists use their indices as keys).
    Values of any other type decode as empty plain containers.
    """
    if isinstance(raw, (Scalar, PlainContainer, TaggedContainer)):
        return raw
    if is_scalar(raw):
        return Scalar(raw)
    if isinstance(raw, Mapping):
        if VALUE_KEY in raw:
            return _classify_tagged(raw)
        return PlainContainer.from_mapping(raw)
    if isinstance(raw, (list, tuple)):
        return PlainContainer(tuple(enumerate(raw)))
    return PlainContainer()
