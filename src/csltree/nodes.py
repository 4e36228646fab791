"""Core node tree with automatic type registration.

Every ``Node`` subclass is registered under its tag when it is declared.
Markup is turned into a tree by calling ``Node.create`` for each element;
tags without a registered type fall back to a generic ``Node`` that keeps the
original name, so documents written against a newer vocabulary survive a
round trip unchanged.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, ClassVar, Self

from csltree.attributes import AttributeRecord, Schema, create_attributes
from csltree.errors import ParseError
from csltree.serialization import (
    DEFAULT_INDENT,
    attribute_pairs,
    closing_tag,
    escape_text,
    opening_tag,
    pretty_print,
    text_tags,
    to_xml,
)

logger = logging.getLogger(__name__)

_CASE_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def tag_name(identifier: str) -> str:
    """Derive a canonical tag from a class name.

    A hyphen is inserted at every lowercase-to-uppercase boundary and the
    result is lowercased: ``OrdinalTerm`` becomes ``ordinal-term``.
    """
    return _CASE_BOUNDARY.sub(r"\1-\2", identifier).lower()


def _categories(cls: type[Node]) -> list[type[Node]]:
    """Return every registry a node class must be entered into."""
    found: dict[type[Node], None] = {}
    pending: list[type[Node]] = [cls]
    while pending:
        current = pending.pop(0)
        if current in found:
            continue
        found[current] = None
        pending.extend(base for base in current.__mro__[1:] if issubclass(base, Node))
        pending.extend(current.category)
    return list(found)


def register(cls: type[Node]) -> None:
    """Enter a node class into its own registry and those of its categories.

    Categories are the Node ancestors of the class plus the classes named
    through the ``category=`` keyword, followed transitively.

    Raises:
        ValueError: If a different class already holds the tag in one of
            those registries.

    """
    for owner in _categories(cls):
        if (existing := owner.types.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing} "
                f"in {owner.__name__}. Choose a different tag."
            )
            raise ValueError(msg)
        owner.types[cls.tag] = cls
    logger.debug("Registered node type %s as '%s'", cls.__qualname__, cls.tag)


def _compare_items(left: Node | str, right: Node | str) -> int | None:
    if isinstance(left, Node) and isinstance(right, Node):
        return left.compare(right)
    if isinstance(left, str) and isinstance(right, str):
        return (left > right) - (left < right)
    return None


def compare_sequences(
    left: Iterable[Node | str],
    right: Iterable[Node | str],
) -> int | None:
    """Compare two child sequences lexicographically.

    Returns:
        A negative, zero, or positive number, or None when a pair of items
        cannot be compared.

    """
    left, right = list(left), list(right)
    for a, b in zip(left, right, strict=False):
        result = _compare_items(a, b)
        if result != 0:
            return result
    return (len(left) > len(right)) - (len(left) < len(right))


class Node:
    """Generic tree element: a tag name, attributes, and ordered children.

    Subclasses are registered automatically. Class keywords:

    - ``tag``: canonical tag name (derived from the class name if omitted)
    - ``attributes``: attribute schema as ordered (key, default) pairs; a
      bare string declares a key without default
    - ``category``: one or more node classes whose registry should also
      list this class

    Example:
        class Layout(Node, tag="layout", attributes=(("prefix", None),)):
            pass

        Node.create("layout", {"prefix": "("})

    """

    tag: ClassVar[str] = "node"
    schema: ClassVar[Schema | None] = None
    category: ClassVar[tuple[type[Node], ...]] = ()
    types: ClassVar[dict[str, type[Node]]] = {}
    leaf: ClassVar[bool] = False

    def __init_subclass__(
        cls,
        tag: str | None = None,
        attributes: Iterable[str | tuple[str, Any]] | None = None,
        category: type[Node] | Iterable[type[Node]] | None = None,
        **kwargs: Any,
    ) -> None:
        """Register node subclass with automatic tag derivation."""
        super().__init_subclass__(**kwargs)
        cls.tag = tag if tag is not None else tag_name(cls.__name__)

        if attributes is not None:
            cls.schema = tuple(
                (entry, None) if isinstance(entry, str) else tuple(entry)
                for entry in attributes
            )

        if category is None:
            cls.category = ()
        elif isinstance(category, type):
            cls.category = (category,)
        else:
            cls.category = tuple(category)

        cls.types = {}
        register(cls)

    @classmethod
    def lookup_type(cls, name: str) -> type[Node] | None:
        """Return the class registered under name in this registry."""
        return cls.types.get(name)

    @classmethod
    def create(cls, name: str, attributes: Mapping[str, Any] | None = None) -> Node:
        """Return a new node for the tag name.

        Unknown names never fail: they produce a generic Node carrying the
        original name and attributes.
        """
        node_type = cls.lookup_type(name)
        if node_type is not None:
            return node_type(attributes)

        logger.debug("No node type registered for '%s'; using a generic node", name)
        node = Node(attributes)
        node._nodename = name
        return node

    @classmethod
    def create_attributes(
        cls,
        attributes: Mapping[str, Any] | None = None,
    ) -> AttributeRecord | dict[str, Any]:
        """Build the attribute record for this type from the supplied values."""
        return create_attributes(cls.schema, attributes)

    @classmethod
    def parse(cls, source: str | bytes) -> Self:
        """Build a tree from markup, resolving tags through this registry.

        Raises:
            ParseError: If the markup is malformed or its root element is not
                a node of this class.

        """
        from csltree.formats.xml import from_xml

        node = from_xml(source, factory=cls)
        if not isinstance(node, cls):
            msg = f"Expected a <{cls.tag}> root element, got <{node.nodename}>"
            raise ParseError(msg)
        return node

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> None:
        if kwargs:
            attributes = {**(attributes or {}), **kwargs}
        self._nodename = type(self).tag
        self.attributes = type(self).create_attributes(attributes)
        self.parent: Node | None = None
        self._children: list[Node | str] = []

    @property
    def nodename(self) -> str:
        """The tag name of this node."""
        return self._nodename

    # Attributes

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.attributes.items())

    def __getitem__(self, key: str) -> Any:
        return self.attributes.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def attribute(self, name: str) -> Any:
        """Return the attribute value, or False if it is unset or unknown."""
        if isinstance(self.attributes, AttributeRecord):
            return self.attributes.fetch(name, False)
        return self.attributes.get(name) or False

    @property
    def has_attributes(self) -> bool:
        """Whether any attribute is set."""
        return any(value is not None for _, value in self)

    @property
    def is_textnode(self) -> bool:
        """Whether this node carries literal text instead of children."""
        return False

    @property
    def has_text(self) -> bool:
        return self.is_textnode

    # Children

    @property
    def children(self) -> tuple[Node | str, ...]:
        """The children in document order."""
        return tuple(self._children)

    @property
    def has_children(self) -> bool:
        """Whether this node has any children."""
        return bool(self._children)

    def each_child(self) -> Iterator[Node | str]:
        """Iterate over the children in document order."""
        return iter(self.children)

    def add_child(self, child: Node | str) -> Node | str:
        """Append child, detaching it from any previous parent.

        Plain strings are kept as literal text between elements.

        Raises:
            TypeError: If this node type cannot hold children.
            ValueError: If child is this node or one of its ancestors.

        """
        if self.leaf:
            msg = f"{type(self).__name__} <{self.nodename}> cannot have children"
            raise TypeError(msg)

        if isinstance(child, Node):
            if child is self or any(child is node for node in self.ancestors()):
                msg = f"Cannot add <{child.nodename}> below itself"
                raise ValueError(msg)
            if child.parent is not None:
                child.parent.remove_child(child)
            child.parent = self

        self._children.append(child)
        return child

    def add_children(self, *children: Node | str) -> Self:
        """Append several children in order."""
        for child in children:
            self.add_child(child)
        return self

    def remove_child(self, child: Node | str) -> Node | str | None:
        """Detach child and return it, or None if it is not a child."""
        for index, current in enumerate(self._children):
            if current is child or (isinstance(child, str) and current == child):
                del self._children[index]
                if isinstance(current, Node):
                    current.parent = None
                return current
        return None

    def find_child(self, name: str) -> Node | None:
        """Return the first child element with the given tag name."""
        return next(self.find_children(name), None)

    def find_children(self, name: str) -> Iterator[Node]:
        """Iterate over the child elements with the given tag name."""
        return (c for c in self._children if isinstance(c, Node) and c.nodename == name)

    def descendants(self) -> Iterator[Node]:
        """Iterate depth-first over every element below this node."""
        for child in self._children:
            if isinstance(child, Node):
                yield child
                yield from child.descendants()

    def ancestors(self) -> Iterator[Node]:
        """Iterate from the parent up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def root(self) -> Node:
        """The topmost ancestor (or this node)."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    # Comparison

    def _content(self) -> tuple[Node | str, ...]:
        return tuple(self._children)

    def compare(self, other: object) -> int | None:
        """Order two nodes by name, then attributes, then content.

        Returns:
            A negative, zero, or positive number; None if the values are
            incomparable (other is not a node, or the attributes differ).

        """
        if not isinstance(other, Node):
            return None
        if self.nodename != other.nodename:
            return -1 if self.nodename < other.nodename else 1
        if attribute_pairs(self.attributes) != attribute_pairs(other.attributes):
            return None
        return compare_sequences(self._content(), other._content())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        result = self.compare(other)
        return result is not None and result < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        result = self.compare(other)
        return result is not None and result <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        result = self.compare(other)
        return result is not None and result > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        result = self.compare(other)
        return result is not None and result >= 0

    __hash__ = None  # type: ignore[assignment]

    # Markup

    def markup_attributes(self) -> Iterator[tuple[str, Any]]:
        """Yield the attribute pairs written into this node's tag."""
        return iter(self)

    def opening_tag(self) -> str:
        return opening_tag(self.nodename, self.markup_attributes())

    def closing_tag(self) -> str:
        return closing_tag(self.nodename)

    def tags(self) -> Iterator[str]:
        """Yield the markup fragments of this node and its subtree."""
        if not self._children:
            yield opening_tag(self.nodename, self.markup_attributes(), closed=True)
            return

        yield self.opening_tag()
        for child in self._children:
            if isinstance(child, Node):
                yield from child.tags()
            else:
                yield escape_text(child)
        yield self.closing_tag()

    def to_xml(self) -> str:
        """Return the compact markup of this node."""
        return to_xml(self)

    def pretty_print(self, indent: int = DEFAULT_INDENT) -> str:
        """Return the indented markup of this node."""
        return pretty_print(self, indent)

    def __str__(self) -> str:
        return self.pretty_print()

    def _describe(self) -> str:
        pairs = attribute_pairs(self.attributes).items()
        return "".join(f" {key}={value!r}" for key, value in pairs)

    def __repr__(self) -> str:
        name = type(self).__name__
        count = len(self._children)
        return f"<{name} {self.nodename}{self._describe()} children={count}>"


class TextNode(Node):
    """Leaf node holding literal text instead of children."""

    leaf = True

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        /,
        *,
        text: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(attributes, **kwargs)
        self.text = text

    @property
    def is_textnode(self) -> bool:
        return True

    def _content(self) -> tuple[Node | str, ...]:
        return (self.text,)

    def tags(self) -> Iterator[str]:
        """Yield open tag, text, and close tag, even for empty text."""
        return text_tags(self.nodename, self.markup_attributes(), self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"<{name} {self.nodename} {self.text!r}{self._describe()}>"
