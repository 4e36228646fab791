"""Markup rendering for node trees.

Nodes produce their markup lazily as a sequence of fragments (see
``Node.tags``); this module holds the escaping rules and the two ways of
joining those fragments: compact (``to_xml``) and indented
(``pretty_print``).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any
from xml.sax.saxutils import escape

if TYPE_CHECKING:
    from csltree.nodes import Node

DEFAULT_INDENT = 2

_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


def escape_text(text: str) -> str:
    """Escape character data."""
    return escape(text, _TEXT_ENTITIES)


def escape_attribute(value: Any) -> str:
    """Render an attribute value as an escaped, double-quoted string."""
    return f'"{escape(str(value), _ATTRIBUTE_ENTITIES)}"'


def attribute_assignments(pairs: Iterable[tuple[str, Any]]) -> list[str]:
    """Return ``key="value"`` strings for every set attribute, in order."""
    return [
        f"{key}={escape_attribute(value)}" for key, value in pairs if value is not None
    ]


def opening_tag(
    name: str,
    pairs: Iterable[tuple[str, Any]],
    *,
    closed: bool = False,
) -> str:
    """Return an opening (or self-closing) tag with attribute assignments."""
    head = " ".join([name, *attribute_assignments(pairs)])
    return f"<{head}/>" if closed else f"<{head}>"


def closing_tag(name: str) -> str:
    """Return the closing tag for name."""
    return f"</{name}>"


def text_tags(name: str, pairs: Iterable[tuple[str, Any]], text: str) -> Iterator[str]:
    """Yield the fragments of a text-bearing element; never self-closing."""
    yield opening_tag(name, pairs)
    yield escape_text(text)
    yield closing_tag(name)


def to_xml(node: Node) -> str:
    """Return the compact markup of a node and its subtree."""
    return "".join(node.tags())


def pretty_print(node: Node, indent: int = DEFAULT_INDENT) -> str:
    """Return the markup of a node with one element per line.

    Text-bearing elements and elements with mixed content stay on a single
    line so that their text is reproduced exactly.

    Args:
        node: Root of the subtree to render.
        indent: Number of spaces per nesting level.

    Returns:
        The indented markup string.

    """
    return "\n".join(_lines(node, indent, 0))


def _lines(node: Node | str, indent: int, level: int) -> Iterator[str]:
    pad = " " * (indent * level)

    if isinstance(node, str):
        yield pad + escape_text(node)
        return

    children = node.children
    if node.is_textnode or not children or any(isinstance(c, str) for c in children):
        yield pad + "".join(node.tags())
        return

    yield pad + node.opening_tag()
    for child in children:
        yield from _lines(child, indent, level + 1)
    yield pad + closing_tag(node.nodename)


def attribute_pairs(attributes: Mapping[str, Any] | Any) -> dict[str, Any]:
    """Return the set (non-None) attributes of a record or mapping."""
    return {key: value for key, value in attributes.items() if value is not None}
