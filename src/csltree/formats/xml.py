"""XML format adapter.

``from_xml`` feeds an ElementTree document through the node factory,
depth first, appending every created node to its parent in document order.
``to_xml`` renders a tree back to markup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from xml.etree import ElementTree

from csltree.errors import ParseError
from csltree.nodes import Node
from csltree.serialization import pretty_print
from csltree.serialization import to_xml as _compact

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

logger = logging.getLogger(__name__)

_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def to_xml(node: Node, *, indent: int | None = None) -> str:
    """Serialize a node tree to markup.

    Args:
        node: The root of the tree
        indent: Spaces per nesting level (default None for compact output)

    Returns:
        Markup string

    """
    if indent is None:
        return _compact(node)
    return pretty_print(node, indent)


def from_xml(source: str | bytes, *, factory: type[Node] = Node) -> Node:
    """Deserialize markup to a node tree.

    Args:
        source: Markup string
        factory: Node class whose registry resolves the tag names

    Returns:
        The root node

    Raises:
        ParseError: If the markup is not well-formed

    """
    try:
        root = ElementTree.fromstring(source)
    except ElementTree.ParseError as exc:
        msg = f"Malformed markup: {exc}"
        raise ParseError(msg) from exc
    return _build(root, factory, None)


def _split(name: str) -> tuple[str | None, str]:
    """Split an ElementTree ``{uri}local`` name."""
    if name.startswith("{"):
        uri, _, local = name[1:].partition("}")
        return uri, local
    return None, name


def _attributes(
    element: Element,
    namespace: str | None,
    parent_namespace: str | None,
) -> dict[str, Any]:
    attributes: dict[str, Any] = {}
    if namespace is not None and namespace != parent_namespace:
        attributes["xmlns"] = namespace
    for name, value in element.attrib.items():
        uri, local = _split(name)
        if uri == _XML_NAMESPACE:
            local = f"xml:{local}"
        attributes[local] = value
    return attributes


def _significant(text: str | None) -> bool:
    return bool(text and text.strip())


def _build(element: Element, factory: type[Node], parent_namespace: str | None) -> Node:
    namespace, name = _split(element.tag)
    node = factory.create(name, _attributes(element, namespace, parent_namespace))

    if node.leaf:
        if len(element):
            logger.warning("Ignoring child elements of text node <%s>", name)
        node.text = element.text or ""
        return node

    if hasattr(node, "text") and not len(element) and element.text is not None:
        node.text = element.text
        return node

    if _significant(element.text):
        node.add_child(element.text)
    for child in element:
        node.add_child(_build(child, factory, namespace))
        if _significant(child.tail):
            node.add_child(child.tail)
    return node
