"""csltree - Document tree and term localization for citation styles."""

from csltree.attributes import (
    AttributeRecord,
    create_attributes,
)
from csltree.errors import (
    MergeTypeError,
    ParseError,
)
from csltree.formats.xml import (
    from_xml,
    to_xml,
)
from csltree.nodes import (
    Node,
    TextNode,
    register,
    tag_name,
)
from csltree.serialization import pretty_print
from csltree.terms import (
    FORM_FALLBACKS,
    Multiple,
    Single,
    Term,
    TermTable,
)

__all__ = [
    # Attributes
    "AttributeRecord",
    # Terms
    "FORM_FALLBACKS",
    # Errors
    "MergeTypeError",
    "Multiple",
    # Tree
    "Node",
    "ParseError",
    "Single",
    "Term",
    "TermTable",
    "TextNode",
    "create_attributes",
    # Markup
    "from_xml",
    "pretty_print",
    "register",
    "tag_name",
    "to_xml",
]
