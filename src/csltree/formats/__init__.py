"""Format adapters for serialization.

Each format module provides to_<format> and from_<format> functions
that work with the node factory.
"""

from csltree.formats.xml import from_xml, to_xml

__all__ = ["from_xml", "to_xml"]
