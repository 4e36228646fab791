"""Error types raised by the node tree.

Only a handful of operations fail hard: merging attributes from something
that is not a mapping and parsing malformed markup. Everything else (unknown
tags, unknown attribute keys, lookup misses) degrades gracefully.
"""

from __future__ import annotations


class MergeTypeError(TypeError):
    """Attributes could not be merged from a value without key/value pairs."""

    def __init__(self, argument: object) -> None:
        self.argument_type = type(argument)
        msg = f"failed to merge {self.argument_type.__name__} into attributes"
        super().__init__(msg)


class ParseError(ValueError):
    """Markup could not be turned into a node tree."""
