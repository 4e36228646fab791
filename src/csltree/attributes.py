"""Schema-driven attribute records shared by all node types."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, TypeAlias

from csltree.errors import MergeTypeError

# Ordered (key, default) pairs declared by a node type.
Schema: TypeAlias = tuple[tuple[str, Any], ...]


def _pairs(other: object) -> Iterable[tuple[Any, Any]]:
    """Return the key/value pairs of a mapping-like object."""
    if isinstance(other, Mapping):
        return other.items()
    items = getattr(other, "items", None)
    if callable(items):
        return items()
    raise MergeTypeError(other)


class AttributeRecord:
    """Fixed set of attribute keys with optional values.

    The keys come from the owning node type's schema and never change after
    construction. Unset values are ``None``. Reading an unknown key yields
    ``None`` and assigning to one is silently ignored, so markup written
    against a newer vocabulary never breaks the tree.

    Keys are hyphenated as in the markup (``gender-form``); the underscore
    spelling (``gender_form``) is accepted wherever a key is expected.
    """

    __slots__ = ("_data", "_keys")

    def __init__(
        self,
        keys: Iterable[str],
        values: Mapping[str, Any] | None = None,
    ) -> None:
        self._keys = tuple(keys)
        self._data: dict[str, Any] = dict.fromkeys(self._keys)
        if values is not None:
            self.merge(values)

    def _resolve(self, key: object) -> str | None:
        """Map a key (or its underscore spelling) onto a schema key."""
        name = str(key)
        if name in self._data:
            return name
        name = name.replace("_", "-")
        return name if name in self._data else None

    def keys(self) -> tuple[str, ...]:
        """Return the schema keys in declaration order."""
        return self._keys

    def items(self) -> Iterator[tuple[str, Any]]:
        """Iterate over all (key, value) pairs, including unset ones."""
        for key in self._keys:
            yield key, self._data[key]

    def values(self) -> list[Any]:
        """Return the values that are set, in schema order."""
        return [value for _, value in self.items() if value is not None]

    def to_list(self) -> list[Any]:
        """Return every value, unset ones included, in schema order."""
        return [self._data[key] for key in self._keys]

    def to_dict(self) -> dict[str, Any]:
        """Return the set values as a plain dictionary."""
        return {key: value for key, value in self.items() if value is not None}

    @property
    def is_empty(self) -> bool:
        """Whether every value is unset."""
        return all(value is None for value in self._data.values())

    def __getitem__(self, key: str) -> Any:
        resolved = self._resolve(key)
        return None if resolved is None else self._data[resolved]

    def __setitem__(self, key: str, value: Any) -> None:
        resolved = self._resolve(key)
        if resolved is not None:
            self._data[resolved] = value

    def __contains__(self, key: object) -> bool:
        return self._resolve(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for key, or default if it is unset or unknown."""
        value = self[key]
        return default if value is None else value

    def fetch(
        self,
        key: str,
        default: Any = None,
        *,
        fallback: Callable[[str], Any] | None = None,
    ) -> Any:
        """Return the value for key if it is known and truthy.

        Args:
            key: Attribute name.
            default: Returned when the key is unknown or its value is falsy.
            fallback: Called with the key instead of returning default.

        Returns:
            The stored value, the fallback's result, or default.

        """
        value = self[key] if key in self else None
        if value:
            return value
        if fallback is not None:
            return fallback(key)
        return default

    def merge(self, other: object) -> AttributeRecord:
        """Overwrite values with the set values of other.

        Keys that are unset in other, or that the schema does not know, are
        left untouched.

        Args:
            other: A mapping or any object exposing ``items()``.

        Returns:
            This record.

        Raises:
            MergeTypeError: If other has no key/value pairs.

        """
        for key, value in _pairs(other):
            if value is not None:
                self[key] = value
        return self

    def values_at(self, *selectors: Any) -> list[Any]:
        """Return values for positional, slice, and key selectors.

        Example:
            record.values_at("name", 1, slice(2, 4))

        """
        values = self.to_list()
        result: list[Any] = []
        for selector in _flatten(selectors):
            if isinstance(selector, slice):
                result.extend(values[selector])
            elif isinstance(selector, int):
                result.append(values[selector])
            else:
                result.append(self[selector])
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeRecord | Mapping):
            return NotImplemented
        theirs = {key: value for key, value in other.items() if value is not None}
        return self.to_dict() == theirs

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        pairs = ", ".join(f"{key}={value!r}" for key, value in self.to_dict().items())
        return f"{type(self).__name__}({pairs})"


def _flatten(selectors: Iterable[Any]) -> Iterator[Any]:
    for selector in selectors:
        if isinstance(selector, list | tuple):
            yield from _flatten(selector)
        else:
            yield selector


def create_attributes(
    schema: Schema | None,
    attributes: Mapping[str, Any] | None = None,
) -> AttributeRecord | dict[str, Any]:
    """Build the attributes for a node type.

    Args:
        schema: The type's ordered (key, default) pairs, or None if the type
            accepts arbitrary attributes.
        attributes: Supplied values; unset (None) values never override a
            default.

    Returns:
        An AttributeRecord when a schema is declared, otherwise a plain
        dictionary holding the supplied attributes.

    """
    if schema is None:
        return dict(attributes or {})

    record = AttributeRecord(key for key, _ in schema)
    record.merge({key: default for key, default in schema})
    if attributes is not None:
        record.merge(attributes)
    return record
