"""Localized terms and the term table that resolves them.

A term is one vocabulary entry of a locale: a name (``page``, ``editor``,
``ordinal-01``), a form, an optional grammatical gender, and either flat
text or a singular/plural pair::

    <terms>
      <term name="page" form="short">
        <single>p.</single>
        <multiple>pp.</multiple>
      </term>
      <term name="editor" form="verb">edited by</term>
    </terms>

``TermTable.lookup`` picks the best entry for a name, falling back to
related forms when the requested one is missing; ``TermTable.ordinalize``
picks the ordinal suffix for a number.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, TypeAlias

from csltree.nodes import Node, TextNode
from csltree.serialization import text_tags

logger = logging.getLogger(__name__)

DEFAULT_FORM = "long"

# Forms tried, in order, when a form is requested.
FORM_FALLBACKS: dict[str, tuple[str, ...]] = {
    "long": ("long",),
    "short": ("short", "long"),
    "verb": ("verb", "long"),
    "verb-short": ("verb-short", "verb", "long"),
    "symbol": ("symbol", "short", "long"),
}

GENDERS = ("masculine", "feminine")
_NEUTRAL = (None, "none", "neutral")

_SHORT_ORDINAL = re.compile(r"ordinal(?:-\d\d)?")
_LONG_ORDINAL = re.compile(r"long-ordinal(?:-\d\d)?")

# A name, a name pattern, or a mapping of attribute conditions.
Criteria: TypeAlias = Mapping[str, Any] | str | re.Pattern[str]


def _gender(value: str | None) -> str | None:
    """Normalize the spellings of neutral gender to None."""
    return None if value in _NEUTRAL else value


class TermTable(Node, tag="terms", attributes=()):
    """Container of the terms of one locale, in table order."""

    def add_child(self, child: Node | str) -> Node | str:
        """Append a term.

        Raises:
            TypeError: If child is not a Term.

        """
        if not isinstance(child, Term):
            msg = f"Terms can only hold <term> entries, got {child!r}"
            raise TypeError(msg)
        return super().add_child(child)

    def each_term(self) -> Iterator[Term]:
        """Iterate over the terms in table order."""
        return (child for child in self._children if isinstance(child, Term))

    def ordinals(self) -> Iterator[Term]:
        """Iterate over the ordinal terms."""
        return (term for term in self.each_term() if term.is_ordinal)

    def drop_ordinals(self) -> list[Term]:
        """Remove all ordinal terms and return them.

        Locales drop their ordinals when a style overrides any of them.
        """
        dropped = list(self.ordinals())
        for term in dropped:
            self.remove_child(term)
        return dropped

    def lookup(
        self,
        name: str,
        *,
        form: str | None = None,
        gender: str | None = None,
        **options: Any,
    ) -> Term | None:
        """Return the best term for name.

        The requested form is tried first, then its fallbacks (see
        ``FORM_FALLBACKS``). With a gender, entries of exactly that gender
        win over all others. Among equally good entries the one listed first
        wins. Options other than form and gender (``plural``, ``number``)
        do not affect the choice.

        Args:
            name: Term name.
            form: Requested form; defaults to ``long``.
            gender: ``masculine``, ``feminine``, or ``neutral``/``none``.
            **options: Rendering options; ignored here.

        Returns:
            The matching term, or None if no term has that name.

        """
        name = str(name)
        candidates = [term for term in self.each_term() if term.name == name]
        if not candidates:
            logger.debug("No term named '%s'", name)
            return None

        form = form or DEFAULT_FORM
        chain = FORM_FALLBACKS.get(form, (form, DEFAULT_FORM))

        if gender is not None:
            gendered = [
                t for t in candidates if t.exact_match(name=name, gender=gender)
            ]
            if (term := _first_in_chain(gendered, chain)) is not None:
                return term

        if (term := _first_in_chain(candidates, chain)) is not None:
            return term
        return candidates[0]

    def ordinalize(self, number: int) -> Term | None:
        """Return the ordinal suffix term for number.

        An entry for the last two digits (``ordinal-11``) wins over one for
        the last digit (``ordinal-01``), which wins over ``ordinal``.
        """
        number = abs(int(number))
        names = (
            f"ordinal-{number % 100:02d}",
            f"ordinal-{number % 10:02d}",
            "ordinal",
        )
        for name in names:
            if (term := self.lookup(name)) is not None:
                return term
        return None


def _first_in_chain(
    candidates: Iterable[Term],
    chain: tuple[str, ...],
) -> Term | None:
    candidates = list(candidates)
    for form in chain:
        for term in candidates:
            if term.form == form:
                return term
    return None


class Term(
    Node,
    tag="term",
    attributes=("name", ("form", DEFAULT_FORM), "gender", "gender-form", "match"),
    category=TermTable,
):
    """A localized vocabulary entry.

    Content is either flat text (``text``) or a singular/plural pair
    (``single`` and ``multiple``); setting one kind clears the other.
    """

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        /,
        *,
        text: str | None = None,
        single: str | None = None,
        multiple: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(attributes, **kwargs)
        self._text: str | None = None
        if text is not None:
            self.text = text
        if single is not None:
            self.single = single
        if multiple is not None:
            self.multiple = multiple

    # Attributes

    @property
    def name(self) -> str | None:
        return self.attributes["name"]

    @name.setter
    def name(self, value: str | None) -> None:
        self.attributes["name"] = value

    @property
    def form(self) -> str:
        """The form of this term, ``long`` by default."""
        return self.attributes["form"] or DEFAULT_FORM

    @form.setter
    def form(self, value: str | None) -> None:
        self.attributes["form"] = value or DEFAULT_FORM

    @property
    def gender(self) -> str | None:
        """The grammatical gender, or None if the term is neutral."""
        return _gender(self.attributes["gender"])

    @gender.setter
    def gender(self, value: str | None) -> None:
        value = _gender(value)
        if value is not None and value not in GENDERS:
            msg = f"Unknown gender '{value}'; expected one of {GENDERS}"
            raise ValueError(msg)
        self.attributes["gender"] = value

    @property
    def is_gendered(self) -> bool:
        return self.gender is not None

    @property
    def is_neutral(self) -> bool:
        return self.gender is None

    @property
    def is_masculine(self) -> bool:
        return self.gender == "masculine"

    @property
    def is_feminine(self) -> bool:
        return self.gender == "feminine"

    @property
    def is_long(self) -> bool:
        return self.form == "long"

    @property
    def is_short(self) -> bool:
        return self.form == "short"

    @property
    def is_verb(self) -> bool:
        return self.form == "verb"

    @property
    def is_verb_short(self) -> bool:
        return self.form == "verb-short"

    @property
    def is_symbol(self) -> bool:
        return self.form == "symbol"

    @property
    def is_short_ordinal(self) -> bool:
        """Whether the name is ``ordinal`` or ``ordinal-NN``."""
        return self.name is not None and _SHORT_ORDINAL.fullmatch(self.name) is not None

    @property
    def is_long_ordinal(self) -> bool:
        """Whether the name is ``long-ordinal`` or ``long-ordinal-NN``."""
        return self.name is not None and _LONG_ORDINAL.fullmatch(self.name) is not None

    @property
    def is_ordinal(self) -> bool:
        return self.is_short_ordinal or self.is_long_ordinal

    # Matching

    def match(self, criteria: Criteria | None = None, /, **conditions: Any) -> bool:
        """Whether every given condition holds for this term.

        A bare string or pattern is a condition on the name. Patterns are
        searched within the attribute value. A gender condition must match
        exactly; ``none`` and ``neutral`` match a term without gender.

        Example:
            term.match(name=re.compile(r"month-\\d\\d"), gender="masculine")

        """
        if isinstance(criteria, str | re.Pattern):
            criteria = {"name": criteria}
        conditions = {**(criteria or {}), **conditions}
        return all(self._satisfies(key, value) for key, value in conditions.items())

    def exact_match(
        self,
        criteria: Criteria | None = None,
        /,
        **conditions: Any,
    ) -> bool:
        """Like match, but the conditions must name the term's gender.

        A query that says nothing about gender never matches exactly, which
        tells a generic entry apart from a gender-specific one.
        """
        if isinstance(criteria, str | re.Pattern):
            criteria = {"name": criteria}
        conditions = {**(criteria or {}), **conditions}
        keys = {str(key).replace("_", "-") for key in conditions}
        return "gender" in keys and self.match(conditions)

    def _satisfies(self, key: str, expected: Any) -> bool:
        key = str(key).replace("_", "-")
        if key == "gender":
            return _gender(expected) == self.gender

        actual = self.form if key == "form" else self.attributes[key]
        if isinstance(expected, re.Pattern):
            return actual is not None and expected.search(str(actual)) is not None
        return expected == actual

    # Content

    @property
    def text(self) -> str | None:
        """Flat text of the term, or None for a compound term."""
        return self._text

    @text.setter
    def text(self, value: str | None) -> None:
        if value is not None:
            for child in self.children:
                self.remove_child(child)
        self._text = value

    @property
    def is_textnode(self) -> bool:
        return self._text is not None

    def _part(self, kind: type[TextNode]) -> TextNode | None:
        return next((c for c in self._children if isinstance(c, kind)), None)

    def _set_part(self, kind: type[TextNode], value: str | None) -> None:
        current = self._part(kind)
        if value is None:
            if current is not None:
                self.remove_child(current)
            return
        if current is not None:
            current.text = value
            return

        node = self.add_child(kind(text=value))
        if kind is Single:
            self._children.remove(node)
            self._children.insert(0, node)

    @property
    def single(self) -> str | None:
        part = self._part(Single)
        return None if part is None else part.text

    @single.setter
    def single(self, value: str | None) -> None:
        self._set_part(Single, value)

    @property
    def multiple(self) -> str | None:
        part = self._part(Multiple)
        return None if part is None else part.text

    @multiple.setter
    def multiple(self, value: str | None) -> None:
        self._set_part(Multiple, value)

    def add_child(self, child: Node | str) -> Node | str:
        child = super().add_child(child)
        self._text = None
        return child

    def singularize(self) -> str:
        if self.is_textnode:
            return self._text
        return self.single or ""

    def pluralize(self) -> str:
        if self.is_textnode:
            return self._text
        return self.multiple or ""

    def to_string(
        self,
        *,
        number: str | int | None = None,
        plural: bool = False,
    ) -> str:
        """Render the term as text.

        Flat terms always render their text. Compound terms render the
        plural when ``number`` is ``"plural"`` or an integer other than 1,
        or when ``plural`` is true; otherwise the singular.
        """
        if self.is_textnode:
            return self._text

        if plural or number == "plural":
            return self.pluralize()
        if isinstance(number, int) and not isinstance(number, bool) and number != 1:
            return self.pluralize()
        return self.singularize()

    def __str__(self) -> str:
        return self.to_string()

    # Markup

    def markup_attributes(self) -> Iterator[tuple[str, Any]]:
        """Yield the set attributes, leaving out the default ``long`` form."""
        for key, value in self:
            if key != "form" or value != DEFAULT_FORM:
                yield key, value

    def _content(self) -> tuple[Node | str, ...]:
        if self.is_textnode:
            return (self._text,)
        return super()._content()

    def tags(self) -> Iterator[str]:
        if self.is_textnode:
            return text_tags(self.nodename, self.markup_attributes(), self._text)
        return super().tags()


class Single(TextNode, tag="single", category=Term):
    """Singular form of a compound term."""


class Multiple(TextNode, tag="multiple", category=Term):
    """Plural form of a compound term."""
