"""
Locale Terms Example
====================

Resolving localized terms from a locale fragment, demonstrating:
- Parsing markup into a typed tree (unknown tags are kept as generic nodes)
- Form fallback in TermTable.lookup
- Singular/plural rendering and ordinal suffixes
- Defining a new node type and round-tripping the tree
"""

from csltree import Node, TermTable, from_xml, to_xml

LOCALE = """
<locale xml:lang="en-US">
  <date form="text" delimiter=" "/>
  <terms>
    <term name="page" form="short">
      <single>p.</single>
      <multiple>pp.</multiple>
    </term>
    <term name="page">
      <single>page</single>
      <multiple>pages</multiple>
    </term>
    <term name="editor" form="verb">edited by</term>
    <term name="ordinal">th</term>
    <term name="ordinal-01">st</term>
    <term name="ordinal-02">nd</term>
    <term name="ordinal-03">rd</term>
    <term name="ordinal-11">th</term>
    <term name="ordinal-12">th</term>
    <term name="ordinal-13">th</term>
  </terms>
</locale>
"""


# ============================================================================
# Define Nodes
# ============================================================================

class Date(Node, tag="date", attributes=("form", "delimiter", "variable")):
    """Localized date format."""


# ============================================================================
# Usage
# ============================================================================

def main() -> None:
    locale = from_xml(LOCALE)
    terms = locale.find_child("terms")
    assert isinstance(terms, TermTable)

    print("Locale node:", repr(locale))
    print("Date node:", repr(locale.find_child("date")))

    page = terms.lookup("page", form="symbol")  # symbol -> short
    print("3 pages:", f"3 {page.to_string(number=3)}")

    editor = terms.lookup("editor", form="verb-short")  # verb-short -> verb
    print("Editor:", editor.to_string())

    for number in (1, 2, 3, 4, 11, 21, 112):
        print(f"{number}{terms.ordinalize(number)}", end=" ")
    print()

    print()
    print(to_xml(locale, indent=2))
    assert from_xml(to_xml(locale)) == locale


if __name__ == "__main__":
    main()
