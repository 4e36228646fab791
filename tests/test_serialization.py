"""Tests for csltree.serialization module."""

from csltree.nodes import Node, TextNode
from csltree.serialization import (
    attribute_assignments,
    escape_attribute,
    escape_text,
    pretty_print,
    to_xml,
)


class Group(Node, tag="group-serial", attributes=("delimiter", "prefix")):
    """Branching node used in serialization tests."""


class Value(TextNode, tag="value-serial", attributes=("form",)):
    """Text node used in serialization tests."""


class TestEscaping:
    """Test escaping helpers."""

    def test_escape_text(self) -> None:
        """Test that markup characters in text are escaped."""
        assert escape_text("a < b & c > d") == "a &lt; b &amp; c &gt; d"

    def test_escape_attribute_quotes(self) -> None:
        """Test that attribute values are double-quoted and escaped."""
        assert escape_attribute('say "hi" & go') == '"say &quot;hi&quot; &amp; go"'

    def test_escape_attribute_whitespace(self) -> None:
        """Test that newlines, carriage returns and tabs become references."""
        assert escape_attribute("a\nb\rc\td") == '"a&#10;b&#13;c&#9;d"'

    def test_escape_text_carriage_return(self) -> None:
        """Test that carriage returns in text become references."""
        assert escape_text("a\r\nb\tc") == "a&#13;\nb\tc"

    def test_escape_attribute_non_string(self) -> None:
        """Test that scalar values are rendered with str()."""
        assert escape_attribute(3) == '"3"'

    def test_attribute_assignments_skip_unset(self) -> None:
        """Test that unset values are left out."""
        pairs = [("a", "1"), ("b", None), ("c", "x")]

        assert attribute_assignments(pairs) == ['a="1"', 'c="x"']


class TestTags:
    """Test markup fragments."""

    def test_childless_node_is_self_closing(self) -> None:
        """Test a node without children."""
        assert list(Group().tags()) == ["<group-serial/>"]

    def test_attributes_in_schema_order(self) -> None:
        """Test that assignments follow the schema, not the input order."""
        node = Group({"prefix": "(", "delimiter": ", "})

        assert list(node.tags()) == ['<group-serial delimiter=", " prefix="("/>']

    def test_node_with_children(self) -> None:
        """Test open tag, child fragments, close tag."""
        node = Group(delimiter=" ").add_children(Value(text="a"), Group())

        assert list(node.tags()) == [
            '<group-serial delimiter=" ">',
            "<value-serial>",
            "a",
            "</value-serial>",
            "<group-serial/>",
            "</group-serial>",
        ]

    def test_text_node_is_never_self_closing(self) -> None:
        """Test that empty text still renders open and close tags."""
        assert list(Value().tags()) == ["<value-serial>", "", "</value-serial>"]

    def test_text_node_escapes_text(self) -> None:
        """Test that text node content is escaped."""
        assert Value(text="R&D").to_xml() == "<value-serial>R&amp;D</value-serial>"

    def test_string_children_render_as_text(self) -> None:
        """Test that literal text children are raw escaped text."""
        node = Node.create("p").add_children("a < b", Node.create("br"), "c")

        assert node.to_xml() == "<p>a &lt; b<br/>c</p>"

    def test_tags_are_lazy(self) -> None:
        """Test that tags() is a generator."""
        fragments = Group().add_children(Group()).tags()

        assert next(fragments) == "<group-serial>"

    def test_generic_node_keeps_attribute_order(self) -> None:
        """Test that unknown attributes are rendered in insertion order."""
        node = Node.create("foo", {"z": "1", "a": "2"})

        assert node.to_xml() == '<foo z="1" a="2"/>'


class TestPrettyPrint:
    """Test indented output."""

    def test_nested_output(self) -> None:
        """Test one element per line with indentation."""
        node = Group(delimiter=", ").add_children(
            Value(text="a"),
            Group().add_children(Value({"form": "short"}, text="b")),
        )

        assert pretty_print(node) == (
            '<group-serial delimiter=", ">\n'
            "  <value-serial>a</value-serial>\n"
            "  <group-serial>\n"
            '    <value-serial form="short">b</value-serial>\n'
            "  </group-serial>\n"
            "</group-serial>"
        )

    def test_custom_indent(self) -> None:
        """Test the indent option."""
        node = Group().add_children(Group())

        expected = "<group-serial>\n    <group-serial/>\n</group-serial>"
        assert node.pretty_print(indent=4) == expected

    def test_str_is_pretty_print(self) -> None:
        """Test that str() renders indented markup."""
        node = Group().add_children(Group())

        assert str(node) == pretty_print(node)

    def test_mixed_content_stays_on_one_line(self) -> None:
        """Test that text children keep their node on one line."""
        paragraph = Node.create("p").add_children("x", Node.create("br"))
        node = Group().add_children(paragraph)

        expected = "<group-serial>\n  <p>x<br/></p>\n</group-serial>"
        assert pretty_print(node) == expected

    def test_to_xml_is_compact(self) -> None:
        """Test that to_xml joins fragments without whitespace."""
        node = Group().add_children(Value(text="a"))

        expected = "<group-serial><value-serial>a</value-serial></group-serial>"
        assert to_xml(node) == expected
