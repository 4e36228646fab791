"""Tests for csltree.attributes module."""

import pytest

from csltree.attributes import AttributeRecord, create_attributes
from csltree.errors import MergeTypeError

SCHEMA = (("family", None), ("given", None), ("nick", None), ("form", "long"))


class TestCreateAttributes:
    """Test building attributes from a schema."""

    def test_defaults_are_applied(self) -> None:
        """Test that schema defaults fill unset keys."""
        record = create_attributes(SCHEMA)

        assert isinstance(record, AttributeRecord)
        assert record["form"] == "long"
        assert record["family"] is None

    def test_supplied_values_override_defaults(self) -> None:
        """Test that supplied values win over defaults."""
        record = create_attributes(SCHEMA, {"family": "Matsumoto", "form": "short"})

        assert record["family"] == "Matsumoto"
        assert record["form"] == "short"

    def test_none_never_overrides_default(self) -> None:
        """Test that a None value keeps the default."""
        record = create_attributes(SCHEMA, {"form": None})

        assert record["form"] == "long"

    def test_unknown_keys_are_dropped(self) -> None:
        """Test that keys outside the schema are ignored."""
        record = create_attributes(SCHEMA, {"family": "Matsumoto", "foo": "bar"})

        assert "foo" not in record
        assert record["foo"] is None
        assert record.to_dict() == {"family": "Matsumoto", "form": "long"}

    def test_without_schema_returns_mapping(self) -> None:
        """Test that types without schema keep arbitrary attributes."""
        attributes = create_attributes(None, {"foo": "bar", "baz": "1"})

        assert attributes == {"foo": "bar", "baz": "1"}
        assert type(attributes) is dict

    def test_without_schema_and_attributes(self) -> None:
        """Test that no schema and no attributes yields an empty dict."""
        assert create_attributes(None) == {}


class TestAttributeRecord:
    """Test AttributeRecord access."""

    def test_keys_in_schema_order(self) -> None:
        """Test that keys keep declaration order."""
        record = AttributeRecord(["b", "a", "c"])

        assert record.keys() == ("b", "a", "c")
        assert list(record) == ["b", "a", "c"]
        assert len(record) == 3

    def test_values_skips_unset(self) -> None:
        """Test that values() only returns set values in schema order."""
        record = AttributeRecord(
            ["family", "given", "nick"],
            {"nick": "Matz", "family": "Matsumoto"},
        )

        assert record.values() == ["Matsumoto", "Matz"]
        assert record.to_list() == ["Matsumoto", None, "Matz"]

    def test_is_empty(self) -> None:
        """Test that a record is empty when all values are unset."""
        record = AttributeRecord(["family", "given"])
        assert record.is_empty

        record["given"] = "Yukihiro"
        assert not record.is_empty

    def test_assignment_to_unknown_key_is_ignored(self) -> None:
        """Test that setting a key outside the schema is a no-op."""
        record = AttributeRecord(["family"])
        record["foo"] = "bar"

        assert record["foo"] is None
        assert record.to_dict() == {}

    def test_underscore_spelling(self) -> None:
        """Test that underscored keys address hyphenated attributes."""
        record = AttributeRecord(["gender-form"])
        record["gender_form"] = "feminine"

        assert record["gender-form"] == "feminine"
        assert "gender_form" in record

    def test_equality_ignores_unset_values(self) -> None:
        """Test equality with records and plain mappings."""
        left = AttributeRecord(["a", "b"], {"a": "1"})
        right = AttributeRecord(["a", "b", "c"], {"a": "1"})

        assert left == right
        assert left == {"a": "1", "b": None}
        assert left != {"a": "2"}

    def test_repr(self) -> None:
        """Test that repr lists the set values."""
        record = AttributeRecord(["a", "b"], {"b": "x"})

        assert repr(record) == "AttributeRecord(b='x')"


class TestFetch:
    """Test AttributeRecord.fetch()."""

    def test_returns_set_value(self) -> None:
        """Test fetching a set value."""
        record = AttributeRecord(["family"], {"family": "Matsumoto"})

        assert record.fetch("family") == "Matsumoto"

    def test_unknown_key_returns_default(self) -> None:
        """Test that unknown keys degrade to the default."""
        record = AttributeRecord(["family"])

        assert record.fetch("foo") is None
        assert record.fetch("foo", "bar") == "bar"

    def test_falsy_value_returns_default(self) -> None:
        """Test that empty values count as absent."""
        record = AttributeRecord(["family"], {"family": ""})

        assert record.fetch("family", "default") == "default"

    def test_fallback_is_called_with_key(self) -> None:
        """Test that the fallback producer receives the key."""
        record = AttributeRecord(["family"])

        assert record.fetch("family", fallback=str.upper) == "FAMILY"


class TestMerge:
    """Test AttributeRecord.merge()."""

    def test_merge_overwrites_set_values(self) -> None:
        """Test that set values of the other mapping win."""
        record = AttributeRecord(
            ["family", "given"],
            {"family": "Matsumoto", "given": "Yukihiro"},
        )
        result = record.merge({"given": "Matz", "family": None})

        assert result is record
        assert record.to_dict() == {"family": "Matsumoto", "given": "Matz"}

    def test_merge_another_record(self) -> None:
        """Test merging from another record."""
        record = AttributeRecord(["family", "given"])
        record.merge(AttributeRecord(["given"], {"given": "Matz"}))

        assert record["given"] == "Matz"

    def test_merge_ignores_unknown_keys(self) -> None:
        """Test that keys outside the schema are skipped."""
        record = AttributeRecord(["family"])
        record.merge({"foo": "bar"})

        assert record.is_empty

    @pytest.mark.parametrize("other", ["family=Matz", 42, ["family", "Matz"], None])
    def test_merge_rejects_non_mappings(self, other: object) -> None:
        """Test that values without key/value pairs raise MergeTypeError."""
        record = AttributeRecord(["family"])

        with pytest.raises(MergeTypeError, match=type(other).__name__) as info:
            record.merge(other)

        assert info.value.argument_type is type(other)
        assert isinstance(info.value, TypeError)


class TestValuesAt:
    """Test AttributeRecord.values_at()."""

    def test_mixed_selectors(self) -> None:
        """Test indices, slices, and key names in one call."""
        record = AttributeRecord(
            ["family", "given", "nick"],
            {"family": "Matsumoto", "given": "Yukihiro", "nick": "Matz"},
        )

        assert record.values_at("nick", 0) == ["Matz", "Matsumoto"]
        expected = ["Matsumoto", "Yukihiro", "Matz"]
        assert record.values_at(slice(0, 2), "nick") == expected

    def test_nested_selectors_are_flattened(self) -> None:
        """Test that lists of selectors are flattened."""
        record = AttributeRecord(
            ["family", "nick"],
            {"family": "Matsumoto", "nick": "Matz"},
        )

        assert record.values_at(["family", "nick"]) == ["Matsumoto", "Matz"]

    def test_unknown_key_yields_none(self) -> None:
        """Test that unknown key selectors read as None."""
        record = AttributeRecord(["family"])

        assert record.values_at("foo") == [None]
