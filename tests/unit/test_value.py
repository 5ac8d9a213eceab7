"""Unit tests for the Value type."""

from __future__ import annotations

import pytest

from simpledb.domain.errors import ErrorKind, TypeMismatchError
from simpledb.domain.value_objects import Value, ValueKind


@pytest.mark.unit
class TestValueConstruction:
    """Tests for Value constructors."""

    def test_named_constructors(self) -> None:
        """Each constructor produces the matching tag."""
        assert Value.int(42).kind == ValueKind.INT
        assert Value.str("hi").kind == ValueKind.STRING
        assert Value.bool(True).kind == ValueKind.BOOL
        assert Value.null().kind == ValueKind.NULL

    def test_of_native_objects(self) -> None:
        """Value.of maps Python objects to tags."""
        assert Value.of(7) == Value.int(7)
        assert Value.of("x") == Value.str("x")
        assert Value.of(False) == Value.bool(False)
        assert Value.of(None) == Value.null()

    def test_of_unsupported_object(self) -> None:
        """Unsupported objects are rejected."""
        with pytest.raises(TypeMismatchError):
            Value.of(1.5)

    def test_bool_payload_rejected_for_int(self) -> None:
        """A bool is not an int payload."""
        with pytest.raises(TypeMismatchError):
            Value(ValueKind.INT, True)

    def test_null_with_payload_rejected(self) -> None:
        """Null cannot carry a payload."""
        with pytest.raises(TypeMismatchError):
            Value(ValueKind.NULL, 0)

    def test_large_integers(self) -> None:
        """Integers are not bounded to 32 bits."""
        big = 2**40
        assert Value.int(big).as_int() == big


@pytest.mark.unit
class TestValueAccessors:
    """Tests for typed accessors."""

    def test_matching_accessors(self) -> None:
        """Accessors return the payload for the matching tag."""
        assert Value.int(42).as_int() == 42
        assert Value.str("Alice").as_str() == "Alice"
        assert Value.bool(False).as_bool() is False
        assert Value.null().is_null()

    def test_wrong_accessor(self) -> None:
        """A mismatched accessor raises TypeMismatchError."""
        with pytest.raises(TypeMismatchError) as exc_info:
            Value.int(42).as_str()

        assert exc_info.value.kind == ErrorKind.TYPE_MISMATCH
        assert exc_info.value.message == "not a string"

    def test_accessors_on_null(self) -> None:
        """Null has no payload accessor."""
        with pytest.raises(TypeMismatchError, match="not an int"):
            Value.null().as_int()
        with pytest.raises(TypeMismatchError, match="not a bool"):
            Value.null().as_bool()

    def test_to_python(self) -> None:
        """to_python returns native payloads."""
        assert Value.int(3).to_python() == 3
        assert Value.null().to_python() is None


@pytest.mark.unit
class TestValueEquality:
    """Tests for tag-sensitive equality."""

    def test_same_tag_same_payload(self) -> None:
        """Equal tag and payload compare equal."""
        assert Value.int(1) == Value.int(1)
        assert Value.str("a").equals(Value.str("a"))

    def test_nulls_are_equal(self) -> None:
        """Two nulls are equal."""
        assert Value.null() == Value.null()

    def test_different_tags_never_equal(self) -> None:
        """Int 1, bool true and string "1" are all distinct."""
        assert Value.int(1) != Value.bool(True)
        assert Value.int(1) != Value.str("1")
        assert Value.int(0) != Value.null()

    def test_hash_consistent_with_equality(self) -> None:
        """Values can be used in sets."""
        values = {Value.int(1), Value.int(1), Value.bool(True)}
        assert len(values) == 2


@pytest.mark.unit
class TestValueKind:
    """Tests for ValueKind."""

    def test_type_ids(self) -> None:
        """Persisted type ids are stable."""
        assert [kind.value for kind in ValueKind] == [0, 1, 2, 3]

    def test_from_name_case_insensitive(self) -> None:
        """Kinds are looked up by name in any case."""
        assert ValueKind.from_name("int") == ValueKind.INT
        assert ValueKind.from_name("String") == ValueKind.STRING

    def test_from_name_unknown(self) -> None:
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            ValueKind.from_name("float")

    def test_str_rendering(self) -> None:
        """Values render for display."""
        assert str(Value.null()) == "NULL"
        assert str(Value.bool(True)) == "true"
        assert str(Value.int(-5)) == "-5"
        assert repr(Value.str("a")) == "Value.str('a')"

    def test_repr_names_the_constructor(self) -> None:
        """repr reads back as the named constructor call."""
        assert repr(Value.str("a")) == "Value.str('a')"
        assert repr(Value.int(7)) == "Value.int(7)"
        assert repr(Value.bool(False)) == "Value.bool(False)"
        assert repr(Value.null()) == "Value.null()"
