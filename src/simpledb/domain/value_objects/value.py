"""Tagged scalar values stored in table rows.

A Value holds exactly one of an integer, a string, a boolean or null. The
string case always owns its payload (Python strings are immutable), and
values themselves are frozen so rows can share them freely.

Equality is tag-sensitive: ``Value.int(1)`` never equals ``Value.bool(True)``
or ``Value.str("1")``, even though Python would consider ``1 == True``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from simpledb.domain.errors import TypeMismatchError


class ValueKind(Enum):
    """Value tags. The integer value is the persisted type id."""

    INT = 0
    STRING = 1
    BOOL = 2
    NULL = 3

    @property
    def label(self) -> str:
        """Lower-case name used in messages."""
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> ValueKind:
        """Look up a kind by name, case-insensitively.

        Raises:
            ValueError: If the name is not a known kind.
        """
        try:
            return cls[name.upper()]
        except KeyError as e:
            raise ValueError(f"Unknown value kind: {name!r}") from e


_CONSTRUCTORS = {
    ValueKind.INT: "int",
    ValueKind.STRING: "str",
    ValueKind.BOOL: "bool",
    ValueKind.NULL: "null",
}

_ARTICLES = {
    ValueKind.INT: "an int",
    ValueKind.STRING: "a string",
    ValueKind.BOOL: "a bool",
    ValueKind.NULL: "null",
}


@dataclass(frozen=True, slots=True)
class Value:
    """An immutable tagged scalar.

    Use the named constructors rather than the raw dataclass constructor.

    Example:
        >>> Value.int(42).as_int()
        42
        >>> Value.str("42") == Value.int(42)
        False
    """

    kind: ValueKind
    payload: int | str | bool | None = None

    def __post_init__(self) -> None:
        expected = {
            ValueKind.INT: int,
            ValueKind.STRING: str,
            ValueKind.BOOL: bool,
        }.get(self.kind)
        if self.kind == ValueKind.NULL:
            if self.payload is not None:
                raise TypeMismatchError("null value cannot carry a payload")
            return
        # bool is a subclass of int, so INT must reject it explicitly
        if type(self.payload) is not expected:
            raise TypeMismatchError(
                f"payload {self.payload!r} is not {_ARTICLES[self.kind]}"
            )

    @classmethod
    def int(cls, value: int) -> Value:
        return cls(ValueKind.INT, value)

    @classmethod
    def str(cls, value: str) -> Value:
        return cls(ValueKind.STRING, value)

    @classmethod
    def bool(cls, value: bool) -> Value:
        return cls(ValueKind.BOOL, value)

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL, None)

    @classmethod
    def of(cls, obj: Any) -> Value:
        """Build a Value from a native Python object.

        Args:
            obj: An int, str, bool or None.

        Returns:
            The matching Value.

        Raises:
            TypeMismatchError: If the object has no Value representation.
        """
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.bool(obj)
        if isinstance(obj, int):
            return cls.int(obj)
        if isinstance(obj, str):
            return cls.str(obj)
        raise TypeMismatchError(f"cannot store {type(obj).__name__} in a Value")

    def is_null(self) -> bool:
        return self.kind == ValueKind.NULL

    def as_int(self) -> int:
        """Return the integer payload.

        Raises:
            TypeMismatchError: If this is not an int.
        """
        self._expect(ValueKind.INT)
        return self.payload  # type: ignore[return-value]

    def as_str(self) -> str:
        """Return the string payload.

        Raises:
            TypeMismatchError: If this is not a string.
        """
        self._expect(ValueKind.STRING)
        return self.payload  # type: ignore[return-value]

    def as_bool(self) -> bool:
        """Return the boolean payload.

        Raises:
            TypeMismatchError: If this is not a bool.
        """
        self._expect(ValueKind.BOOL)
        return self.payload  # type: ignore[return-value]

    def equals(self, other: Value) -> bool:
        """Tag-sensitive equality; two nulls are equal."""
        return self == other

    def to_python(self) -> int | str | bool | None:
        """Return the native payload (None for null)."""
        return self.payload

    def _expect(self, kind: ValueKind) -> None:
        if self.kind != kind:
            raise TypeMismatchError(f"not {_ARTICLES[kind]}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind == other.kind and self.payload == other.payload

    def __hash__(self) -> int:
        return hash((self.kind, self.payload))

    def __str__(self) -> str:
        if self.kind == ValueKind.NULL:
            return "NULL"
        if self.kind == ValueKind.BOOL:
            return "true" if self.payload else "false"
        return f"{self.payload}"

    def __repr__(self) -> str:
        if self.kind == ValueKind.NULL:
            return "Value.null()"
        return f"Value.{_CONSTRUCTORS[self.kind]}({self.payload!r})"
