"""Value objects for the SimpleDB domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    - Value: Tagged scalar (int, string, bool or null)
    - ValueKind: Value tags; the enum value is the persisted type id
"""

from simpledb.domain.value_objects.value import Value, ValueKind

__all__ = [
    "Value",
    "ValueKind",
]
