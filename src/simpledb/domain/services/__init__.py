"""Domain services.

Services implement logic that doesn't naturally fit within a single
entity. The table codec converts tables to and from the persisted text
format.
"""

from simpledb.domain.services.table_codec import (
    decode_row,
    decode_table,
    encode_table,
    encode_value,
)

__all__ = [
    "decode_row",
    "decode_table",
    "encode_table",
    "encode_value",
]
