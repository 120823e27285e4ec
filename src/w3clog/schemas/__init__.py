from __future__ import annotations

# core models
from .core import (
    FieldSet,
    HeaderState,
)

# field values
from .values import (
    StringValue,
    IntValue,
    TimestampValue,
    AddressValue,
    OpaqueValue,
    FieldValue,
    coerce_value,
    is_field_value,
    parse_text_value,
)


__all__ = [
    "FieldSet",
    "HeaderState",
    "StringValue",
    "IntValue",
    "TimestampValue",
    "AddressValue",
    "OpaqueValue",
    "FieldValue",
    "coerce_value",
    "is_field_value",
    "parse_text_value",
]
