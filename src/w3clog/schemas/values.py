from __future__ import annotations

from datetime import datetime
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


# ---------- Variants ----------
class StringValue(BaseModel):
    kind: Literal["string"] = "string"
    value: str

    def stringify(self, formatter: Any) -> str:
        return self.value


class IntValue(BaseModel):
    kind: Literal["int"] = "int"
    value: int

    def stringify(self, formatter: Any) -> str:
        return str(self.value)


class TimestampValue(BaseModel):
    kind: Literal["timestamp"] = "timestamp"
    value: datetime

    def stringify(self, formatter: Any) -> str:
        # date and time must share one column
        return formatter.format_timestamp(self.value).replace(" ", "_")


class AddressValue(BaseModel):
    kind: Literal["address"] = "address"
    value: Union[IPv4Address, IPv6Address]

    def stringify(self, formatter: Any) -> str:
        return str(self.value)


class OpaqueValue(BaseModel):
    """Anything the log format has no column rendering for."""
    kind: Literal["opaque"] = "opaque"
    value: Any = None

    def stringify(self, formatter: Any) -> str:
        return "-"


FieldValue = Annotated[
    Union[StringValue, IntValue, TimestampValue, AddressValue, OpaqueValue],
    Field(discriminator="kind"),
]

_VARIANTS = (StringValue, IntValue, TimestampValue, AddressValue, OpaqueValue)


def is_field_value(obj: Any) -> bool:
    return isinstance(obj, _VARIANTS)


def coerce_value(raw: Any):
    """
    Wrap a plain Python value into its FieldValue variant.

    bool is an int subclass but has no meaning as a counter, so it is opaque.
    """
    if is_field_value(raw):
        return raw
    if isinstance(raw, str):
        return StringValue(value=raw)
    if isinstance(raw, bool):
        return OpaqueValue(value=raw)
    if isinstance(raw, int):
        return IntValue(value=raw)
    if isinstance(raw, datetime):
        return TimestampValue(value=raw)
    if isinstance(raw, (IPv4Address, IPv6Address)):
        return AddressValue(value=raw)
    return OpaqueValue(value=raw)


def parse_text_value(text: str):
    """
    Best-effort parse of a command-line token.

    Order: int -> IP address -> ISO-8601 datetime -> string.
    """
    try:
        return IntValue(value=int(text))
    except ValueError:
        pass
    try:
        return AddressValue(value=ip_address(text))
    except ValueError:
        pass
    try:
        return TimestampValue(value=datetime.fromisoformat(text))
    except ValueError:
        pass
    return StringValue(value=text)
