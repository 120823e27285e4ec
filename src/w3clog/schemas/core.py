from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


# ---------- Field set ----------
class FieldSet(BaseModel):
    """
    Ordered, immutable column list.

    Defines both the column order of data lines and which names
    are expected to be recorded.
    """
    model_config = ConfigDict(frozen=True)

    names: Tuple[str, ...]

    @field_validator("names")
    @classmethod
    def _check_names(cls, names: Tuple[str, ...]) -> Tuple[str, ...]:
        seen = set()
        for name in names:
            if not name or any(ch.isspace() for ch in name):
                raise ValueError(f"invalid field name: {name!r}")
            if name in seen:
                raise ValueError(f"duplicate field name: {name}")
            seen.add(name)
        return names

    @classmethod
    def of(cls, *names: str) -> "FieldSet":
        return cls(names=tuple(names))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)


# ---------- Header state ----------
class HeaderState(BaseModel):
    """
    Last emitted header CRC and the time after which the header is due again.

    Both None means no header has been written yet (fresh).
    """
    last_checksum: Optional[int] = None
    next_header_at: Optional[datetime] = None

    def is_current(self, checksum: int, now: datetime) -> bool:
        if self.last_checksum is None or self.next_header_at is None:
            return False
        return checksum == self.last_checksum and now < self.next_header_at

    def mark_emitted(self, checksum: int, now: datetime, repeat_interval: timedelta) -> None:
        self.last_checksum = checksum
        self.next_header_at = now + repeat_interval
