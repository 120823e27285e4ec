from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from typing import List
import os


def _env_fields() -> List[str]:
    raw = os.getenv("W3C_FIELDS", "")
    return [f.strip() for f in raw.split(",") if f.strip()]


class W3CConfig(BaseModel):
    """
    Global configuration for W3C logging.

    Notes:
    - Every value can come from the environment (or a .env file via the CLI).
    - header_repeat_ms bounds how long a tailing parser can go without a header.
    """
    fields: List[str] = Field(default_factory=_env_fields)
    log_path: str = Field(default_factory=lambda: os.getenv("W3C_LOG_PATH", "w3c.log"))
    header_repeat_ms: int = Field(default_factory=lambda: int(os.getenv("W3C_HEADER_REPEAT_MS", "60000")))
    log_level: str = Field(default_factory=lambda: os.getenv("W3C_LOG_LEVEL", "WARNING"))

    @field_validator("header_repeat_ms")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("header_repeat_ms must be > 0")
        return v

