"""
Implicit session models.
"""

import math
from typing import Any
from pydantic import BaseModel, Field, field_validator


class ImplicitSession(BaseModel):
    pubkey: str
    key: str
    valid_until: int  # Unix epoch, milliseconds
    grants: list[str] = Field(default_factory=list)

    @field_validator("valid_until", mode="before")
    @classmethod
    def _truncate_fractional_ms(cls, value: Any) -> Any:
        # confirmation surfaces may send millisecond arithmetic as a float
        if isinstance(value, float) and math.isfinite(value):
            return int(value)
        return value

    def is_expired(self, now_ms: int) -> bool:
        return self.valid_until < now_ms

    def allows(self, intent: str) -> bool:
        return intent in self.grants

    def to_record(self) -> dict[str, Any]:
        """Persisted layout, keyed by pubkey outside."""
        return {"key": self.key, "valid_until": self.valid_until, "grants": list(self.grants)}

    @classmethod
    def from_record(cls, pubkey: str, record: dict[str, Any]) -> "ImplicitSession":
        return cls(pubkey=pubkey, **record)
