"""
Request envelope and result payload models.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class RequestEnvelope(BaseModel):
    """Validated, schema-filtered request actually sent over a transport."""
    intent: str
    params: dict[str, Any] = Field(default_factory=dict)
    session: Optional[str] = None

    @property
    def pubkey(self) -> Optional[str]:
        return self.params.get("pubkey")

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {"intent": self.intent, **self.params}
        if self.session:
            message["session"] = self.session
        return message


class IntentResult(BaseModel):
    """Result payload from the confirmation surface. Intent-specific fields are kept as extras."""
    model_config = ConfigDict(extra="allow")

    intent: Optional[str] = None
    granted: Optional[bool] = None
    pubkey: Optional[str] = None
    session: Optional[str] = None
    valid_until: Optional[int] = None
    grants: Optional[list[str]] = None

    @property
    def is_session_grant(self) -> bool:
        return self.intent == "implicit_flow" and self.granted is True


class FrameMetadata(BaseModel):
    request_id: str
    timestamp: str
    origin: Optional[str] = None


class RelayFrame(BaseModel):
    """Wire frame exchanged with the confirmation surface relay."""
    metadata: FrameMetadata
    type: str  # "intent:request" | "intent:response" | "intent:closed"
    mode: Optional[str] = None  # "interactive" | "implicit"
    payload: Optional[dict[str, Any]] = None
