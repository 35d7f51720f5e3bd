"""
Relay frame construction and parsing.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from albedo_intent.models.envelope import FrameMetadata, RelayFrame

REQUEST_EVENT = "intent:request"
RESPONSE_EVENT = "intent:response"
CLOSED_EVENT = "intent:closed"


def new_request_id() -> str:
    return str(uuid.uuid4())


def build_request_frame(
    message: dict[str, Any],
    request_id: str,
    mode: str = "interactive",
    origin: Optional[str] = None,
) -> dict[str, Any]:
    """Build an intent:request frame as a dict ready for Socket.IO emit."""
    frame = RelayFrame(
        metadata=FrameMetadata(
            request_id=request_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            origin=origin,
        ),
        type=REQUEST_EVENT,
        mode=mode,
        payload=message,
    )
    return frame.model_dump(exclude_none=True)


def parse_frame(raw: Any) -> Optional[RelayFrame]:
    """Parse an inbound relay frame. Returns None if invalid."""
    if not isinstance(raw, dict):
        return None
    try:
        return RelayFrame.model_validate(raw)
    except ValueError:
        return None
