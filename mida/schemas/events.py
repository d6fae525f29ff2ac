"""
Event schemas for Mida.

MidaEvent is the single payload type delivered by MidaEmitter to its
listeners (e.g. broker account notifications such as "tick" or "order").
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MidaEvent(BaseModel):
    """
    Immutable event notified to listeners.

    Attributes:
        type: Event type, e.g. "tick" ("*" is reserved for wildcard listeners)
        date: Creation time (UTC)
        descriptor: Event payload

    Example:
        >>> MidaEvent(type="tick", descriptor={"symbol": "EURUSD", "bid": 1.1025})
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str = Field(..., min_length=1, description="Event type")
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Creation time (UTC)")
    descriptor: Dict[str, Any] = Field(default_factory=dict, description="Event payload")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Wildcard is a subscription, not an event type."""
        if v == "*":
            raise ValueError("'*' cannot be used as an event type")
        return v
