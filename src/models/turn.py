"""Per-event processing outcome."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from models.delivery import DeliveryResult


class TurnResult(BaseModel):
    """What happened to one inbound message."""

    identifier: str
    message_id: Optional[str] = None
    status: str = Field(description="handled|ignored|duplicate")
    payloads: List[Dict[str, Any]] = Field(default_factory=list)
    deliveries: List[DeliveryResult] = Field(default_factory=list)
    latency_ms: int = 0
    correlation_id: str
