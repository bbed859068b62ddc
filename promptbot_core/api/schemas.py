"""
Pydantic schemas for the bot hosting API.

Defines response models for the messaging and health endpoints.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..schema import Activity


class TurnResponse(BaseModel):
    """Activities the bot sent while handling an inbound activity."""

    conversation_id: Optional[str] = Field(None, description="Conversation identifier")
    activities: List[Activity] = Field(default_factory=list, description="Outbound activities in send order")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "conversation_id": "conv-abc",
                    "activities": [{"type": "message", "text": "Please enter your name."}],
                }
            ]
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = "healthy"
    service: str = "promptbot"
    version: str = "1.0.0"
    timestamp: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    code: str
    details: Optional[Dict[str, Any]] = None
