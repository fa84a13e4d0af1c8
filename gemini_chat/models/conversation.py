"""Request and response models for the HTTP surface."""

from datetime import datetime

from pydantic import BaseModel

from gemini_chat.models.messages import Message


class ConversationRequest(BaseModel):
    """Request model for conversation endpoint."""

    message: str
    session_id: str | None = None


class ConversationResponse(BaseModel):
    """Conversation transcript after an operation."""

    session_id: str
    reply: Message | None = None
    messages: list[Message]
    busy: bool = False


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
