"""Chat message data model."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A single entry in a conversation.

    User messages carry the trimmed input; bot messages carry the reply or
    error text exactly as produced.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    is_user: bool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def user(cls, text: str) -> "Message":
        """Create a message typed by the user."""
        return cls(text=text, is_user=True)

    @classmethod
    def bot(cls, text: str) -> "Message":
        """Create a reply (or error) message shown on the bot side."""
        return cls(text=text, is_user=False)
