"""Conversation store and chat session state."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from gemini_chat.models.messages import Message
from gemini_chat.utils.logging import get_logger

logger = get_logger(__name__)

MessageListener = Callable[[Message], None]


class ConversationStore:
    """Append-only, insertion-ordered sequence of messages."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._listeners: list[MessageListener] = []

    def append(self, message: Message) -> None:
        """Add a message to the end and notify listeners."""
        self._messages.append(message)
        for listener in self._listeners:
            listener(message)

    def all(self) -> list[Message]:
        """Return the messages in insertion order."""
        return list(self._messages)

    def subscribe(self, listener: MessageListener) -> None:
        """Register a callback run after every append."""
        self._listeners.append(listener)

    def _clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)


class DispatchState(StrEnum):
    """Whether the session has a request outstanding."""

    IDLE = "idle"
    SENDING = "sending"


@dataclass
class ChatSession:
    """State for one conversation."""

    session_id: str
    store: ConversationStore = field(default_factory=ConversationStore)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_activity: datetime = field(default_factory=lambda: datetime.now(UTC))
    generation: int = 0
    dispatch_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False, compare=False)
    _in_flight: int = field(default=0, init=False, repr=False)

    @property
    def state(self) -> DispatchState:
        """Current dispatch state."""
        return DispatchState.SENDING if self._in_flight > 0 else DispatchState.IDLE

    @property
    def busy(self) -> bool:
        """True while at least one request is outstanding."""
        return self.state is DispatchState.SENDING

    @property
    def messages(self) -> list[Message]:
        """Messages in insertion order."""
        return self.store.all()

    def append(self, message: Message) -> None:
        """Append a message to the conversation."""
        self.store.append(message)
        self.update_activity()

    def begin_dispatch(self) -> int:
        """Mark a request as outstanding.

        Returns:
            The generation the request belongs to
        """
        self._in_flight += 1
        return self.generation

    def end_dispatch(self, generation: int) -> None:
        """Mark a request of the given generation as finished."""
        if generation == self.generation and self._in_flight > 0:
            self._in_flight -= 1

    def reset(self) -> None:
        """Start the conversation over.

        Replies to requests issued before the reset are discarded.
        """
        logger.info(f"Resetting session {self.session_id} ({len(self.store)} messages)")
        self.store._clear()
        self._in_flight = 0
        self.generation += 1
        # Requests from before the reset keep the old lock; new ones must not queue behind them
        self.dispatch_lock = asyncio.Lock()
        self.update_activity()

    def update_activity(self) -> None:
        """Update the last activity timestamp."""
        self.last_activity = datetime.now(UTC)

    def as_dict(self) -> dict[str, Any]:
        """Return a summary of the session as a dictionary."""
        return {
            "session_id": self.session_id,
            "message_count": len(self.store),
            "state": self.state.value,
            "generation": self.generation,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
        }
