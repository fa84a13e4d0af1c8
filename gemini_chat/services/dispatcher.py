"""Request dispatcher: one user submission, one API call, one reply."""

import json
import os
from enum import StrEnum

from gemini_chat.clients.gemini import GeminiClient, get_gemini_client
from gemini_chat.models.gemini import DispatchResult, ShapeError, StatusError, Success, TransportError
from gemini_chat.models.messages import Message
from gemini_chat.models.session import ChatSession
from gemini_chat.utils.logging import get_logger

logger = get_logger(__name__)

APOLOGY_MESSAGE = "Sorry, I couldn't process your request. Please try again."
AUTH_FAILURE_MESSAGE = "Sorry, the chat service rejected the API key. Please check the configuration."
RATE_LIMITED_MESSAGE = "Sorry, the chat service is busy right now. Please try again in a moment."


class SubmitPolicy(StrEnum):
    """How a submission is handled while another one is outstanding."""

    CONCURRENT = "concurrent"
    QUEUE = "queue"
    REJECT = "reject"

    @classmethod
    def from_env(cls) -> "SubmitPolicy":
        """Read CHAT_SUBMIT_POLICY, defaulting to queue."""
        return cls(os.getenv("CHAT_SUBMIT_POLICY", cls.QUEUE.value).lower())


class SubmissionRejectedError(Exception):
    """Raised under the reject policy when a request is already outstanding."""


def reply_text_for(result: DispatchResult) -> str:
    """Choose the text shown to the user for a dispatch result."""
    match result:
        case Success(text=text):
            return text
        case StatusError(status_code=401 | 403):
            return AUTH_FAILURE_MESSAGE
        case StatusError(status_code=429):
            return RATE_LIMITED_MESSAGE
        case _:
            return APOLOGY_MESSAGE


class ChatDispatcher:
    """Sends user submissions to Gemini and appends the outcome to a session."""

    def __init__(self, client: GeminiClient | None = None, policy: SubmitPolicy | None = None):
        """Initialize dispatcher.

        Args:
            client: Gemini client (defaults to global instance)
            policy: Overlap policy (defaults to CHAT_SUBMIT_POLICY)
        """
        self.client = client or get_gemini_client()
        self.policy = policy or SubmitPolicy.from_env()

        logger.info(f"ChatDispatcher initialized with {self.policy.value} submit policy")

    async def submit(self, session: ChatSession, raw_text: str) -> Message | None:
        """Submit user text and append the user message and exactly one reply.

        Args:
            session: Conversation to append to
            raw_text: Text as typed; surrounding whitespace is ignored

        Returns:
            The appended reply, or None when the input is blank or the session
            was reset before the reply arrived

        Raises:
            SubmissionRejectedError: Under the reject policy while a request is outstanding
        """
        text = raw_text.strip()
        if not text:
            return None

        if self.policy is SubmitPolicy.REJECT and session.busy:
            logger.info(f"Rejecting submission for busy session {session.session_id}")
            raise SubmissionRejectedError("A request is already in progress for this session")

        session.append(Message.user(text))
        generation = session.begin_dispatch()
        logger.info(f"Dispatching message for session {session.session_id} {json.dumps(session.as_dict())}")

        try:
            try:
                result = await self._send(session, text)
                self._log_result(session, result)
                reply_text = reply_text_for(result)
            except Exception as e:
                logger.error(f"Dispatch failed for session {session.session_id}: {e}", exc_info=True)
                reply_text = APOLOGY_MESSAGE

            if generation != session.generation:
                logger.info(f"Session {session.session_id} was reset; discarding reply")
                return None

            reply = Message.bot(reply_text)
            session.append(reply)
            return reply
        finally:
            session.end_dispatch(generation)

    async def _send(self, session: ChatSession, text: str) -> DispatchResult:
        if self.policy is SubmitPolicy.QUEUE:
            async with session.dispatch_lock:
                return await self.client.generate_content(text)
        return await self.client.generate_content(text)

    def _log_result(self, session: ChatSession, result: DispatchResult) -> None:
        match result:
            case Success(text=text):
                logger.info(f"Reply for session {session.session_id}: {text[:50]}...")
            case TransportError(detail=detail):
                logger.warning(f"Transport error for session {session.session_id}: {detail}")
            case StatusError(status_code=code, detail=detail):
                logger.warning(f"API returned {code} for session {session.session_id}: {detail}")
            case ShapeError(detail=detail):
                logger.warning(f"Malformed reply for session {session.session_id}: {detail}")


_chat_dispatcher: ChatDispatcher | None = None


def get_chat_dispatcher() -> ChatDispatcher:
    """Get or create chat dispatcher instance."""
    global _chat_dispatcher
    if _chat_dispatcher is None:
        _chat_dispatcher = ChatDispatcher()
    return _chat_dispatcher
