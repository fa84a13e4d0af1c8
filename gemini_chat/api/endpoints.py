"""API endpoints for the chat service."""

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException

from gemini_chat import __version__
from gemini_chat.models.conversation import ConversationRequest, ConversationResponse, HealthResponse
from gemini_chat.models.messages import Message
from gemini_chat.models.session import ChatSession
from gemini_chat.services.dispatcher import SubmissionRejectedError, get_chat_dispatcher
from gemini_chat.services.session_manager import session_manager
from gemini_chat.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _transcript(session: ChatSession, reply: Message | None = None) -> ConversationResponse:
    return ConversationResponse(
        session_id=session.session_id,
        reply=reply,
        messages=session.messages,
        busy=session.busy,
    )


def _require_session(session_id: str) -> ChatSession:
    session = session_manager.get_session(session_id)
    if not session:
        logger.warning(f"Unknown session ID: {session_id}")
        raise HTTPException(status_code=404, detail=f"Unknown session ID: {session_id}")
    return session


@router.post("/conversation", response_model=ConversationResponse, tags=["Conversation"])
async def handle_conversation(request: ConversationRequest) -> ConversationResponse:
    """Submit a user message and return the reply with the full transcript.

    Blank messages are accepted and leave the conversation unchanged.
    """
    if request.session_id:
        logger.info(f"Validating existing session: {request.session_id}")
        session = session_manager.get_session(request.session_id)
        if not session:
            logger.warning(f"Invalid session ID provided: {request.session_id}")
            raise HTTPException(status_code=400, detail=f"Invalid session ID: {request.session_id}")
    else:
        session = session_manager.get_or_create_session()

    try:
        reply = await get_chat_dispatcher().submit(session, request.message)
    except SubmissionRejectedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return _transcript(session, reply)


@router.get("/conversation/{session_id}", response_model=ConversationResponse, tags=["Conversation"])
async def get_conversation(session_id: str) -> ConversationResponse:
    """Return the transcript of a session."""
    return _transcript(_require_session(session_id))


@router.post("/conversation/{session_id}/reset", response_model=ConversationResponse, tags=["Conversation"])
async def reset_conversation(session_id: str) -> ConversationResponse:
    """Clear a session's conversation and return it to idle."""
    session = _require_session(session_id)
    session.reset()
    return _transcript(session)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
