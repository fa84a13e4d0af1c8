"""Wire models for the generateContent API and dispatch results."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


class ResponseShapeError(ValueError):
    """Raised when a generateContent response has no usable reply text."""


class Part(BaseModel):
    """A fragment of a candidate's content."""

    text: str | None = None


class Content(BaseModel):
    """Content entry holding one or more parts."""

    parts: list[Part] = Field(default_factory=list)
    role: str | None = None


class GenerateContentRequest(BaseModel):
    """Request body for generateContent."""

    contents: list[Content]

    @classmethod
    def from_text(cls, text: str) -> "GenerateContentRequest":
        """Build a single-turn request; no earlier turns are sent."""
        return cls(contents=[Content(parts=[Part(text=text)])])


class Candidate(BaseModel):
    """One alternative reply."""

    content: Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class PromptFeedback(BaseModel):
    """Feedback about the prompt, present when it was blocked."""

    block_reason: str | None = Field(default=None, alias="blockReason")


class GenerateContentResponse(BaseModel):
    """Response body for generateContent."""

    candidates: list[Candidate] = Field(default_factory=list)
    prompt_feedback: PromptFeedback | None = Field(default=None, alias="promptFeedback")

    def first_text(self) -> str:
        """Return the first candidate's first part text.

        Raises:
            ResponseShapeError: If any link in that chain is missing or empty
        """
        if not self.candidates:
            reason = self.prompt_feedback.block_reason if self.prompt_feedback else None
            if reason:
                raise ResponseShapeError(f"No candidates returned (prompt blocked: {reason})")
            raise ResponseShapeError("No candidates returned")

        candidate = self.candidates[0]
        if candidate.content is None or not candidate.content.parts:
            raise ResponseShapeError(f"First candidate has no content parts (finish reason: {candidate.finish_reason})")

        text = candidate.content.parts[0].text
        if not text:
            raise ResponseShapeError("First content part has no text")
        return text


@dataclass(frozen=True)
class Success:
    """The remote service produced a reply."""

    text: str


@dataclass(frozen=True)
class TransportError:
    """The request never produced an HTTP response."""

    detail: str


@dataclass(frozen=True)
class StatusError:
    """The remote service answered with a non-success status."""

    status_code: int
    detail: str = ""


@dataclass(frozen=True)
class ShapeError:
    """The response body could not be read as a reply."""

    detail: str


DispatchResult = Success | TransportError | StatusError | ShapeError


def error_detail(payload: Any) -> str:
    """Pull the human-readable message out of an API error body."""
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return ""
