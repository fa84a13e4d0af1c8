"""Gemini generateContent HTTP client with outcome classification."""

import os
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from gemini_chat.models.gemini import (
    DispatchResult,
    GenerateContentRequest,
    GenerateContentResponse,
    ResponseShapeError,
    ShapeError,
    StatusError,
    Success,
    TransportError,
    error_detail,
)
from gemini_chat.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"


@dataclass
class GeminiConfig:
    """Configuration for the Gemini API client."""

    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None  # None waits for the transport indefinitely

    @property
    def endpoint(self) -> str:
        """Full generateContent URL for the configured model."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    @classmethod
    def from_env(cls) -> "GeminiConfig":
        """Build configuration from GEMINI_* environment variables."""
        timeout = os.getenv("GEMINI_TIMEOUT")
        return cls(
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            base_url=os.getenv("GEMINI_API_URL", DEFAULT_BASE_URL),
            timeout=float(timeout) if timeout else None,
        )


class GeminiClient:
    """Low-level client issuing one generateContent call per user turn."""

    api_key: str | None
    config: GeminiConfig

    def __init__(
        self,
        api_key: str | None = None,
        config: GeminiConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key (defaults to GEMINI_API_KEY env var)
            config: Client configuration
            http_client: Shared AsyncClient; a short-lived one is opened per call when omitted
        """
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            # The remote service reports the missing key as an auth failure
            logger.warning("GEMINI_API_KEY is not set; requests will be rejected by the API")

        self.config = config or GeminiConfig.from_env()
        self._http_client = http_client

    async def generate_content(self, text: str) -> DispatchResult:
        """Send a single-turn prompt and classify the outcome.

        Args:
            text: Prompt text, already trimmed

        Returns:
            Success with the reply text, or the failure variant that occurred
        """
        body = GenerateContentRequest.from_text(text).model_dump(exclude_none=True)
        params = {"key": self.api_key} if self.api_key else {}

        logger.debug(f"Posting {len(text)} chars to {self.config.endpoint}")
        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.config.endpoint, params=params, json=body)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.post(self.config.endpoint, params=params, json=body)
        except httpx.HTTPError as e:
            return TransportError(detail=f"{type(e).__name__}: {e}")

        return self._classify_response(response)

    def _classify_response(self, response: httpx.Response) -> DispatchResult:
        """Turn an HTTP response into a dispatch result."""
        if not response.is_success:
            try:
                detail = error_detail(response.json())
            except ValueError:
                detail = response.text[:200]
            return StatusError(status_code=response.status_code, detail=detail)

        try:
            parsed = GenerateContentResponse.model_validate(response.json())
            text = parsed.first_text()
        except ResponseShapeError as e:
            return ShapeError(detail=str(e))
        except ValidationError as e:
            return ShapeError(detail=f"Unexpected response body: {e.error_count()} validation errors")
        except ValueError as e:
            return ShapeError(detail=f"Response is not JSON: {e}")

        logger.debug(f"Received reply of {len(text)} chars")
        return Success(text=text)


_gemini_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Get or create Gemini client instance."""
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient()
    return _gemini_client
