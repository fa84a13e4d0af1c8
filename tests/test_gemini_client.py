"""Tests for the Gemini HTTP client."""

import json
from unittest.mock import patch

import httpx
import pytest
from fakes import gemini_reply, mock_gemini_client

from gemini_chat.clients.gemini import DEFAULT_BASE_URL, GeminiClient, GeminiConfig
from gemini_chat.models.gemini import ShapeError, StatusError, Success, TransportError


class TestGeminiConfig:
    """Tests for client configuration."""

    def test_endpoint(self):
        """Test the generateContent URL is built from base URL and model."""
        config = GeminiConfig(model="gemini-pro")
        assert config.endpoint == f"{DEFAULT_BASE_URL}/models/gemini-pro:generateContent"

    def test_endpoint_strips_trailing_slash(self):
        """Test a trailing slash on the base URL is tolerated."""
        config = GeminiConfig(model="m", base_url="http://localhost:9000/v1/")
        assert config.endpoint == "http://localhost:9000/v1/models/m:generateContent"

    def test_from_env(self):
        """Test configuration from environment variables."""
        env = {"GEMINI_MODEL": "gemini-1.5-pro", "GEMINI_API_URL": "http://proxy/v1", "GEMINI_TIMEOUT": "12.5"}
        with patch.dict("os.environ", env):
            config = GeminiConfig.from_env()
        assert config.model == "gemini-1.5-pro"
        assert config.base_url == "http://proxy/v1"
        assert config.timeout == 12.5

    def test_no_timeout_by_default(self):
        """Test requests wait indefinitely unless configured."""
        with patch.dict("os.environ", {}, clear=True):
            assert GeminiConfig.from_env().timeout is None


class TestGeminiClientRequest:
    """Tests for the outbound request."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        """Test method, key parameter and single-turn body."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=gemini_reply("Hi there!"))

        client = mock_gemini_client(handler)
        await client.generate_content("Hello")

        assert len(captured) == 1
        request = captured[0]
        assert request.method == "POST"
        assert request.url.path.endswith(":generateContent")
        assert request.url.params["key"] == "test-key"
        assert json.loads(request.content) == {"contents": [{"parts": [{"text": "Hello"}]}]}

    @pytest.mark.asyncio
    async def test_missing_key_is_not_validated(self):
        """Test a missing key still sends the request, without the key parameter."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            body = {"error": {"code": 403, "message": "Method doesn't allow unregistered callers"}}
            return httpx.Response(403, json=body)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch.dict("os.environ", {}, clear=True):
            client = GeminiClient(config=GeminiConfig(), http_client=http_client)

        result = await client.generate_content("Hello")

        assert "key" not in captured[0].url.params
        assert result == StatusError(status_code=403, detail="Method doesn't allow unregistered callers")

    def test_api_key_from_environment(self):
        """Test API key falls back to GEMINI_API_KEY."""
        with patch.dict("os.environ", {"GEMINI_API_KEY": "env-key"}):
            client = GeminiClient(config=GeminiConfig())
        assert client.api_key == "env-key"


class TestGeminiClientClassification:
    """Tests for classifying outcomes into dispatch results."""

    @pytest.mark.asyncio
    async def test_success(self):
        """Test a well-formed reply."""
        client = mock_gemini_client(lambda request: httpx.Response(200, json=gemini_reply("Hi there!")))
        assert await client.generate_content("Hello") == Success(text="Hi there!")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test a connection failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        result = await mock_gemini_client(handler).generate_content("Hello")

        assert isinstance(result, TransportError)
        assert "ConnectError" in result.detail

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self):
        """Test a timeout is reported as a transport failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = await mock_gemini_client(handler).generate_content("Hello")
        assert isinstance(result, TransportError)

    @pytest.mark.asyncio
    async def test_status_error_with_api_message(self):
        """Test a JSON error body supplies the detail."""
        body = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}}
        client = mock_gemini_client(lambda request: httpx.Response(400, json=body))

        result = await client.generate_content("Hello")

        assert result == StatusError(status_code=400, detail="API key not valid. Please pass a valid API key.")

    @pytest.mark.asyncio
    async def test_status_error_with_plain_body(self):
        """Test a non-JSON error body."""
        client = mock_gemini_client(lambda request: httpx.Response(502, text="Bad Gateway"))

        result = await client.generate_content("Hello")

        assert result == StatusError(status_code=502, detail="Bad Gateway")

    @pytest.mark.asyncio
    async def test_missing_candidates_is_shape_error(self):
        """Test a success status without candidates."""
        client = mock_gemini_client(lambda request: httpx.Response(200, json={"usageMetadata": {}}))

        result = await client.generate_content("Hello")

        assert isinstance(result, ShapeError)
        assert "No candidates" in result.detail

    @pytest.mark.asyncio
    async def test_wrong_types_are_shape_error(self):
        """Test a body with the right keys but wrong types."""
        client = mock_gemini_client(lambda request: httpx.Response(200, json={"candidates": "nope"}))
        assert isinstance(await client.generate_content("Hello"), ShapeError)

    @pytest.mark.asyncio
    async def test_non_json_body_is_shape_error(self):
        """Test a success status with an unparseable body."""
        client = mock_gemini_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        result = await client.generate_content("Hello")

        assert isinstance(result, ShapeError)
        assert "not JSON" in result.detail

    @pytest.mark.asyncio
    async def test_empty_reply_text_is_shape_error(self):
        """Test an empty text part is not treated as a reply."""
        client = mock_gemini_client(lambda request: httpx.Response(200, json=gemini_reply("")))
        assert isinstance(await client.generate_content("Hello"), ShapeError)
