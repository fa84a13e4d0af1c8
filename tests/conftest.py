"""Shared fixtures for the test suite."""

import pytest

from gemini_chat.models.session import ChatSession


@pytest.fixture
def session():
    """A fresh chat session."""
    return ChatSession(session_id="test-session")
