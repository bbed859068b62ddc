"""Shared pytest fixtures for testing."""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Set test environment before importing the package
os.environ["ENVIRONMENT"] = "test"
os.environ["RECOGNIZER_PROVIDER"] = "pattern"
os.environ["LG_PROVIDER"] = "template"

from promptbot_core.config import Settings
from promptbot_core.prompts import PatternAgeRecognizer
from promptbot_core.state import ConversationState, MemoryStorage
from promptbot_core.testing import TestAdapter


# =============================================================================
# State Fixtures
# =============================================================================


@pytest.fixture
def storage() -> MemoryStorage:
    """Create an empty in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def conversation_state(storage: MemoryStorage) -> ConversationState:
    """Create conversation state backed by the test storage."""
    return ConversationState(storage)


@pytest.fixture
def adapter(conversation_state: ConversationState) -> TestAdapter:
    """Create a test adapter with conversation state middleware."""
    return TestAdapter().use(conversation_state)


@pytest.fixture
def recognizer() -> PatternAgeRecognizer:
    """Create the rule-based age recognizer."""
    return PatternAgeRecognizer()


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(environment="test", debug=True, log_level="WARNING")


@pytest_asyncio.fixture
async def app(settings: Settings) -> FastAPI:
    """Create test FastAPI application."""
    from promptbot_core.api import create_app

    return create_app(settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def message():
    """Factory for inbound message activity payloads."""

    def make_message(text: str, conversation_id: str = "conv-1", channel_id: str = "webchat") -> dict:
        return {
            "type": "message",
            "channel_id": channel_id,
            "from": {"id": "user-1", "name": "User"},
            "recipient": {"id": "bot", "name": "Bot"},
            "conversation": {"id": conversation_id},
            "text": text,
        }

    return make_message
