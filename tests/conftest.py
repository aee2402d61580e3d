"""Shared test fixtures and configuration."""
import pytest
import os
from collections import defaultdict
from typing import Any, List, Optional, Tuple
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("VAPI_API_KEY", "test-key")
os.environ.setdefault("APP_ENV", "development")

from app.main import app
from app.core.config import Settings
from app.core.dependencies import get_vapi_client
from app.services.call_session.capability import VoiceSessionCapability
from app.services.call_session.manager import VoiceSessionManager
from app.services.vapi.client import VapiClient


# Fixed clock for transcript timestamps (seconds since the epoch)
TEST_NOW = 1_700_000_000.0


class ScriptedVoiceSession(VoiceSessionCapability):
    """Voice session double that replays scripted events."""

    def __init__(self, access_token: str = "test-token"):
        self.access_token = access_token
        self.handlers = defaultdict(list)
        self.started_with: List[str] = []
        self.stop_calls = 0
        self.start_error: Optional[Exception] = None
        self.stop_error: Optional[Exception] = None
        # Events emitted once start() is accepted
        self.script: List[Tuple[str, Any]] = []

    async def start(self, target: str) -> None:
        self.started_with.append(target)
        if self.start_error:
            raise self.start_error
        self.replay(self.script)

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.stop_error:
            raise self.stop_error

    def on(self, event: str, handler) -> None:
        self.handlers[event].append(handler)

    def emit(self, event: str, payload: Any = None) -> None:
        for handler in self.handlers[event]:
            handler(payload)

    def replay(self, events: List[Tuple[str, Any]]) -> None:
        for event, payload in events:
            self.emit(event, payload)


@pytest.fixture
def make_transcript():
    """Build Vapi transcript message event payloads."""

    def _make(role: str, text: str) -> dict:
        return {"type": "transcript", "role": role, "transcript": text}

    return _make


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        _env_file=None,
        vapi_api_key="test-key",
        vapi_base_url="https://vapi.test",
        app_env="development",
        default_country_code="1",
        session_reset_delay_seconds=0.05,
    )


@pytest.fixture
def mock_vapi_client():
    """Mock Vapi API client."""
    client = AsyncMock(spec=VapiClient)
    client.create_call.return_value = {"id": "call_123", "status": "queued"}
    client.create_campaign.return_value = {"id": "campaign_123", "status": "scheduled"}
    return client


@pytest.fixture
def patch_settings(test_settings, monkeypatch):
    """Point every module that reads settings at the test settings."""

    def _patch(settings: Settings) -> Settings:
        monkeypatch.setattr("app.core.config.settings", settings)
        monkeypatch.setattr("app.core.dependencies.settings", settings)
        monkeypatch.setattr("app.api.health.settings", settings)
        monkeypatch.setattr("app.main.settings", settings)
        return settings

    _patch(test_settings)
    return _patch


@pytest.fixture
def test_client(mock_vapi_client, patch_settings):
    """Create FastAPI test client with overrides."""
    # Override dependencies
    app.dependency_overrides[get_vapi_client] = lambda: mock_vapi_client

    client = TestClient(app, raise_server_exceptions=False)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(test_settings, patch_settings):
    """Create FastAPI test client with no Vapi API key configured."""
    patch_settings(test_settings.model_copy(update={"vapi_api_key": None}))
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def voice_session():
    """Scripted voice session capability."""
    return ScriptedVoiceSession()


@pytest.fixture
def session_manager(voice_session, test_settings):
    """Create VoiceSessionManager wired to the scripted capability."""
    return VoiceSessionManager(
        access_token="test-token",
        assistant_id="asst_123",
        capability_factory=lambda token: voice_session,
        reset_delay=test_settings.session_reset_delay_seconds,
        clock=lambda: TEST_NOW,
    )


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )
