"""Shared fixtures for dispatcher tests."""

import json
import threading
import time
from typing import Optional

import pytest

from contentintel.core.store import ConfigStore
from contentintel.features.manager import create_dispatcher


# ---------------------------------------------------------------------------
# Canned engine responses (valid for each category schema)
# ---------------------------------------------------------------------------

NEWS_RESPONSE = json.dumps({
    "verdict": "Mostly True",
    "credibilityScore": 82,
    "summary": "The claim is supported by multiple outlets.",
    "sources": ["Reuters"],
    "motiveAnalysis": {"detectedMotive": "Informational", "confidenceLevel": 70},
})

TOOL_RESPONSE = json.dumps({
    "toolName": "Example App",
    "safetyRating": "A",
    "legitimacy": "Verified Publisher",
    "riskLevel": "Low",
    "details": "Well known publisher.",
})

MEDIA_RESPONSE = json.dumps({
    "mediaName": "Beach photo",
    "mediaType": "image",
    "verdict": "LIKELY_AUTHENTIC",
    "forensicScore": 74,
    "authenticityProbability": 81,
    "aiDetection": {"isAiGenerated": False, "confidence": 88},
})

AUDIO_RESPONSE = json.dumps({
    "audioTitle": "Interview clip",
    "platform": "YouTube",
    "voiceVerdict": "HUMAN",
    "confidence": 77,
    "voiceAudit": {"verdict": "HUMAN", "confidence": 77, "naturalness": 90},
})


# ---------------------------------------------------------------------------
# Mock LLM Client
# ---------------------------------------------------------------------------


class MockLLMClient:
    """Mock LLMClient that returns canned responses without API calls."""

    def __init__(
        self,
        response: str = NEWS_RESPONSE,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.provider = "mock"
        self.model = "mock-model"
        self._response = response
        self._error = error
        self._delay = delay
        self._lock = threading.Lock()
        self.call_count = 0
        self.last_system_prompt: Optional[str] = None
        self.last_user_prompt: Optional[str] = None

    @property
    def model_id(self) -> str:
        return "mock/mock-model"

    def chat(self, system_prompt, user_prompt, temperature=None, max_tokens=None):
        with self._lock:
            self.call_count += 1
            self.last_system_prompt = system_prompt
            self.last_user_prompt = user_prompt
        if self._delay:
            time.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client():
    """MockLLMClient answering with a valid news report."""
    return MockLLMClient()


@pytest.fixture
def store():
    """Memory-only ConfigStore with default state."""
    return ConfigStore()


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def make_dispatcher(store):
    """Build dispatchers over the shared store; all are shut down after the test."""
    created = []

    def _make(client=None, timeout: float = 5.0, **config_overrides):
        config = {
            "dispatcher": {"max_workers": 2, "engine_timeout": timeout},
            "audit": {"max_entries": 200, "excerpt_length": 200},
            "admin": {"username": "admin", "password": "s3cret"},
        }
        config.update(config_overrides)
        dispatcher = create_dispatcher(config, client=client or MockLLMClient(), store=store)
        created.append(dispatcher)
        return dispatcher

    yield _make

    for dispatcher in created:
        dispatcher.shutdown()
