"""Tests for AnalysisDispatch."""

import time

import pytest

from conftest import MockLLMClient

from contentintel.core.models import ContentCategory, EngineError, RawEngineOutput
from contentintel.features.dispatch import AnalysisDispatch
from contentintel.features.implementations import ALL_ENGINE_CLASSES, NewsVerificationEngine
from contentintel.utils.errors import EngineTimeoutError


@pytest.fixture
def make_dispatch():
    created = []

    def _make(client, timeout=5.0, engines=None):
        if engines is None:
            engines = [cls(client=client) for cls in ALL_ENGINE_CLASSES]
        dispatch = AnalysisDispatch(engines, max_workers=2, timeout=timeout)
        created.append(dispatch)
        return dispatch

    yield _make

    for dispatch in created:
        dispatch.shutdown()


class TestDispatch:
    def test_routes_to_category_engine(self, make_dispatch, mock_client):
        outcome = make_dispatch(mock_client).dispatch(ContentCategory.NEWS, "claim")
        assert isinstance(outcome, RawEngineOutput)
        assert outcome.engine_name == "news_verification"

    def test_hint_is_forwarded(self, make_dispatch, mock_client):
        make_dispatch(mock_client).dispatch(ContentCategory.AUDIO, "https://youtu.be/x", "YouTube")
        assert "YouTube" in mock_client.last_user_prompt

    def test_missing_engine(self, make_dispatch, mock_client):
        dispatch = make_dispatch(mock_client, engines=[NewsVerificationEngine(client=mock_client)])
        outcome = dispatch.dispatch(ContentCategory.TOOL, "https://example.com")
        assert isinstance(outcome, EngineError)
        assert "no engine" in outcome.reason
        assert mock_client.call_count == 0

    def test_transport_error_becomes_value(self, make_dispatch):
        client = MockLLMClient(error=ConnectionError("refused"))
        outcome = make_dispatch(client).dispatch(ContentCategory.NEWS, "claim")
        assert isinstance(outcome, EngineError)
        assert outcome.reason.startswith("engine failure")
        assert outcome.engine_name == "news_verification"

    def test_timeout_is_bounded(self, make_dispatch):
        client = MockLLMClient(delay=1.0)
        dispatch = make_dispatch(client, timeout=0.1)

        start = time.time()
        outcome = dispatch.dispatch(ContentCategory.NEWS, "claim")
        elapsed = time.time() - start

        assert isinstance(outcome, EngineError)
        assert outcome.reason == "timeout after 0.1s"
        assert isinstance(outcome.error, EngineTimeoutError)
        assert elapsed < 0.9

    def test_no_retry(self, make_dispatch):
        client = MockLLMClient(error=ConnectionError("refused"))
        make_dispatch(client).dispatch(ContentCategory.NEWS, "claim")
        assert client.call_count == 1

    def test_later_engine_replaces_earlier(self, make_dispatch):
        first, second = MockLLMClient(), MockLLMClient()
        dispatch = make_dispatch(
            first,
            engines=[NewsVerificationEngine(client=first), NewsVerificationEngine(client=second)],
        )
        dispatch.dispatch(ContentCategory.NEWS, "claim")
        assert (first.call_count, second.call_count) == (0, 1)
