"""
Unit tests for the Review Analyzer entry point.
"""

import json
import logging
import re
from unittest.mock import patch

import pytest

from nullfake.analyzer import ReviewAnalyzer, create_analyzer_from_env, create_client_from_env
from nullfake.agents.dispatcher import DispatchConfig
from nullfake.clients.base import ApiClient
from nullfake.clients.openai_http import OpenAIChatClient
from nullfake.errors import ConfigurationError, ServiceUnavailableError
from nullfake.models.result import AnalysisResult
from nullfake.utils.events import EventSink, LoggingEventSink


class EchoClient(ApiClient):
    """Scores every review 50, or raises a fixed error."""

    provider_name = "Echo"

    def __init__(self, error=None):
        self.requests = []
        self.error = error

    @property
    def calls(self):
        return len(self.requests)

    @property
    def model_name(self):
        return "echo"

    def send(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        ids = re.findall(r"^ID:(\S+) ", request.user_prompt, re.MULTILINE)
        return "```json\n" + json.dumps([{"id": i, "score": 50} for i in ids]) + "\n```"


class RecordingSink(EventSink):
    def __init__(self):
        self.events = []

    def emit(self, event, level=None, **fields):
        self.events.append((event, fields))


def raw_review(review_id, **overrides):
    review = {
        "id": review_id,
        "rating": 5,
        "review_title": "Great",
        "review_text": "Love it",
        "meta_data": {"verified_purchase": True, "is_vine_voice": False},
    }
    review.update(overrides)
    return review


def test_analyze_raw_dicts():
    sink = RecordingSink()
    analyzer = ReviewAnalyzer(EchoClient(), events=sink)

    result = analyzer.analyze([raw_review("a"), raw_review("b", review_text=b"caf\xe9\x00")])

    assert isinstance(result, AnalysisResult)
    assert result.to_dict() == {"detailed_scores": {"a": 50, "b": 50}}
    assert sink.events[0] == ("analysis_start", {"reviews": 2})
    assert sink.events[-1] == ("analysis_complete", {"scores": 2, "missing": 0})


def test_missing_count_uses_distinct_ids():
    """Test a duplicated scored id cannot hide an unscored one."""
    sink = RecordingSink()
    response = json.dumps([{"id": "a", "score": 30}])
    client = EchoClient()
    client.send = lambda request: response
    analyzer = ReviewAnalyzer(client, events=sink)

    result = analyzer.analyze([raw_review("a"), raw_review("a"), raw_review("b")])

    assert result.detailed_scores == {"a": 30}
    assert sink.events[-1] == ("analysis_complete", {"scores": 1, "missing": 1})


def test_analyze_empty_list_makes_no_request():
    client = EchoClient()
    analyzer = ReviewAnalyzer(client, events=RecordingSink())

    assert analyzer.analyze([]).detailed_scores == {}
    assert client.calls == 0


def test_analyze_large_batch_is_chunked():
    client = EchoClient()
    analyzer = ReviewAnalyzer(client, config=DispatchConfig(chunk_size=10, parallel_threshold=20))

    result = analyzer.analyze([raw_review(f"r{i}") for i in range(35)])

    assert client.calls == 4
    assert len(result.detailed_scores) == 35


def test_single_batch_failure_is_raised():
    client = EchoClient(error=ServiceUnavailableError("down", 503))
    analyzer = ReviewAnalyzer(
        client,
        config=DispatchConfig(retry_backoff_seconds=0),
        events=RecordingSink()
    )

    with pytest.raises(ServiceUnavailableError):
        analyzer.analyze([raw_review("a")])
    assert client.calls == 2


def test_invalid_raw_review_is_rejected():
    analyzer = ReviewAnalyzer(EchoClient(), events=RecordingSink())

    with pytest.raises(ValueError):
        analyzer.analyze([raw_review("a", rating=9)])


def test_create_client_unknown_provider():
    with pytest.raises(ConfigurationError):
        create_client_from_env("acme")


def test_create_client_missing_key():
    with patch("nullfake.analyzer.settings.OPENAI_API_KEY", ""):
        with pytest.raises(ConfigurationError):
            create_client_from_env("openai")


def test_create_analyzer_from_env():
    with patch("nullfake.analyzer.settings.OPENAI_API_KEY", "sk-test"):
        analyzer = create_analyzer_from_env("openai", mode="sequential")

    assert isinstance(analyzer.client, OpenAIChatClient)
    assert analyzer.dispatcher.config.mode == "sequential"


def test_settings_hold_only_pipeline_values():
    import config.settings as settings

    assert not hasattr(settings, "PROJECT_ROOT")
    assert not hasattr(settings, "Path")
    assert DispatchConfig.from_settings().chunk_size == settings.CHUNK_SIZE


def test_logging_event_sink(caplog):
    sink = LoggingEventSink(logging.getLogger("nullfake.test"))

    with caplog.at_level(logging.INFO, logger="nullfake.test"):
        sink.emit("chunk_complete", chunk=2, scores=25)

    record = caplog.records[-1]
    assert record.getMessage() == "chunk_complete chunk=2 scores=25"
    assert record.event == "chunk_complete"
    assert record.event_fields == {"chunk": 2, "scores": 25}


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
