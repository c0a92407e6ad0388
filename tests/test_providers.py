"""Unit tests for the HTTP provider clients (no network)."""

from unittest.mock import MagicMock

import pytest
import requests

from quickask.services.providers import DuckDuckGoProvider, ProviderError, WikipediaProvider


def _response(status=200, payload=None, *, bad_json=False):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.text = "<html>oops</html>" if bad_json else ""
    if bad_json:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


def _session(resp=None, *, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = resp
    return session


class TestDuckDuckGoProvider:
    def test_prefers_abstract_then_answer_then_definition(self):
        session = _session(
            _response(payload={"Abstract": "", "Answer": "42", "Definition": "A number."})
        )
        result = DuckDuckGoProvider(session=session).lookup("answer to everything")

        assert result.extract == "42"
        assert result.source_url is None
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"q": "answer to everything", "format": "json", "no_redirect": 1}

    def test_abstract_with_source(self):
        session = _session(
            _response(
                payload={"Abstract": "Python is a language.", "AbstractURL": "https://ddg/x"}
            )
        )
        result = DuckDuckGoProvider(session=session).lookup("python")

        assert result.extract == "Python is a language."
        assert result.source_url == "https://ddg/x"
        assert result.provider == "duckduckgo"

    def test_non_text_answer_is_ignored(self):
        session = _session(_response(payload={"Answer": {"from": "calculator"}}))
        assert not DuckDuckGoProvider(session=session).lookup("1+1").is_usable

    def test_connection_error_raises(self):
        session = _session(error=requests.ConnectionError("down"))
        with pytest.raises(ProviderError):
            DuckDuckGoProvider(session=session).lookup("x")

    def test_non_json_raises(self):
        session = _session(_response(bad_json=True))
        with pytest.raises(ProviderError):
            DuckDuckGoProvider(session=session).lookup("x")


class TestWikipediaProvider:
    def test_maps_summary_fields(self):
        payload = {
            "extract": "Ada Lovelace was a mathematician.",
            "thumbnail": {"source": "https://upload.wikimedia.org/ada.jpg"},
            "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/Ada_Lovelace"}},
        }
        session = _session(_response(payload=payload))
        result = WikipediaProvider(session=session).lookup("ada lovelace")

        assert result.extract == "Ada Lovelace was a mathematician."
        assert result.thumbnail_url == "https://upload.wikimedia.org/ada.jpg"
        assert result.source_url == "https://en.wikipedia.org/wiki/Ada_Lovelace"

    def test_topic_is_path_encoded(self):
        session = _session(_response(payload={}))
        WikipediaProvider(base_url="https://wiki.test/summary/", session=session).lookup("c/c++ lang")

        url = session.get.call_args[0][0]
        assert url == "https://wiki.test/summary/c%2Fc%2B%2B%20lang"

    def test_missing_extract_is_empty(self):
        session = _session(_response(payload={"title": "Nothing"}))
        assert not WikipediaProvider(session=session).lookup("nothing").is_usable

    def test_404_is_empty(self):
        session = _session(_response(status=404, payload={"title": "Not found."}))
        assert not WikipediaProvider(session=session).lookup("zzzz").is_usable

    def test_server_error_raises(self):
        session = _session(_response(status=503, payload={}))
        with pytest.raises(ProviderError):
            WikipediaProvider(session=session).lookup("x")

    def test_timeout_raises(self):
        session = _session(error=requests.Timeout("slow"))
        with pytest.raises(ProviderError):
            WikipediaProvider(session=session).lookup("x")
