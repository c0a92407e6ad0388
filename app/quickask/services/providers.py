"""
Purpose: Thin HTTP clients for the two knowledge providers.
One place for URLs, headers, response-field mapping and error normalization.

- DuckDuckGoProvider: Instant Answer API (Abstract / Answer / Definition).
- WikipediaProvider: REST page summary (extract, thumbnail, canonical page).

Contract: lookup(topic) returns a ProviderResult (empty extract when the
provider has nothing) or raises ProviderError on network/parse failures.
No retries and no caching.

Testing: Patch the shared session's get(); assert field mapping and errors.
"""

from __future__ import annotations
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..config import (
    DUCKDUCKGO_API_URL,
    HTTP_TIMEOUT_SECONDS,
    USER_AGENT,
    WIKIPEDIA_SUMMARY_URL,
)
from ..models import ProviderResult


class ProviderError(Exception):
    """Raised when a provider cannot be reached or returns an unreadable body."""


_SESSION: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = requests.Session()
        _SESSION.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    return _SESSION


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _get_json(
    session: requests.Session,
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    timeout: float,
    provider: str,
    empty_statuses: tuple[int, ...] = (),
) -> Optional[dict[str, Any]]:
    """GET and decode a JSON object. Returns None for statuses meaning 'nothing here'."""
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise ProviderError(f"{provider}: HTTP error: {exc}") from exc

    if resp.status_code in empty_statuses:
        return None
    if not resp.ok:
        raise ProviderError(f"{provider}: unexpected status {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as exc:
        preview = (resp.text or "")[:200]
        raise ProviderError(f"{provider}: non-JSON response. Preview: {preview}") from exc

    if not isinstance(data, dict):
        raise ProviderError(f"{provider}: unexpected response type {type(data).__name__}")
    return data


class DuckDuckGoProvider:
    name = "duckduckgo"

    def __init__(
        self,
        *,
        base_url: str = DUCKDUCKGO_API_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._session = session

    def lookup(self, topic: str) -> ProviderResult:
        data = _get_json(
            self._session or _get_session(),
            self.base_url,
            params={"q": topic, "format": "json", "no_redirect": 1},
            timeout=self.timeout,
            provider=self.name,
        )
        data = data or {}
        answer = (
            _text(data.get("Abstract"))
            or _text(data.get("Answer"))
            or _text(data.get("Definition"))
        )
        if not answer:
            return ProviderResult(provider=self.name)
        return ProviderResult(
            extract=answer,
            source_url=_text(data.get("AbstractURL")) or None,
            provider=self.name,
        )


class WikipediaProvider:
    name = "wikipedia"

    def __init__(
        self,
        *,
        base_url: str = WIKIPEDIA_SUMMARY_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._session = session

    def summary_url(self, topic: str) -> str:
        return f"{self.base_url.rstrip('/')}/{quote(topic, safe='')}"

    def lookup(self, topic: str) -> ProviderResult:
        data = _get_json(
            self._session or _get_session(),
            self.summary_url(topic),
            timeout=self.timeout,
            provider=self.name,
            empty_statuses=(404,),
        )
        extract = _text((data or {}).get("extract"))
        if not extract:
            return ProviderResult(provider=self.name)

        thumbnail = data.get("thumbnail") or {}
        desktop = (data.get("content_urls") or {}).get("desktop") or {}
        return ProviderResult(
            extract=extract,
            source_url=_text(desktop.get("page")) or None,
            thumbnail_url=_text(thumbnail.get("source")) or None,
            provider=self.name,
        )
