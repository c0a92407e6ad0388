"""Shared fakes and fixtures for the assistant tests."""

from datetime import datetime, timedelta, timezone

import pytest

from quickask.models import ProviderResult
from quickask.persistence.session_store import InMemorySessionPersistence
from quickask.services.knowledge import KnowledgeResolver
from quickask.services.providers import ProviderError


class FakeProvider:
    """Returns a canned extract, an empty result, or raises ProviderError."""

    def __init__(self, name, extract=None, *, fail=False, source_url=None, thumbnail_url=None):
        self.name = name
        self.extract = extract
        self.fail = fail
        self.source_url = source_url
        self.thumbnail_url = thumbnail_url
        self.calls = []

    def lookup(self, topic):
        self.calls.append(topic)
        if self.fail:
            raise ProviderError(f"{self.name} unreachable")
        return ProviderResult(
            extract=self.extract,
            source_url=self.source_url if self.extract else None,
            thumbnail_url=self.thumbnail_url if self.extract else None,
            provider=self.name,
        )


class Recorder:
    """Renderer, speaker and URL opener in one; keeps a shared event list."""

    def __init__(self):
        self.events = []

    def render(self, message):
        self.events.append(("render", message.sender.value, message.content))

    def clear(self):
        self.events.append(("clear",))

    def speak(self, text):
        self.events.append(("speak", text))

    def open_url(self, url):
        self.events.append(("open", url))

    def of_kind(self, kind):
        return [e for e in self.events if e[0] == kind]


class TickingClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def persistence():
    return InMemorySessionPersistence()


@pytest.fixture
def ddg():
    return FakeProvider("duckduckgo")


@pytest.fixture
def wiki():
    return FakeProvider("wikipedia")


@pytest.fixture
def resolver(ddg, wiki):
    return KnowledgeResolver(ddg, wiki)
