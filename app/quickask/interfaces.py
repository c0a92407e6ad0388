"""
Abstractions for pluggable collaborators. Inversion of control: the
controller depends on interfaces, not on Streamlit, the browser, OpenAI or
the network. Enables fakes/mocks and future swaps.

Common protocols:
- KnowledgeProvider.lookup(topic) -> ProviderResult (raises ProviderError)
- SessionPersistence.load_all() / save_all(sessions)
- Renderer.render(message) / clear()
- Speaker.speak(text)
- UrlOpener.open_url(url)
- Transcriber.transcribe(audio) -> str (raises CaptureUnsupportedError or
  SpeechCaptureError)
- ReplyBook: fixed assistant phrases

Testing: Use simple fake implementations to test the controller without
network calls.
"""

from __future__ import annotations
from typing import Mapping, Protocol

from .models import Message, ProviderResult


class KnowledgeProvider(Protocol):
    name: str

    def lookup(self, topic: str) -> ProviderResult: ...


class SessionPersistence(Protocol):
    def load_all(self) -> dict[str, list[Message]]: ...

    def save_all(self, sessions: Mapping[str, list[Message]]) -> None: ...


class Renderer(Protocol):
    def render(self, message: Message) -> None: ...

    def clear(self) -> None: ...


class Speaker(Protocol):
    def speak(self, text: str) -> None: ...


class UrlOpener(Protocol):
    def open_url(self, url: str) -> None: ...


class Transcriber(Protocol):
    def transcribe(self, audio: bytes) -> str: ...


class ReplyBook(Protocol):
    def opening(self, site: str) -> str: ...

    def opening_spoken(self, site: str) -> str: ...

    def not_found(self) -> str: ...

    def not_found_spoken(self) -> str: ...

    def network_error(self, *, limited: bool = False) -> str: ...

    def network_error_spoken(self, *, limited: bool = False) -> str: ...

    def not_understood(self) -> str: ...

    def not_understood_spoken(self) -> str: ...

    def capture_unsupported(self) -> str: ...

    def capture_failed(self) -> str: ...

    def greeting(self) -> str: ...
