"""
Purpose: The single orchestration point for the assistant. Owns the
conversation state (session store + current session) and drives one turn:
normalize -> match -> open site | resolve -> render, speak, log, persist.
Prevents the UI from knowing how intents, providers or storage work.

Key responsibilities:
- Record every user input before anything else happens for that turn.
- Dispatch on the matched intent; translate every resolution outcome
  (answered, not found, network error, not understood) into exactly one
  assistant message.
- Persist the whole store after every mutation.
- Chat lifecycle: new chat, load chat, chat list, export.
- Voice: greet, transcribe-then-handle, capture-unsupported.

Testing: Pure unit tests with fakes for providers, renderer, speaker,
URL opener and persistence. Verify ordering and side-effect counts.
"""

from __future__ import annotations
from datetime import datetime
from typing import Callable, Optional

from ._logging import get_component_logger
from .interfaces import (
    Renderer,
    ReplyBook,
    SessionPersistence,
    Speaker,
    Transcriber,
    UrlOpener,
)
from .models import (
    Intent,
    IntentAction,
    Message,
    Resolution,
    ResolutionStatus,
    Sender,
    SessionSummary,
    utcnow,
)
from .persistence.session_store import (
    ConversationState,
    SessionPersistenceError,
    SessionStore,
)
from .prompts import DefaultReplyBook
from .services import intent_matcher
from .services.knowledge import KnowledgeResolver
from .services.normalizer import normalize
from .services.voice import CaptureUnsupportedError, SpeechCaptureError


class _NullRenderer:
    def render(self, message: Message) -> None:
        pass

    def clear(self) -> None:
        pass


class _NullSpeaker:
    def speak(self, text: str) -> None:
        pass


class _NullUrlOpener:
    def open_url(self, url: str) -> None:
        pass


class AssistantController:
    def __init__(
        self,
        resolver: KnowledgeResolver,
        persistence: SessionPersistence,
        *,
        renderer: Optional[Renderer] = None,
        speaker: Optional[Speaker] = None,
        url_opener: Optional[UrlOpener] = None,
        transcriber: Optional[Transcriber] = None,
        replies: Optional[ReplyBook] = None,
        clock: Callable[[], datetime] = utcnow,
        logger=None,
    ):
        self.resolver = resolver
        self.persistence = persistence
        self.renderer: Renderer = renderer or _NullRenderer()
        self.speaker: Speaker = speaker or _NullSpeaker()
        self.url_opener: UrlOpener = url_opener or _NullUrlOpener()
        self.transcriber: Optional[Transcriber] = transcriber
        self.replies: ReplyBook = replies or DefaultReplyBook()
        self.clock = clock
        self.log = get_component_logger("AssistantController", logger)

        store = SessionStore(persistence.load_all(), clock=clock)
        self.state = ConversationState(store)
        self._save()

    # -----------------------------------------------------------------
    # Log & side effects
    # -----------------------------------------------------------------
    def _save(self) -> None:
        """Persist the store. A failed write is logged; the in-memory log stays authoritative."""
        try:
            self.persistence.save_all(self.state.store.snapshot())
        except SessionPersistenceError as e:
            self.log.warning("persist_failed", session_id=self.state.current_id, error=str(e))

    def _record(self, message: Message) -> None:
        self.state.append(message)
        self._save()

    def _say(
        self,
        content: str,
        *,
        spoken: Optional[str] = None,
        source_url: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> Message:
        """Render, speak, append once, persist."""
        message = Message(
            sender=Sender.ASSISTANT,
            content=content,
            timestamp=self.clock(),
            source_url=source_url,
            thumbnail_url=thumbnail_url,
        )
        self.renderer.render(message)
        self.speaker.speak(spoken if spoken is not None else content)
        self._record(message)
        return message

    def _notify(self, content: str) -> Message:
        """Render and speak without touching the session log."""
        message = Message(sender=Sender.ASSISTANT, content=content, timestamp=self.clock())
        self.renderer.render(message)
        self.speaker.speak(content)
        return message

    # -----------------------------------------------------------------
    # Turns
    # -----------------------------------------------------------------
    def handle_text(self, raw: str) -> Message:
        """
        One text turn. The user message is rendered and logged first, then
        the intent decides between opening a site and a knowledge lookup.
        Returns the assistant message that closed the turn.
        """
        user_msg = Message(sender=Sender.USER, content=raw or "", timestamp=self.clock())
        self.renderer.render(user_msg)
        self._record(user_msg)

        intent = intent_matcher.match(normalize(raw))
        if intent is None:
            self.log.info("intent_not_matched", text=raw)
            return self._say(
                self.replies.not_understood(), spoken=self.replies.not_understood_spoken()
            )

        self.log.info("intent_matched", action=intent.action.value, template=intent.template)
        if intent.action == IntentAction.OPEN_SITE:
            return self._open_site(intent)
        if intent.action == IntentAction.LIMITED_LOOKUP:
            resolution = self.resolver.resolve_limited(intent.topic, intent.line_limit)
            return self._answer(resolution, limited=True)
        resolution = self.resolver.resolve_generic(intent.topic)
        return self._answer(resolution, limited=False)

    def _open_site(self, intent: Intent) -> Message:
        site = intent.params["site"]
        self.url_opener.open_url(intent.params["url"])
        return self._say(self.replies.opening(site), spoken=self.replies.opening_spoken(site))

    def _answer(self, resolution: Resolution, *, limited: bool) -> Message:
        if resolution.status == ResolutionStatus.ANSWERED:
            result = resolution.result
            return self._say(
                result.extract,
                source_url=result.source_url,
                thumbnail_url=result.thumbnail_url,
            )
        if resolution.status == ResolutionStatus.NETWORK_ERROR:
            return self._say(
                self.replies.network_error(limited=limited),
                spoken=self.replies.network_error_spoken(limited=limited),
            )
        return self._say(self.replies.not_found(), spoken=self.replies.not_found_spoken())

    def can_listen(self) -> bool:
        return self.transcriber is not None

    def _listen(self, audio: bytes) -> str:
        if self.transcriber is None:
            raise CaptureUnsupportedError("No speech capture backend configured.")
        return self.transcriber.transcribe(audio)

    def handle_voice(self, audio: bytes) -> Optional[Message]:
        """
        Transcribe captured audio and run it as a text turn.
        When capture is unsupported the user is told immediately and nothing
        is logged. A failed capture is spoken back and the turn ends.
        """
        try:
            text = self._listen(audio)
        except CaptureUnsupportedError as e:
            self.log.info("capture_unsupported", error=str(e))
            return self._notify(self.replies.capture_unsupported())
        except SpeechCaptureError as e:
            self.log.warning("capture_failed", error=str(e))
            self.speaker.speak(self.replies.capture_failed())
            return None
        return self.handle_text(text)

    def greet(self) -> None:
        self.speaker.speak(self.replies.greeting())

    # -----------------------------------------------------------------
    # Chat lifecycle
    # -----------------------------------------------------------------
    @property
    def current_session_id(self) -> str:
        return self.state.current_id

    def history(self) -> list[Message]:
        return self.state.store.messages(self.state.current_id)

    def new_chat(self) -> str:
        session = self.state.new_session()
        self.renderer.clear()
        self._save()
        self.log.info("session_created", session_id=session.id)
        return session.id

    def load_chat(self, session_id: str) -> list[Message]:
        """Switch to an existing chat and re-render it. Unknown ids raise KeyError."""
        session = self.state.switch(session_id)
        self.renderer.clear()
        for msg in session.messages:
            self.renderer.render(msg)
        return list(session.messages)

    def chat_list(self) -> list[SessionSummary]:
        return self.state.store.summaries()

    def export_history(self) -> str:
        return self.state.store.export_json()
