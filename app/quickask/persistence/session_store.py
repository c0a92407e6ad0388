"""
Purpose: Conversation history storage. Every chat is a Session keyed by id;
the whole mapping is the single persisted record.
Why: Reopen earlier chats after a restart, list them, export them.

What is inside:
- SessionStore: id -> Session mapping with create/append/list/export.
- ConversationState: the store plus the current-session pointer.
- JsonFileSessionPersistence: one JSON file shared by every browser session;
  each save merges into the file under a lock, then replaces it.
- InMemorySessionPersistence: same contract, kept in memory (tests, demos).

Testing:
In-memory: simple state tests.
JSON file: tmp_path fixture; reload and compare.
"""

from __future__ import annotations
import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping, Optional

from .._logging import get_component_logger
from ..models import Message, Session, SessionSummary, utcnow

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class SessionPersistenceError(Exception):
    """Raised when the history file cannot be read, parsed or written."""


def serialize_sessions(sessions: Mapping[str, list[Message]]) -> str:
    payload = {sid: [m.to_dict() for m in msgs] for sid, msgs in sessions.items()}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def deserialize_sessions(text: str) -> dict[str, list[Message]]:
    data = json.loads(text) if text.strip() else {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object of sessions, got {type(data).__name__}")
    return {
        str(sid): [Message.from_dict(m) for m in (msgs or [])]
        for sid, msgs in data.items()
    }


class InMemorySessionPersistence:
    def __init__(self) -> None:
        self._payload: str = "{}"
        self.saves: int = 0

    def load_all(self) -> dict[str, list[Message]]:
        return deserialize_sessions(self._payload)

    def save_all(self, sessions: Mapping[str, list[Message]]) -> None:
        self._payload = serialize_sessions(sessions)
        self.saves += 1

    @property
    def payload(self) -> str:
        return self._payload


def merge_sessions(
    stored: Mapping[str, list[Message]], mine: Mapping[str, list[Message]]
) -> dict[str, list[Message]]:
    """
    Union of two snapshots. Logs are append-only, so a session's merged log
    is every distinct message from either side in timestamp order.
    """
    merged: dict[str, list[Message]] = {sid: list(msgs) for sid, msgs in stored.items()}
    for sid, msgs in mine.items():
        combined = merged.setdefault(sid, [])
        for msg in msgs:
            if msg not in combined:
                combined.append(msg)
        combined.sort(key=lambda m: m.timestamp)
    return merged


# Streamlit serves every browser session from one process; writers to the
# same file take turns on the read-merge-write.
_FILE_LOCKS: dict[Path, threading.Lock] = {}
_FILE_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _FILE_LOCKS_GUARD:
        return _FILE_LOCKS.setdefault(path.resolve(), threading.Lock())


class JsonFileSessionPersistence:
    def __init__(self, path: Path | str, *, logger=None) -> None:
        self.path = Path(path)
        self.log = get_component_logger("SessionPersistence", logger)

    def load_all(self) -> dict[str, list[Message]]:
        if not self.path.exists():
            return {}
        try:
            return deserialize_sessions(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise SessionPersistenceError(f"Could not read {self.path}: {exc}") from exc

    def save_all(self, sessions: Mapping[str, list[Message]]) -> None:
        """Merge into what other sessions already wrote, then replace the file."""
        with _lock_for(self.path):
            merged = merge_sessions(self.load_all(), sessions)
            self._write(serialize_sessions(merged))
        self.log.debug("sessions_saved", path=str(self.path), sessions=len(merged))

    def _write(self, text: str) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise SessionPersistenceError(f"Could not write {self.path}: {exc}") from exc


class SessionStore:
    def __init__(
        self,
        sessions: Optional[Mapping[str, list[Message]]] = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sessions: dict[str, Session] = {
            sid: Session(id=sid, messages=list(msgs)) for sid, msgs in (sessions or {}).items()
        }
        self._clock = clock

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def _new_id(self) -> str:
        stamp = int(self._clock().timestamp() * 1000)
        sid = f"chat-{stamp}"
        while sid in self._sessions:
            stamp += 1
            sid = f"chat-{stamp}"
        return sid

    def create(self) -> Session:
        session = Session(id=self._new_id())
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session:
        """Raises KeyError for unknown ids."""
        return self._sessions[session_id]

    def append(self, session_id: str, message: Message) -> None:
        self.get(session_id).messages.append(message)

    def messages(self, session_id: str) -> list[Message]:
        return list(self.get(session_id).messages)

    def summaries(self) -> list[SessionSummary]:
        """Newest first by first-message time; empty sessions go last."""
        ordered = sorted(
            self._sessions.values(),
            key=lambda s: s.started_at or _EPOCH,
            reverse=True,
        )
        return [
            SessionSummary(
                id=s.id,
                title=s.title,
                started_at=s.started_at,
                message_count=len(s.messages),
            )
            for s in ordered
        ]

    def snapshot(self) -> dict[str, list[Message]]:
        return {sid: list(s.messages) for sid, s in self._sessions.items()}

    def export_json(self) -> str:
        return serialize_sessions(self.snapshot())


class ConversationState:
    """The session store and the current-session pointer, always consistent."""

    def __init__(self, store: SessionStore, current_id: Optional[str] = None) -> None:
        self.store = store
        if current_id is None:
            current_id = store.create().id
        elif current_id not in store:
            raise KeyError(current_id)
        self._current_id = current_id

    @property
    def current_id(self) -> str:
        return self._current_id

    @property
    def current(self) -> Session:
        return self.store.get(self._current_id)

    def new_session(self) -> Session:
        session = self.store.create()
        self._current_id = session.id
        return session

    def switch(self, session_id: str) -> Session:
        session = self.store.get(session_id)
        self._current_id = session_id
        return session

    def append(self, message: Message) -> None:
        self.store.append(self._current_id, message)
