"""
Canonical data shapes, shared truth for typing/validation between layers.

Typical contents:
- Message (sender, content, timestamp) and Session (id, messages).
- IntentTemplate / Intent produced by the intent matcher.
- ProviderResult / Resolution produced by the knowledge resolver.

Testing: Mostly types. Serialization helpers are covered by store tests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import re
from typing import Any, Mapping, Optional

NEW_CHAT_TITLE = "New Chat"
TITLE_CHARS = 20


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_time(value: Any) -> datetime:
    """Accept ISO strings (including a trailing 'Z') or datetimes."""
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value or "").strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class IntentAction(str, Enum):
    OPEN_SITE = "open_site"
    LIMITED_LOOKUP = "limited_lookup"
    GENERIC_LOOKUP = "generic_lookup"


class ResolutionStatus(str, Enum):
    ANSWERED = "answered"
    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class Message:
    sender: Sender
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    source_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "sender": self.sender.value,
            "content": self.content,
            "time": self.timestamp.isoformat(),
        }
        if self.source_url:
            data["sourceUrl"] = self.source_url
        if self.thumbnail_url:
            data["thumbnailUrl"] = self.thumbnail_url
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        return cls(
            sender=Sender(data.get("sender", Sender.USER.value)),
            content=str(data.get("content") or ""),
            timestamp=parse_time(data.get("time")),
            source_url=data.get("sourceUrl") or None,
            thumbnail_url=data.get("thumbnailUrl") or None,
        )


@dataclass
class Session:
    id: str
    messages: list[Message] = field(default_factory=list)

    @property
    def started_at(self) -> Optional[datetime]:
        return self.messages[0].timestamp if self.messages else None

    @property
    def title(self) -> str:
        if not self.messages or not self.messages[0].content:
            return NEW_CHAT_TITLE
        return self.messages[0].content[:TITLE_CHARS]


@dataclass(frozen=True)
class SessionSummary:
    id: str
    title: str
    started_at: Optional[datetime]
    message_count: int


@dataclass(frozen=True)
class IntentTemplate:
    name: str
    pattern: re.Pattern
    arity: int
    action: IntentAction


@dataclass(frozen=True)
class Intent:
    action: IntentAction
    template: str
    params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def topic(self) -> Optional[str]:
        return self.params.get("topic")

    @property
    def line_limit(self) -> Optional[int]:
        return self.params.get("line_limit")


@dataclass(frozen=True)
class ProviderResult:
    extract: Optional[str] = None
    source_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    provider: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return bool((self.extract or "").strip())


@dataclass(frozen=True)
class Resolution:
    status: ResolutionStatus
    result: Optional[ProviderResult] = None

    @property
    def answered(self) -> bool:
        return self.status == ResolutionStatus.ANSWERED
