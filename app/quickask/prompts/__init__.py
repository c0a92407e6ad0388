"""Facade exposing the assistant's fixed phrases as a ReplyBook."""

from __future__ import annotations

from . import replies as _replies


class DefaultReplyBook:
    # OPEN SITE
    def opening(self, site: str) -> str:
        return _replies.opening(site)

    def opening_spoken(self, site: str) -> str:
        return _replies.opening_spoken(site)

    # LOOKUP OUTCOMES
    def not_found(self) -> str:
        return _replies.NOT_FOUND

    def not_found_spoken(self) -> str:
        return _replies.NOT_FOUND_SPOKEN

    def network_error(self, *, limited: bool = False) -> str:
        return _replies.network_error(limited)

    def network_error_spoken(self, *, limited: bool = False) -> str:
        return _replies.network_error_spoken(limited)

    def not_understood(self) -> str:
        return _replies.NOT_UNDERSTOOD

    def not_understood_spoken(self) -> str:
        return _replies.NOT_UNDERSTOOD_SPOKEN

    # VOICE
    def capture_unsupported(self) -> str:
        return _replies.CAPTURE_UNSUPPORTED

    def capture_failed(self) -> str:
        return _replies.CAPTURE_FAILED

    def greeting(self) -> str:
        return _replies.GREETING
