"""Fixed assistant phrases. Display text and spoken text differ on purpose."""

from __future__ import annotations

NOT_FOUND = "I couldn't find an answer. Try rephrasing."
NOT_FOUND_SPOKEN = "Sorry, I couldn't find anything useful."

NETWORK_ERROR = "Network error while fetching data."
LIMITED_ERROR = "Error while fetching info."
LIMITED_ERROR_SPOKEN = "Error while fetching data."

NOT_UNDERSTOOD = "I'm not sure, but I'll try to improve. Try asking again."
NOT_UNDERSTOOD_SPOKEN = "I'm not sure, try again."

CAPTURE_UNSUPPORTED = "Speech Recognition not supported."
CAPTURE_FAILED = "Sorry, I didn't catch that."

GREETING = "Hi, how can I help you?"


def opening(site: str) -> str:
    return f"Opening {site}..."


def opening_spoken(site: str) -> str:
    return f"Opening {site}"


def network_error(limited: bool) -> str:
    return LIMITED_ERROR if limited else NETWORK_ERROR


def network_error_spoken(limited: bool) -> str:
    return LIMITED_ERROR_SPOKEN if limited else NETWORK_ERROR
