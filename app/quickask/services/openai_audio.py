"""
Purpose: Thin client wrapper around the OpenAI SDK for the audio endpoints.
One place for auth and client construction; speech.py and voice.py take it
(or any object exposing `.client`) so tests can pass fakes.

Testing: Construct with a key and a fake client factory; no network.
"""

from __future__ import annotations
from typing import Callable, Optional

from openai import OpenAI


class OpenAIAudioClient:
    def __init__(self, api_key: str, *, factory: Optional[Callable[..., OpenAI]] = None):
        self.api_key = (api_key or "").strip()
        if not self.api_key:
            raise RuntimeError("Missing OPENAI_API_KEY")
        try:
            self.client = (factory or OpenAI)(api_key=self.api_key)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize OpenAI client: {e}") from e

    def verify(self) -> None:
        """Cheap authenticated call; raises the SDK error on a bad key."""
        self.client.models.list()
