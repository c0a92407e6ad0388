"""
Purpose: text-to-speech integration. Read assistant replies out loud.
"""

from __future__ import annotations
import os
import tempfile

from ..config import TTS_MODEL, TTS_VOICE


def tts_bytes(
    text: str,
    audio_client,
    *,
    voice: str = TTS_VOICE,
    model: str = TTS_MODEL,
    max_chars: int = 1200,
) -> bytes:
    """
    Return raw MP3 bytes. Tries streaming path; falls back to non-streaming.
    """
    safe = (text or "").strip()
    if not safe:
        return b""
    if len(safe) > max_chars:
        safe = safe[: max_chars - 1].rstrip() + "…"

    client = getattr(audio_client, "client", audio_client)

    speech = client.audio.speech
    streaming = getattr(speech, "with_streaming_response", None)
    if streaming is not None:
        with tempfile.NamedTemporaryFile(delete=False, suffix=".mp3") as tmp:
            tmp_path = tmp.name
        try:
            with streaming.create(model=model, voice=voice, input=safe) as resp:
                resp.stream_to_file(tmp_path)
            with open(tmp_path, "rb") as f:
                return f.read()
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    resp = speech.create(model=model, voice=voice, input=safe)
    if hasattr(resp, "read"):
        return resp.read()
    return getattr(resp, "content", b"") or b""


class OpenAISpeechSynthesizer:
    """Turns text into MP3 bytes; the UI decides when to play them."""

    def __init__(self, audio_client, *, voice: str = TTS_VOICE, model: str = TTS_MODEL):
        self.audio_client = audio_client
        self.voice = voice
        self.model = model

    def synthesize(self, text: str) -> bytes:
        return tts_bytes(text, self.audio_client, voice=self.voice, model=self.model)
