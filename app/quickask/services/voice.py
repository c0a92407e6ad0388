"""
Purpose: speech-to-text integration. Allow voice-based inputs.
"""

from __future__ import annotations
import io
import base64
import uuid

from openai import OpenAIError

from ..config import STT_MODEL


class CaptureUnsupportedError(Exception):
    """No speech capture backend is available in this environment."""


class SpeechCaptureError(Exception):
    """Capture ran but produced no usable transcript."""


def transcribe_wav_bytes(wav_bytes: bytes, audio_client, *, model: str = STT_MODEL) -> str:
    """
    Transcribe WAV audio bytes to text using the given OpenAI client."""
    client = getattr(audio_client, "client", audio_client)
    with io.BytesIO(wav_bytes) as buf:
        buf.name = "input.wav"
        resp = client.audio.transcriptions.create(model=model, file=buf)
    return (resp.text or "").strip()


class OpenAITranscriber:
    def __init__(self, audio_client, *, model: str = STT_MODEL):
        self.audio_client = audio_client
        self.model = model

    def transcribe(self, audio: bytes) -> str:
        if self.audio_client is None:
            raise CaptureUnsupportedError("No OpenAI client for speech capture.")
        if not audio:
            raise SpeechCaptureError("No audio captured.")
        try:
            text = transcribe_wav_bytes(audio, self.audio_client, model=self.model)
        except OpenAIError as e:
            raise SpeechCaptureError(f"Transcription failed: {e}") from e
        if not text:
            raise SpeechCaptureError("Empty transcript.")
        return text


def autoplay_html(mp3_bytes: bytes) -> str:
    """Return an HTML snippet that auto-plays MP3 bytes (hidden)."""
    if not mp3_bytes:
        return ""
    b64 = base64.b64encode(mp3_bytes).decode("ascii")
    el_id = f"tts_{uuid.uuid4().hex}"
    return f"""
    <audio id="{el_id}" autoplay playsinline preload="auto" style="display:none">
      <source src="data:audio/mpeg;base64,{b64}" type="audio/mpeg">
    </audio>
    <script>
      (function() {{
        const a = document.getElementById("{el_id}");
        if (a) {{
          a.play().catch(() => {{}});
        }}
      }})();
    </script>
    """
