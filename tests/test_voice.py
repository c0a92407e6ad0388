"""Unit tests for speech capture and synthesis adapters (fake OpenAI clients)."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from quickask.services.openai_audio import OpenAIAudioClient
from quickask.services.speech import OpenAISpeechSynthesizer, tts_bytes
from quickask.services.voice import (
    CaptureUnsupportedError,
    OpenAITranscriber,
    SpeechCaptureError,
    autoplay_html,
)


def _stt_client(text):
    client = MagicMock()
    client.audio.transcriptions.create.return_value = SimpleNamespace(text=text)
    return SimpleNamespace(client=client)


class TestTranscriber:
    def test_returns_stripped_text(self):
        audio = _stt_client("  open youtube \n")
        assert OpenAITranscriber(audio).transcribe(b"RIFF") == "open youtube"

        _, kwargs = audio.client.audio.transcriptions.create.call_args
        assert kwargs["model"] == "whisper-1"
        assert kwargs["file"].name == "input.wav"

    def test_empty_transcript_is_capture_error(self):
        with pytest.raises(SpeechCaptureError):
            OpenAITranscriber(_stt_client("")).transcribe(b"RIFF")

    def test_no_audio_is_capture_error(self):
        audio = _stt_client("ignored")
        with pytest.raises(SpeechCaptureError):
            OpenAITranscriber(audio).transcribe(b"")
        audio.client.audio.transcriptions.create.assert_not_called()

    def test_missing_client_is_capture_unsupported(self):
        with pytest.raises(CaptureUnsupportedError):
            OpenAITranscriber(None).transcribe(b"RIFF")


class TestSpeech:
    def test_blank_text_is_silent(self):
        client = MagicMock()
        assert tts_bytes("   ", client) == b""
        client.audio.speech.create.assert_not_called()

    def test_non_streaming_fallback(self):
        speech = SimpleNamespace(
            create=MagicMock(return_value=SimpleNamespace(content=b"ID3mp3"))
        )
        client = SimpleNamespace(audio=SimpleNamespace(speech=speech))

        audio = OpenAISpeechSynthesizer(SimpleNamespace(client=client)).synthesize("Hello")

        assert audio == b"ID3mp3"
        _, kwargs = speech.create.call_args
        assert kwargs == {"model": "gpt-4o-mini-tts", "voice": "alloy", "input": "Hello"}

    def test_long_text_is_clipped(self):
        speech = SimpleNamespace(create=MagicMock(return_value=SimpleNamespace(content=b"x")))
        client = SimpleNamespace(audio=SimpleNamespace(speech=speech))

        tts_bytes("a" * 50, client, max_chars=10)

        assert speech.create.call_args.kwargs["input"] == "a" * 9 + "…"

    def test_autoplay_html(self):
        assert autoplay_html(b"") == ""
        assert "data:audio/mpeg;base64," in autoplay_html(b"abc")


class TestOpenAIAudioClient:
    def test_missing_key(self):
        with pytest.raises(RuntimeError):
            OpenAIAudioClient("")

    def test_factory_receives_key(self):
        factory = MagicMock()
        client = OpenAIAudioClient("sk-test", factory=factory)

        factory.assert_called_once_with(api_key="sk-test")
        assert client.client is factory.return_value
