"""
UI layer
Purpose: Streamlit-only glue. Renders widgets, collects typed or spoken input,
and delegates all work to the controller. Keeps UI concerns (layout/state
widgets, audio playback, opening tabs) separate from business logic so logic
can be unit tested without Streamlit.
"""

import hashlib
import json

import streamlit as st
import streamlit.components.v1 as components
from audio_recorder_streamlit import audio_recorder

from quickask.config import (
    APP_NAME,
    EXPORT_FILE_NAME,
    HISTORY_FILE,
    OPENAI_API_KEY,
    PREFS_FILE,
)
from quickask.controller import AssistantController
from quickask.models import Message, Sender
from quickask.persistence.preferences import load_preferences, save_preferences
from quickask.persistence.session_store import (
    InMemorySessionPersistence,
    JsonFileSessionPersistence,
    SessionPersistenceError,
)
from quickask.services.knowledge import KnowledgeResolver
from quickask.services.openai_audio import OpenAIAudioClient
from quickask.services.providers import DuckDuckGoProvider, WikipediaProvider
from quickask.services.speech import OpenAISpeechSynthesizer
from quickask.services.voice import OpenAITranscriber, autoplay_html


# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title=APP_NAME,
    page_icon="🤖",
    layout="wide",
    initial_sidebar_state="expanded",
)

DARK_CSS = """
<style>
.stApp, [data-testid="stSidebar"] { background-color: #121212; color: #e0e0e0; }
.stApp p, .stApp li, .stApp span, .stApp label { color: #e0e0e0; }
</style>
"""

# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("controller", None)
st_session.setdefault("transcript", [])
st_session.setdefault("pending_urls", [])
st_session.setdefault("speak_replies", False)
st_session.setdefault("voice_mode", False)
st_session.setdefault("last_voice_sig", None)
st_session.setdefault("tts_text_queue", [])
st_session.setdefault("tts_audio_queue", [])
st_session.setdefault("synthesizer", None)
st_session.setdefault("api_key_set", False)
st_session.setdefault("prefs", load_preferences(PREFS_FILE))


# ---------------------------
# Collaborators backed by session state
# ---------------------------
class TranscriptRenderer:
    """What the chat pane shows; separate from the stored session log."""

    def render(self, message: Message) -> None:
        st_session.transcript.append(message)

    def clear(self) -> None:
        st_session.transcript = []


class QueuedSpeaker:
    """Queue text for TTS; audio is produced and played on the next rerun."""

    def speak(self, text: str) -> None:
        if st_session.speak_replies and (text or "").strip():
            st_session.tts_text_queue.append(text)


class TabOpener:
    def open_url(self, url: str) -> None:
        st_session.pending_urls.append(url)


# ---------------------------
# Helpers
# ---------------------------
def get_controller() -> AssistantController:
    """Build the controller once per browser session."""
    controller = st_session.get("controller")
    if controller is None:
        resolver = KnowledgeResolver(DuckDuckGoProvider(), WikipediaProvider())
        persistence = JsonFileSessionPersistence(HISTORY_FILE)
        try:
            persistence.load_all()
        except SessionPersistenceError as e:
            st.error(f"Chat history could not be loaded, this session will not be saved: {e}")
            persistence = InMemorySessionPersistence()
        controller = AssistantController(
            resolver,
            persistence,
            renderer=TranscriptRenderer(),
            speaker=QueuedSpeaker(),
            url_opener=TabOpener(),
        )
        st_session.controller = controller
    return controller


def enable_openai_audio(api_key: str) -> None:
    """Attach TTS/STT once a key is known. Without a key, voice input is unsupported."""
    if st_session.api_key_set or not api_key:
        return
    try:
        audio_client = OpenAIAudioClient(api_key=api_key)
        audio_client.verify()
    except Exception as e:
        st.error(f"OpenAI client init failed: {e}")
        return
    get_controller().transcriber = OpenAITranscriber(audio_client)
    st_session.synthesizer = OpenAISpeechSynthesizer(audio_client)
    st_session.api_key_set = True


def render_message(msg: Message) -> None:
    with st.chat_message(msg.sender.value):
        if msg.sender == Sender.ASSISTANT and msg.thumbnail_url:
            st.image(msg.thumbnail_url, width=160)
        prefix = "📖 " if msg.sender == Sender.ASSISTANT and msg.source_url else ""
        st.markdown(f"{prefix}{msg.content}")
        if msg.source_url:
            st.markdown(f"[📘 Source]({msg.source_url})")


def flush_pending_urls() -> None:
    while st_session.pending_urls:
        url = st_session.pending_urls.pop(0)
        components.html(
            f"<script>window.open({json.dumps(url)}, '_blank');</script>", height=0
        )
        st.link_button(f"Open {url}", url)


def play_tts_queue() -> None:
    if st_session.tts_audio_queue:
        mp3 = st_session.tts_audio_queue.pop(0)
        st.html(autoplay_html(mp3))

    synthesizer = st_session.synthesizer
    if synthesizer is None:
        st_session.tts_text_queue = []
        return
    if st_session.speak_replies and st_session.tts_text_queue:
        next_text = st_session.tts_text_queue.pop(0)
        with st.spinner("Preparing audio…"):
            try:
                audio_bytes = synthesizer.synthesize(next_text)
                if audio_bytes:
                    st_session.tts_audio_queue.append(audio_bytes)
                    st.rerun()
            except Exception as e:
                st.toast(f"TTS failed: {e}", icon="⚠️")


# ---------------------------
# SIDEBAR: chats & settings
# ---------------------------
controller = get_controller()

with st.sidebar:
    st.markdown(f"# {APP_NAME}")

    if st.button("➕ New chat", use_container_width=True):
        controller.new_chat()
        st.rerun()

    st.markdown("## Chats")
    for summary in controller.chat_list():
        label = summary.title
        if summary.id == controller.current_session_id:
            label = f"▶ {label}"
        if st.button(label, key=f"chat_{summary.id}", use_container_width=True):
            controller.load_chat(summary.id)
            st.rerun()

    st.divider()
    st.download_button(
        "⬇️ Export history",
        data=controller.export_history(),
        file_name=EXPORT_FILE_NAME,
        mime="application/json",
        use_container_width=True,
    )

    dark = st.toggle("🌙 Dark mode", value=st_session.prefs.dark_mode)
    if dark != st_session.prefs.dark_mode:
        st_session.prefs.dark_mode = dark
        save_preferences(PREFS_FILE, st_session.prefs)

    st.divider()
    st.markdown("## Voice (optional)")
    user_api_key = st.text_input(
        "OpenAI API key",
        type="password",
        value=OPENAI_API_KEY,
        help="Used only for speech input and read-outs. It stays in your session.",
    )
    enable_openai_audio(user_api_key)

if st_session.prefs.dark_mode:
    st.markdown(DARK_CSS, unsafe_allow_html=True)


# ---------------------------
# MAIN: transcript & input
# ---------------------------
st.caption(
    "Try: `open youtube`, `who is ada lovelace`, `define entropy`, "
    "`give me 2 number of lines black holes`."
)

vcol1, vcol2, vcol3 = st.columns([1, 1, 1])
with vcol1:
    if st.button("🗣️ Talk"):
        controller.greet()
with vcol2:
    st_session.voice_mode = st.toggle("🎙️ Voice mode", value=st_session.voice_mode)
with vcol3:
    st_session.speak_replies = st.toggle(
        "🔊 Speak assistant replies", value=st_session.speak_replies
    )

play_tts_queue()
flush_pending_urls()

transcript = st.container(height=500, border=True)
with transcript:
    for msg in st_session.transcript:
        render_message(msg)

if st_session.voice_mode:
    if not controller.can_listen():
        controller.handle_voice(b"")
        st_session.voice_mode = False
        st.rerun()
    wav_bytes = audio_recorder(
        pause_threshold=2,
        sample_rate=16_000,
        text="Press to record",
        icon_size="2x",
    )
    if wav_bytes:
        sig = hashlib.sha1(wav_bytes).hexdigest()
        if sig != st_session.get("last_voice_sig"):
            st_session.last_voice_sig = sig
            with st.spinner("Transcribing…"):
                controller.handle_voice(wav_bytes)
            st.rerun()

raw = st.chat_input("Ask me something or say 'open <site>'…")
if raw is not None and raw.strip():
    with st.spinner("Thinking…"):
        controller.handle_text(raw.strip())
    st.rerun()
