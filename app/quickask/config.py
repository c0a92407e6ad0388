from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Chat history and UI preferences live here unless overridden
DATA_DIR = Path(os.getenv("QUICKASK_DATA_DIR", str(PROJECT_ROOT / "data")))
HISTORY_FILE = Path(os.getenv("QUICKASK_HISTORY_FILE", str(DATA_DIR / "chat_sessions.json")))
PREFS_FILE = Path(os.getenv("QUICKASK_PREFS_FILE", str(DATA_DIR / "preferences.json")))

# File name offered by the export button
EXPORT_FILE_NAME = "chat_history.json"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "QuickAsk Voice Assistant"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Knowledge providers
#
# Provider A: DuckDuckGo Instant Answer API (structured abstract/answer/definition)
# Provider B: Wikipedia REST page summary (extract, thumbnail, canonical URL)
#
# The timeout only bounds a single socket wait. There is no retry policy.
# ---------------------------------------------------------------------------

DUCKDUCKGO_API_URL = os.getenv("DUCKDUCKGO_API_URL", "https://api.duckduckgo.com/").strip()
WIKIPEDIA_SUMMARY_URL = os.getenv(
    "WIKIPEDIA_SUMMARY_URL",
    "https://en.wikipedia.org/api/rest_v1/page/summary/",
).strip()

HTTP_TIMEOUT_SECONDS = float(os.getenv("QUICKASK_HTTP_TIMEOUT", "10"))

# Wikipedia asks API clients to identify themselves
USER_AGENT = os.getenv(
    "QUICKASK_USER_AGENT",
    f"QuickAsk/{APP_VERSION} (https://github.com/quickask/quickask)",
).strip()

# ---------------------------------------------------------------------------
# Speech (optional, needs an OpenAI API key)
# ---------------------------------------------------------------------------

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
TTS_MODEL = os.getenv("QUICKASK_TTS_MODEL", "gpt-4o-mini-tts").strip()
TTS_VOICE = os.getenv("QUICKASK_TTS_VOICE", "alloy").strip()
STT_MODEL = os.getenv("QUICKASK_STT_MODEL", "whisper-1").strip()
