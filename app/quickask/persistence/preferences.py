"""UI preferences (dark mode) kept apart from chat history."""

from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path

from .._logging import get_component_logger

log = get_component_logger("Preferences")


@dataclass
class UiPreferences:
    dark_mode: bool = False


def load_preferences(path: Path) -> UiPreferences:
    """Missing or unreadable file means defaults."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return UiPreferences()
    except (OSError, ValueError) as exc:
        log.warning("preferences_unreadable", path=str(path), error=str(exc))
        return UiPreferences()
    if not isinstance(data, dict):
        return UiPreferences()
    return UiPreferences(dark_mode=bool(data.get("darkMode", False)))


def save_preferences(path: Path, prefs: UiPreferences) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"darkMode": prefs.dark_mode}), encoding="utf-8")
