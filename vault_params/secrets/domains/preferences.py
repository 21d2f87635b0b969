"""User preferences for vault-params.

Stored as JSON under the XDG config directory:
~/.config/vault-params/preferences.json
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PREFERENCES_DIR = Path.home() / ".config" / "vault-params"
PREFERENCES_FILE = PREFERENCES_DIR / "preferences.json"


def _load_preferences() -> Dict[str, Any]:
    """
    Read the preferences file.

    Returns:
        Stored preferences, or an empty dict if the file is absent or unreadable
    """
    if not PREFERENCES_FILE.exists():
        return {}

    try:
        with open(PREFERENCES_FILE, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read preferences file {PREFERENCES_FILE}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.error(f"Ignoring preferences file {PREFERENCES_FILE}: expected a JSON object")
        return {}
    return data


def _save_preferences(preferences: Dict[str, Any]) -> None:
    PREFERENCES_DIR.mkdir(parents=True, exist_ok=True)
    with open(PREFERENCES_FILE, 'w') as f:
        json.dump(preferences, f, indent=2)


def get_preference(key: str) -> Optional[str]:
    """Return the stored value for ``key``, or None."""
    return _load_preferences().get(key)


def set_preference(key: str, value: str) -> None:
    preferences = _load_preferences()
    preferences[key] = value
    _save_preferences(preferences)
    logger.info(f"Preference '{key}' set to: {value}")


def clear_preference(key: str) -> None:
    """Remove ``key`` if present; a missing key is not an error."""
    preferences = _load_preferences()
    if key not in preferences:
        logger.debug(f"Preference '{key}' not found, nothing to clear")
        return

    del preferences[key]
    _save_preferences(preferences)
    logger.info(f"Preference '{key}' cleared")
