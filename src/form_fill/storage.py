"""
JSON-file settings store for the API key and the enable flag.

Stands in for the host's key/value storage.  When no key has been saved,
``get_api_key`` falls back to the environment variable named in
``API_CONFIG['api_key_env']``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from ..api_client.config import (
    API_CONFIG,
    API_KEY_SETTING,
    ENABLED_SETTING,
    MIN_API_KEY_LENGTH,
    SETTINGS_PATH,
)


class SettingsStore:
    """Read/write access to the persisted autofill settings."""

    def __init__(self, path: Path = SETTINGS_PATH) -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)

    # ------------------------------------------------------------------
    # API key
    # ------------------------------------------------------------------

    def get_api_key(self) -> str | None:
        key = self._read().get(API_KEY_SETTING)
        if key:
            return key
        return os.getenv(API_CONFIG["api_key_env"]) or None

    def save_api_key(self, api_key: str) -> str:
        """
        Validate and persist an API key.

        Returns:
            The stripped key that was saved.

        Raises:
            ValueError: Key is empty or shorter than MIN_API_KEY_LENGTH.
        """
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("Please enter an API key")
        if len(api_key) < MIN_API_KEY_LENGTH:
            raise ValueError("Invalid API key format")

        data = self._read()
        data[API_KEY_SETTING] = api_key
        self._write(data)
        print(f"API key saved ({api_key[:8]}...)")
        return api_key

    def clear_api_key(self) -> None:
        data = self._read()
        if data.pop(API_KEY_SETTING, None) is not None:
            self._write(data)
            print("API key cleared")

    # ------------------------------------------------------------------
    # Enable flag
    # ------------------------------------------------------------------

    def is_enabled(self) -> bool:
        return bool(self._read().get(ENABLED_SETTING, False))

    def set_enabled(self, enabled: bool) -> None:
        data = self._read()
        data[ENABLED_SETTING] = bool(enabled)
        self._write(data)
