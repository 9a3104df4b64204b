"""
Persistent client-side storage for auth material.

A small JSON file plays the role of the browser's localStorage. Every read
goes back to disk so a token written by another process is picked up on the
next request without restarting anything.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
SESSION_TOKEN_KEY = "sessionToken"
SESSION_EXPIRY_KEY = "sessionExpiry"

SESSION_KEYS = (TOKEN_KEY, SESSION_TOKEN_KEY, SESSION_EXPIRY_KEY)


class TokenProvider(Protocol):
    """Read-only capability handing out the current bearer token."""

    def get_token(self) -> Optional[str]:
        ...


class StaticTokenProvider:
    """Token provider with a fixed value."""

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def get_token(self) -> Optional[str]:
        return self.token


class TokenStore:
    """File-backed key/value storage."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable token store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        """Get a stored value, or None."""
        value = self._read().get(key)
        return str(value) if value is not None else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        """Remove a value if present."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def clear_session(self) -> None:
        """Drop token, session token and session expiry."""
        data = self._read()
        for key in SESSION_KEYS:
            data.pop(key, None)
        self._write(data)
        logger.info("Session storage cleared")

    def get_token(self) -> Optional[str]:
        return self.get_item(TOKEN_KEY)

    def get_session_token(self) -> Optional[str]:
        return self.get_item(SESSION_TOKEN_KEY)
