"""
JobDash - Durable client-side key/value storage.

Plays the role browser localStorage plays for a web frontend: a small JSON
file of string keys to string values. Only the session store reads or
writes the auth token through it.
"""
from pathlib import Path
from typing import Dict, Optional, Union
import json
import logging
import os

logger = logging.getLogger("jobdash.storage")

TOKEN_KEY = "token"


class FileTokenStorage:
    """
    JSON-file backed key/value store.

    Writes go to a temp file that replaces the original, so a crash never
    leaves a half-written session file. The file is created owner-only.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    # Token shortcuts

    def get_token(self) -> Optional[str]:
        return self.get_item(TOKEN_KEY)

    def set_token(self, token: str) -> None:
        self.set_item(TOKEN_KEY, token)

    def clear_token(self) -> None:
        self.remove_item(TOKEN_KEY)
