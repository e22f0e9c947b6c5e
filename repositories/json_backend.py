"""
JSON file backend - stores keys in a single local file.

File layout (keys named per provider):
    {
      "gemini_api_key": "...",
      "openai_api_key": "..."
    }
"""

import json
import os
import threading
from pathlib import Path
from typing import Optional

from config import CREDENTIALS_FILE
from models import ProviderId
from .base import CredentialStore


def storage_key(provider: ProviderId) -> str:
    return f"{ProviderId(provider).value}_api_key"


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write, readable by the owner only."""
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2)
            os.chmod(temp, 0o600)
            temp.replace(path)


_write_queue = WriteQueue()


class JsonCredentialStore(CredentialStore):
    """JSON file implementation of the credential store."""

    def __init__(self, path: Path = None):
        self._path = Path(path) if path else CREDENTIALS_FILE

    @property
    def path(self) -> Path:
        return self._path

    def _load_file(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            with open(self._path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[WARN] Corrupt credentials file {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _read(self) -> dict[str, str]:
        data = self._load_file()
        return {p.value: data.get(storage_key(p)) for p in ProviderId if data.get(storage_key(p))}

    def _write(self, provider: ProviderId, key: Optional[str]) -> None:
        data = self._load_file()
        if key:
            data[storage_key(provider)] = key
        else:
            data.pop(storage_key(provider), None)
        _write_queue.write_json(self._path, data)
