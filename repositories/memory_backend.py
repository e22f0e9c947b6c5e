"""
In-memory backend - nothing touches disk. Used by tests and throwaway sessions.
"""

from typing import Optional

from models import ProviderId
from .base import CredentialStore


class MemoryCredentialStore(CredentialStore):

    def __init__(self, initial: dict = None):
        self._keys: dict[str, str] = {}
        for provider, key in (initial or {}).items():
            self._keys[ProviderId(provider).value] = key

    def _read(self) -> dict[str, str]:
        return dict(self._keys)

    def _write(self, provider: ProviderId, key: Optional[str]) -> None:
        if key:
            self._keys[ProviderId(provider).value] = key
        else:
            self._keys.pop(ProviderId(provider).value, None)
