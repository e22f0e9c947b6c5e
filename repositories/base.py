"""
Credential store base class - defines the interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from models import CredentialSet, ProviderId, is_valid_key
from weitblick.errors import InvalidCredential


class CredentialStore(ABC):
    """
    Abstract key/value store for provider secrets.

    Keys are validated against the provider's expected shape before they
    are accepted. Secrets leave the store only as a CredentialSet handed
    to the fan-out.
    """

    @abstractmethod
    def _read(self) -> dict[str, str]:
        """Raw provider -> secret mapping."""
        pass

    @abstractmethod
    def _write(self, provider: ProviderId, key: Optional[str]) -> None:
        """Persist one secret; None removes it."""
        pass

    def load(self) -> CredentialSet:
        """All stored secrets as a CredentialSet."""
        raw = self._read()
        return CredentialSet(**{p.value: raw.get(p.value) or None for p in ProviderId})

    def get(self, provider: ProviderId) -> Optional[str]:
        return self._read().get(ProviderId(provider).value) or None

    def set(self, provider: ProviderId, key: str) -> None:
        """Store a key. Raises InvalidCredential if it has the wrong shape."""
        provider = ProviderId(provider)
        key = str(key or "").strip()
        if not is_valid_key(provider, key):
            raise InvalidCredential(provider.value)
        self._write(provider, key)
        print(f"[credentials] Stored key for {provider.value}")

    def remove(self, provider: ProviderId) -> bool:
        """Remove a key. Returns True if one was stored."""
        provider = ProviderId(provider)
        existed = self.get(provider) is not None
        self._write(provider, None)
        if existed:
            print(f"[credentials] Removed key for {provider.value}")
        return existed
