"""
Repository layer - abstracts credential persistence.

Usage:
    from repositories import get_credential_store

    store = get_credential_store()  # Returns configured backend
    credentials = store.load()
    store.set("gemini", "AIza...")

Backends are swappable via config (WEITBLICK_CREDENTIAL_BACKEND).
"""

from config import CREDENTIAL_BACKEND
from .base import CredentialStore
from .json_backend import JsonCredentialStore
from .env_backend import EnvCredentialStore
from .memory_backend import MemoryCredentialStore

_backend: str = CREDENTIAL_BACKEND
_options: dict = {}
_instance: CredentialStore = None


def get_credential_store() -> CredentialStore:
    """Get the configured credential store instance."""
    global _instance

    if _instance is None:
        if _backend == "json":
            _instance = JsonCredentialStore(**_options)
        elif _backend == "env":
            _instance = EnvCredentialStore(**_options)
        elif _backend == "memory":
            _instance = MemoryCredentialStore(**_options)
        else:
            raise ValueError(f"Unknown backend: {_backend}")

    return _instance


def configure_backend(backend: str, **kwargs) -> None:
    """Configure the credential backend."""
    global _backend, _options, _instance
    _backend = backend
    _options = kwargs
    _instance = None  # Force re-initialization


__all__ = [
    "get_credential_store",
    "configure_backend",
    "CredentialStore",
    "JsonCredentialStore",
    "EnvCredentialStore",
    "MemoryCredentialStore",
]
