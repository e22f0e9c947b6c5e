"""
Environment backend - read-mostly store over process environment variables.

Useful for headless runs where keys come from .env (loaded in config).
"""

import os
from typing import Optional

from config import ENV_KEYS
from models import ProviderId
from .base import CredentialStore


class EnvCredentialStore(CredentialStore):
    """Keys from GEMINI_API_KEY, OPENAI_API_KEY, ANTHROPIC_API_KEY, DEEPSEEK_API_KEY."""

    def __init__(self, environ: dict = None):
        self._environ = os.environ if environ is None else environ

    def _read(self) -> dict[str, str]:
        return {
            p.value: self._environ.get(ENV_KEYS[p.value])
            for p in ProviderId
            if self._environ.get(ENV_KEYS[p.value])
        }

    def _write(self, provider: ProviderId, key: Optional[str]) -> None:
        name = ENV_KEYS[ProviderId(provider).value]
        if key:
            self._environ[name] = key
        else:
            self._environ.pop(name, None)
