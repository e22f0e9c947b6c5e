"""
Credential models - one optional secret per AI provider.
"""

import re
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ProviderId(str, Enum):
    """Supported AI providers, in selection priority order."""
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    DEEPSEEK = "deepseek"


# Expected lexical shape of each provider's key
KEY_PATTERNS = {
    ProviderId.GEMINI: re.compile(r"^AIza[\w-]{35,}$"),
    ProviderId.OPENAI: re.compile(r"^sk-[\w-]{48,}$"),
    ProviderId.ANTHROPIC: re.compile(r"^sk-ant-[\w-]{95,}$"),
    ProviderId.DEEPSEEK: re.compile(r"^sk-[\w-]{32,}$"),
}

PROVIDER_LABELS = {
    ProviderId.GEMINI: "Google Gemini",
    ProviderId.OPENAI: "OpenAI ChatGPT",
    ProviderId.ANTHROPIC: "Anthropic Claude",
    ProviderId.DEEPSEEK: "DeepSeek",
}


def is_valid_key(provider: ProviderId, key: Optional[str]) -> bool:
    """Check a key against the provider's expected shape."""
    if not key:
        return False
    return bool(KEY_PATTERNS[ProviderId(provider)].match(key))


def mask_key(key: str) -> str:
    """Show only the first and last characters of a secret."""
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}…{key[-4:]}"


class CredentialSet(BaseModel):
    """
    Mapping from provider to an optional secret.

    Passed explicitly to the fan-out at call time. A provider counts as
    configured only when its secret is present and well-formed.
    """
    model_config = ConfigDict(frozen=True)

    gemini: Optional[str] = None
    openai: Optional[str] = None
    anthropic: Optional[str] = None
    deepseek: Optional[str] = None

    def get(self, provider: ProviderId) -> Optional[str]:
        return getattr(self, ProviderId(provider).value)

    def is_configured(self, provider: ProviderId) -> bool:
        return is_valid_key(provider, self.get(provider))

    def configured(self) -> list[ProviderId]:
        """Configured providers in priority order."""
        return [p for p in ProviderId if self.is_configured(p)]

    def with_key(self, provider: ProviderId, key: Optional[str]) -> "CredentialSet":
        return self.model_copy(update={ProviderId(provider).value: key})

    def masked(self) -> dict:
        """Display-safe view: configured flag and masked key per provider."""
        return {
            p.value: {
                "configured": self.is_configured(p),
                "key": mask_key(self.get(p)) if self.get(p) else None,
            }
            for p in ProviderId
        }

    def __repr__(self) -> str:
        configured = ", ".join(p.value for p in self.configured())
        return f"CredentialSet(configured=[{configured}])"

    __str__ = __repr__
