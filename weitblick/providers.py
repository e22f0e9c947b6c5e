"""
Provider clients - one thin client per AI vendor.

Every client exposes the same call(prompt, credential) contract and
translates it into the vendor's own request/response envelope. A single
outbound request per call: SDK retries are disabled.

The credential is passed per call and never stored on the client, logged,
or included in an exception message.
"""

import threading
from abc import ABC, abstractmethod
from typing import Optional

import requests
import anthropic
import openai
from anthropic import Anthropic
from openai import OpenAI

from config import (
    CALL_TIMEOUT,
    SAMPLING,
    GEMINI_URL,
    OPENAI_URL,
    ANTHROPIC_URL,
    ANTHROPIC_VERSION,
    DEEPSEEK_URL,
    get_model_name,
)
from models import ProviderId
from .errors import ProviderHttpError, ProviderRequestError, AnalysisCancelled


UNAVAILABLE_TEXT = {
    "de": "Analyse nicht verfügbar",
    "en": "Analysis unavailable",
}


def unavailable_text(language: str) -> str:
    return UNAVAILABLE_TEXT.get(getattr(language, "value", language), UNAVAILABLE_TEXT["en"])


def is_unavailable(text: str) -> bool:
    return text in UNAVAILABLE_TEXT.values()


def _redact(message: str, credential: str) -> str:
    if credential:
        message = message.replace(credential, "***")
    return message


class ProviderClient(ABC):
    """Base for vendor clients. Subclasses implement _send()."""

    provider: ProviderId

    def call(
        self,
        prompt: str,
        credential: str,
        *,
        timeout: Optional[float] = None,
        language: str = "de",
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Send one prompt and return the response text.

        Raises ProviderHttpError on a non-success status and
        ProviderRequestError on transport failures. A response without the
        expected text field yields the "analysis unavailable" placeholder.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelled(self.provider.value)

        text = self._send(prompt, credential, timeout or CALL_TIMEOUT)
        if not text or not text.strip():
            return unavailable_text(language)
        return text

    @abstractmethod
    def _send(self, prompt: str, credential: str, timeout: float) -> Optional[str]:
        """Perform the request; return the text field or None when absent."""


class GeminiClient(ProviderClient):
    """Key travels in the query string."""

    provider = ProviderId.GEMINI

    def build_body(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": SAMPLING["temperature"],
                "topK": SAMPLING["top_k"],
                "topP": SAMPLING["top_p"],
                "maxOutputTokens": SAMPLING["max_tokens"],
            },
        }

    def _send(self, prompt: str, credential: str, timeout: float) -> Optional[str]:
        url = GEMINI_URL.format(model=get_model_name(self.provider.value))
        try:
            resp = requests.post(
                url,
                params={"key": credential},
                json=self.build_body(prompt),
                headers={"Content-Type": "application/json"},
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise ProviderRequestError(self.provider.value, _redact(type(e).__name__ + ": " + str(e), credential)) from None

        if not resp.ok:
            raise ProviderHttpError(self.provider.value, resp.status_code)

        try:
            data = resp.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError):
            return None


class OpenAICompatibleClient(ProviderClient):
    """Bearer-auth chat completions (OpenAI and DeepSeek)."""

    base_url: str = OPENAI_URL

    def _send(self, prompt: str, credential: str, timeout: float) -> Optional[str]:
        client = OpenAI(api_key=credential, base_url=self.base_url, timeout=timeout, max_retries=0)
        try:
            resp = client.chat.completions.create(
                model=get_model_name(self.provider.value),
                messages=[{"role": "user", "content": prompt}],
                temperature=SAMPLING["temperature"],
                max_tokens=SAMPLING["max_tokens"],
            )
        except openai.APIStatusError as e:
            raise ProviderHttpError(self.provider.value, e.status_code) from None
        except openai.APIError as e:
            raise ProviderRequestError(self.provider.value, _redact(type(e).__name__ + ": " + str(e), credential)) from None

        try:
            return resp.choices[0].message.content
        except (IndexError, AttributeError, TypeError):
            return None


class OpenAIClient(OpenAICompatibleClient):
    provider = ProviderId.OPENAI
    base_url = OPENAI_URL


class DeepSeekClient(OpenAICompatibleClient):
    provider = ProviderId.DEEPSEEK
    base_url = DEEPSEEK_URL


class AnthropicClient(ProviderClient):
    """x-api-key header plus a pinned anthropic-version header."""

    provider = ProviderId.ANTHROPIC

    def _send(self, prompt: str, credential: str, timeout: float) -> Optional[str]:
        client = Anthropic(
            api_key=credential,
            base_url=ANTHROPIC_URL,
            timeout=timeout,
            max_retries=0,
            default_headers={"anthropic-version": ANTHROPIC_VERSION},
        )
        try:
            resp = client.messages.create(
                model=get_model_name(self.provider.value),
                max_tokens=SAMPLING["max_tokens"],
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise ProviderHttpError(self.provider.value, e.status_code) from None
        except anthropic.APIError as e:
            raise ProviderRequestError(self.provider.value, _redact(type(e).__name__ + ": " + str(e), credential)) from None

        try:
            return resp.content[0].text
        except (IndexError, AttributeError, TypeError):
            return None


DEFAULT_CLIENTS: dict[ProviderId, ProviderClient] = {
    ProviderId.GEMINI: GeminiClient(),
    ProviderId.OPENAI: OpenAIClient(),
    ProviderId.ANTHROPIC: AnthropicClient(),
    ProviderId.DEEPSEEK: DeepSeekClient(),
}


def get_client(provider: ProviderId) -> ProviderClient:
    try:
        return DEFAULT_CLIENTS[ProviderId(provider)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown provider: {provider}") from None
