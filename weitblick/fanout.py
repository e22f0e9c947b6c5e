"""
Fan-out orchestration across all configured AI providers.

Every configured provider is called concurrently and joined with
"wait for all, collect each outcome independently" semantics: one
provider's failure never cancels or blocks the others. Each call is
bounded by a timeout that starts once a worker picks the call up, and
the whole batch can be cancelled through a threading.Event.

Calls run on a thread pool owned by the FanOut, so every fan-out sharing
one FanOut shares its concurrency limit. Callers never wait for worker
threads that outlive a timeout or cancellation.

Result contract:
- provider absent from the mapping  -> not configured
- provider present with failure text -> configured but failed
- provider present with other text   -> usable result (unless placeholder)
"""

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from config import CALL_TIMEOUT, MAX_CONCURRENCY
from models import CredentialSet, ProviderId
from .errors import ProviderError
from .prompts import build_prompt
from .providers import DEFAULT_CLIENTS, ProviderClient, is_unavailable, _redact


FAILURE_TEMPLATES = {
    "de": "Analyse mit {provider} fehlgeschlagen: {reason}",
    "en": "Analysis with {provider} failed: {reason}",
}

# Extra time for the worker thread to hand back after the client's own timeout
TIMEOUT_GRACE = 5.0


def failure_text(provider: ProviderId, reason: str, language: str) -> str:
    language = getattr(language, "value", language)
    template = FAILURE_TEMPLATES.get(language, FAILURE_TEMPLATES["en"])
    return template.format(provider=ProviderId(provider).value, reason=reason)


def is_failure(provider: ProviderId, text: str) -> bool:
    """True when text is a failure string recorded for this provider."""
    provider = ProviderId(provider).value
    for template in FAILURE_TEMPLATES.values():
        prefix = template.split("{reason}")[0].format(provider=provider)
        if text.startswith(prefix):
            return True
    return False


def select_result(results: dict) -> Optional[tuple[ProviderId, str]]:
    """
    First usable result in provider priority order.

    Skips failures and "analysis unavailable" placeholders. None means no
    provider produced anything usable and the caller should fall back.
    """
    for provider in ProviderId:
        text = results.get(provider)
        if not text:
            continue
        if is_failure(provider, text) or is_unavailable(text):
            continue
        return provider, text
    return None


class FanOut:
    """
    Concurrent dispatcher for provider clients.

    Clients are injectable so tests and alternative transports can swap
    them per provider. max_concurrency is the size of the worker pool and
    bounds all calls in flight through this instance.
    """

    def __init__(
        self,
        clients: Optional[dict] = None,
        timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        poll_interval: float = 0.05,
    ):
        self.clients: dict[ProviderId, ProviderClient] = dict(DEFAULT_CLIENTS)
        if clients:
            self.clients.update({ProviderId(p): c for p, c in clients.items()})
        self.timeout = timeout or CALL_TIMEOUT
        self.max_concurrency = max(1, max_concurrency or MAX_CONCURRENCY)
        self.poll_interval = poll_interval
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_concurrency,
            thread_name_prefix="fanout",
        )

    def close(self) -> None:
        """Drop queued calls and release the pool without waiting for running ones."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def analyze_with_all(
        self,
        text: str,
        persona: str,
        level: str,
        language: str,
        credentials: CredentialSet,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[ProviderId, str]:
        """
        Run one analysis on every configured provider.

        Returns exactly one entry per configured provider. Raises only
        PromptBuildError (unknown persona/level/language).
        """
        prompt = build_prompt(text, persona, level, language)
        providers = credentials.configured()
        if not providers:
            return {}

        timeout = timeout or self.timeout
        tasks = {
            asyncio.create_task(
                self._run_one(provider, prompt, credentials.get(provider), language,
                              timeout, cancel_event)
            ): provider
            for provider in providers
        }

        pending = set(tasks)
        while pending:
            _, pending = await asyncio.wait(pending, timeout=self.poll_interval)
            if pending and cancel_event is not None and cancel_event.is_set():
                print(f"[fanout] Cancelling {len(pending)} pending call(s)")
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                pending = set()

        results: dict[ProviderId, str] = {}
        for task, provider in tasks.items():
            if task.cancelled():
                results[provider] = failure_text(provider, "cancelled", language)
            else:
                results[provider] = task.result()
        return results

    async def _run_one(
        self,
        provider: ProviderId,
        prompt: str,
        credential: str,
        language: str,
        timeout: float,
        cancel_event: Optional[threading.Event],
    ) -> str:
        """One provider call. Never raises except on cancellation."""
        client = self.clients[provider]
        loop = asyncio.get_running_loop()
        started = loop.create_future()

        def mark_started():
            if not started.done():
                started.set_result(None)

        def work():
            try:
                loop.call_soon_threadsafe(mark_started)
            except RuntimeError:
                # The waiting loop is gone; nobody wants this result
                return None
            return client.call(
                prompt,
                credential,
                timeout=timeout,
                language=language,
                cancel_event=cancel_event,
            )

        future = None
        try:
            future = loop.run_in_executor(self._executor, work)
            # Time spent queued for a worker does not count against the timeout
            await asyncio.wait({future, started}, return_when=asyncio.FIRST_COMPLETED)
            start = time.perf_counter()
            text = await asyncio.wait_for(future, timeout=timeout + TIMEOUT_GRACE)
        except asyncio.TimeoutError:
            print(f"[fanout] {provider.value}: timed out after {timeout:.0f}s")
            return failure_text(provider, f"timeout after {timeout:.0f}s", language)
        except ProviderError as e:
            print(f"[fanout] {provider.value}: {e.reason}")
            return failure_text(provider, e.reason, language)
        except Exception as e:
            reason = _redact(f"{type(e).__name__}: {e}", credential)
            print(f"[fanout] {provider.value}: unexpected error {reason}")
            return failure_text(provider, reason, language)
        finally:
            if not started.done():
                started.cancel()
            # Still queued when cancelled or timed out: never start it
            if future is not None and not future.done():
                future.cancel()

        print(f"[fanout] {provider.value}: ok ({time.perf_counter() - start:.1f}s, {len(text)} chars)")
        return text


def analyze_with_all(
    text: str,
    persona: str,
    level: str,
    language: str,
    credentials: CredentialSet,
    **kwargs,
) -> dict[ProviderId, str]:
    """Blocking wrapper around FanOut.analyze_with_all with default clients."""
    fanout = FanOut()
    try:
        return asyncio.run(fanout.analyze_with_all(text, persona, level, language, credentials, **kwargs))
    finally:
        fanout.close()
