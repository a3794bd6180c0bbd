from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Generic, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_PROVIDER_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

Q = TypeVar("Q")
R = TypeVar("R")


class Provider(ABC, Generic[Q, R]):
    """One external data source in a ProviderChain.

    `attempt` returns a usable result, returns None to opt out (missing
    credentials, provider-reported failure, empty payload) or raises.
    """

    name: str = "provider"
    timeout_seconds: Optional[float] = None

    @abstractmethod
    def attempt(self, query: Q) -> Optional[R]:
        raise NotImplementedError


class ProviderChain(Generic[Q, R]):
    """Try providers in order until one yields a result.

    Each attempt runs on its own daemon thread and is waited on for at most its
    own timeout; a hung attempt is abandoned (never joined) and holds no shared
    worker, so the next provider starts immediately. Failures stay inside the
    chain: `resolve` returns None when every provider failed or opted out.
    """

    def __init__(
        self,
        providers: Sequence[Provider[Q, R]],
        *,
        name: str = "providers",
        timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    ):
        self._providers = list(providers)
        self._name = name
        self._timeout_seconds = float(timeout_seconds)

    @property
    def providers(self) -> list[Provider[Q, R]]:
        return list(self._providers)

    def _start_attempt(self, provider: Provider[Q, R], query: Q) -> "Future[Optional[R]]":
        future: "Future[Optional[R]]" = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(provider.attempt(query))
            except Exception as exc:
                future.set_exception(exc)

        threading.Thread(target=run, name=f"{self._name}-{provider.name}", daemon=True).start()
        return future

    def resolve(self, query: Q) -> Optional[R]:
        for provider in self._providers:
            timeout = provider.timeout_seconds or self._timeout_seconds
            future = self._start_attempt(provider, query)
            try:
                result = future.result(timeout=timeout)
            except FutureTimeoutError:
                logger.warning("%s: provider %s timed out after %.1fs", self._name, provider.name, timeout)
                continue
            except Exception as exc:
                logger.warning("%s: provider %s failed: %s", self._name, provider.name, exc)
                continue

            if result is None:
                logger.debug("%s: provider %s opted out", self._name, provider.name)
                continue

            logger.debug("%s: resolved by %s", self._name, provider.name)
            return result

        logger.info("%s: all %d providers exhausted", self._name, len(self._providers))
        return None
