"""Opt-in retry wrapper for judge providers.

Nothing in the Runner retries automatically; wrap a provider explicitly:

    provider = RetryingProvider(OpenAIProvider(), max_retries=3)
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping
from typing import Any

from evalcourt.providers.base import BaseJudgeProvider

logger = logging.getLogger(__name__)

# Rate limiting and server-side failures reported by the provider SDKs
_RETRY_STATUS_CODES = frozenset({429, 500, 502, 503})


def _is_transient(exc: Exception) -> bool:
    """Timeouts, dropped connections and retryable HTTP statuses."""
    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True
    for attr in ("status_code", "status"):
        code = getattr(exc, attr, None)
        if isinstance(code, int):
            return code in _RETRY_STATUS_CODES
    return False


class RetryingProvider(BaseJudgeProvider):
    """Wraps another provider and retries its transient failures.

    Delays grow as ``base_delay * 2**attempt`` capped at ``max_delay``,
    with full jitter. ``retries`` counts the retries made over the
    wrapper's lifetime.
    """

    def __init__(
        self,
        inner: BaseJudgeProvider,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.inner = inner
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.retries = 0

    def _backoff(self, attempt: int) -> float:
        ceiling = min(self.base_delay * (2**attempt), self.max_delay)
        return random.uniform(0, ceiling)  # noqa: S311

    async def call(self, prompt: str, config: Mapping[str, Any]) -> str:
        attempt = 0
        while True:
            try:
                return await self.inner.call(prompt, config)
            except Exception as exc:
                if attempt >= self.max_retries or not _is_transient(exc):
                    raise
                delay = self._backoff(attempt)
                attempt += 1
                self.retries += 1
                logger.warning(
                    "%s judge call failed (%s), retry %d/%d in %.2fs",
                    self.inner.provider_name(),
                    exc,
                    attempt,
                    self.max_retries,
                    delay,
                )
                await asyncio.sleep(delay)

    def provider_name(self) -> str:
        return self.inner.provider_name()
