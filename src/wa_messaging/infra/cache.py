"""Cache chave/valor em memória com TTL opcional e limite de entradas.

Injetado no fetcher de templates e no resolvedor de números; cada
instância tem seu próprio estado (sem cache global de módulo).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Generic, TypeVar

from wa_messaging.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 1024


def _now_timestamp() -> float:
    return datetime.now(tz=UTC).timestamp()


class InMemoryCache(Generic[T]):
    """Cache em memória por processo.

    ttl_seconds None ou 0 = entradas nunca expiram. A cada put as entradas
    expiradas são removidas; cheio, o cache descarta a inserção mais antiga.
    """

    def __init__(
        self,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = _now_timestamp,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if ttl_seconds is not None and ttl_seconds < 0:
            raise ValueError("ttl_seconds não pode ser negativo")
        if max_entries < 1:
            raise ValueError("max_entries deve ser >= 1")
        self._ttl = ttl_seconds or None
        self._clock = clock
        self._max_entries = max_entries
        # dict preserva ordem de inserção (mais antiga primeiro)
        self._entries: dict[str, tuple[T, float | None]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expire_at = entry
        if expire_at is not None and self._clock() >= expire_at:
            del self._entries[key]
            logger.debug("cache_entry_expired", extra={"cache_key": key})
            return None
        return value

    def put(self, key: str, value: T) -> None:
        now = self._clock()
        self._sweep_expired(now)
        self._entries.pop(key, None)

        while len(self._entries) >= self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("cache_entry_evicted", extra={"cache_key": oldest})

        expire_at = now + self._ttl if self._ttl else None
        self._entries[key] = (value, expire_at)

    def _sweep_expired(self, now: float) -> None:
        if self._ttl is None:
            return
        expired = [
            key
            for key, (_, expire_at) in self._entries.items()
            if expire_at is not None and now >= expire_at
        ]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
