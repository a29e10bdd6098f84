"""MessageStore que grava em vários destinos em paralelo (best effort)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING, Any

from wa_messaging.domain.protocols.message_store import (
    MessageStore,
    MessageStoreError,
    StatusMessageStore,
)
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.models import (
        OutgoingMessage,
        WebhookMessage,
        WebhookStatus,
    )

logger: logging.Logger = get_logger(__name__)


class CompositeMessageStore(StatusMessageStore):
    """Fan-out para todos os stores.

    Todos os destinos rodam até o fim; se algum falhar, cada falha é logada
    e MessageStoreError é levantado depois. Status vão só para stores que
    suportam status.
    """

    def __init__(self, stores: Sequence[MessageStore]) -> None:
        self._stores = tuple(stores)

    @property
    def stores(self) -> tuple[MessageStore, ...]:
        return self._stores

    async def _fan_out(
        self,
        operation: str,
        stores: Sequence[MessageStore],
        calls: Sequence[Awaitable[None]],
    ) -> None:
        results = await asyncio.gather(*calls, return_exceptions=True)
        failures = [
            (store, result)
            for store, result in zip(stores, results, strict=True)
            if isinstance(result, Exception)
        ]
        for store, error in failures:
            logger.error(
                "message_store_sink_failed",
                extra={
                    "operation": operation,
                    "store": type(store).__name__,
                    "error_type": type(error).__name__,
                },
            )
        if failures:
            names = ", ".join(type(store).__name__ for store, _ in failures)
            raise MessageStoreError(f"{operation} falhou em {len(failures)} store(s): {names}")

    async def save_incoming(self, account_id: str, message: WebhookMessage) -> None:
        await self._fan_out(
            "save_incoming",
            self._stores,
            [s.save_incoming(account_id, message) for s in self._stores],
        )

    async def save_outgoing(
        self,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
    ) -> None:
        await self._fan_out(
            "save_outgoing",
            self._stores,
            [s.save_outgoing(account_id, outgoing, response) for s in self._stores],
        )

    async def save_status(self, account_id: str, status: WebhookStatus) -> None:
        status_stores = [s for s in self._stores if isinstance(s, StatusMessageStore)]
        await self._fan_out(
            "save_status",
            status_stores,
            [s.save_status(account_id, status) for s in status_stores],
        )
