"""MessageStore em memória (apenas dev/testes)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wa_messaging.domain.enums import MessageDirection
from wa_messaging.domain.messages import MessageRecord, StatusRecord
from wa_messaging.domain.protocols.message_store import StatusMessageStore
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.models import (
        OutgoingMessage,
        WebhookMessage,
        WebhookStatus,
    )

logger: logging.Logger = get_logger(__name__)


class InMemoryMessageStore(StatusMessageStore):
    """Armazenamento em memória (não usar em produção)."""

    def __init__(self) -> None:
        self.messages: list[MessageRecord] = []
        self.statuses: list[StatusRecord] = []

    async def save_incoming(self, account_id: str, message: WebhookMessage) -> None:
        self.messages.append(MessageRecord.from_incoming(account_id, message))
        logger.debug("message_saved_in_memory", extra={"direction": "in"})

    async def save_outgoing(
        self,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
    ) -> None:
        self.messages.append(MessageRecord.from_outgoing(account_id, outgoing, response))
        logger.debug("message_saved_in_memory", extra={"direction": "out"})

    async def save_status(self, account_id: str, status: WebhookStatus) -> None:
        self.statuses.append(StatusRecord.from_status(account_id, status))

    def by_direction(self, direction: MessageDirection) -> list[MessageRecord]:
        return [m for m in self.messages if m.direction == direction]
