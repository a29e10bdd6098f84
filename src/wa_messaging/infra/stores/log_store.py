"""MessageStore que apenas registra logs estruturados (dev/debug)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wa_messaging.domain.messages import MessageRecord, StatusRecord
from wa_messaging.domain.protocols.message_store import StatusMessageStore
from wa_messaging.observability.logging import get_logger, mask_phone

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.models import (
        OutgoingMessage,
        WebhookMessage,
        WebhookStatus,
    )

logger: logging.Logger = get_logger(__name__)


class LogMessageStore(StatusMessageStore):
    """Uma linha de log por mensagem/status.

    Nunca loga conteúdo nem payload; telefones saem mascarados.
    """

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    async def save_incoming(self, account_id: str, message: WebhookMessage) -> None:
        record = MessageRecord.from_incoming(account_id, message)
        logger.log(
            self._level,
            "whatsapp_message_incoming",
            extra={
                "account_id": account_id,
                "message_id": record.message_id,
                "from": mask_phone(record.from_number),
                "to": mask_phone(record.to),
                "timestamp": record.timestamp.isoformat(),
                "message_type": message.type,
            },
        )

    async def save_outgoing(
        self,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
    ) -> None:
        record = MessageRecord.from_outgoing(account_id, outgoing, response)
        logger.log(
            self._level,
            "whatsapp_message_outgoing",
            extra={
                "account_id": account_id,
                "message_id": record.message_id,
                "from": mask_phone(record.from_number),
                "to": mask_phone(record.to),
                "message_type": outgoing.message_payload.get("type"),
            },
        )

    async def save_status(self, account_id: str, status: WebhookStatus) -> None:
        record = StatusRecord.from_status(account_id, status)
        logger.log(
            self._level,
            "whatsapp_message_status",
            extra={
                "account_id": account_id,
                "message_id": record.message_id,
                "status": record.status,
                "timestamp": record.timestamp.isoformat(),
            },
        )
