"""Ingestão do webhook Meta: grava mensagens recebidas e status."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from wa_messaging.domain.protocols.message_store import StatusMessageStore
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.models import WebhookPayload
    from wa_messaging.domain.protocols.message_store import MessageStore

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class WebhookSummary:
    """Contagem do que foi gravado em uma entrega de webhook."""

    messages: int = 0
    statuses: int = 0
    statuses_skipped: int = 0


async def handle_webhook(payload: WebhookPayload, store: MessageStore | None) -> WebhookSummary:
    """Percorre todas as entries e changes do payload.

    A conta de cada item é o phone_number_id do metadata da sua change.
    Status só são gravados quando o store suporta status.
    """
    summary = WebhookSummary()
    if store is None:
        return summary

    for entry in payload.entry:
        for change in entry.changes:
            account_id = change.value.metadata.phone_number_id

            for message in change.value.messages:
                await store.save_incoming(account_id, message)
                summary.messages += 1

            if not change.value.statuses:
                continue
            if isinstance(store, StatusMessageStore):
                for status in change.value.statuses:
                    await store.save_status(account_id, status)
                    summary.statuses += 1
            else:
                summary.statuses_skipped += len(change.value.statuses)

    logger.info(
        "webhook_processed",
        extra={
            "entries": len(payload.entry),
            "messages": summary.messages,
            "statuses": summary.statuses,
            "statuses_skipped": summary.statuses_skipped,
        },
    )
    return summary
