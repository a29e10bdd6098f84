"""MessageStore persistido no Firestore.

Coleções:
- {messages_collection}/{message_id}: mensagens in/out
- {statuses_collection}/{message_id}:{status}: atualizações de status

Mensagens recebidas usam o id da Meta como documento (reentrega do
webhook sobrescreve o mesmo documento).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import GoogleAPIError

from wa_messaging.domain.messages import MessageRecord, StatusRecord
from wa_messaging.domain.protocols.message_store import (
    MessageStoreError,
    StatusMessageStore,
)
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from google.cloud import firestore

    from wa_messaging.adapters.whatsapp.models import (
        OutgoingMessage,
        WebhookMessage,
        WebhookStatus,
    )

logger: logging.Logger = get_logger(__name__)


def _record_document(record: MessageRecord | StatusRecord) -> dict[str, Any]:
    data = record.model_dump(mode="json")
    data["timestamp"] = record.timestamp  # Firestore grava datetime nativo
    return data


class FirestoreMessageStore(StatusMessageStore):
    """Store de mensagens usando Firestore.

    Usa o client síncrono em thread separada para não bloquear o event loop.
    """

    def __init__(
        self,
        client: firestore.Client,
        messages_collection: str = "whatsapp_messages",
        statuses_collection: str = "whatsapp_message_statuses",
    ) -> None:
        self._client = client
        self._messages_collection = messages_collection
        self._statuses_collection = statuses_collection

    async def _write(self, collection: str, document_id: str | None, data: dict[str, Any]) -> None:
        ref = self._client.collection(collection)
        doc_ref = ref.document(document_id) if document_id else ref.document()
        try:
            await asyncio.to_thread(doc_ref.set, data)
        except GoogleAPIError as e:
            logger.error(
                "firestore_message_write_failed",
                extra={"collection": collection, "error_type": type(e).__name__},
            )
            raise MessageStoreError(f"Failed to write to Firestore: {e}") from e
        logger.debug("firestore_message_written", extra={"collection": collection})

    async def save_incoming(self, account_id: str, message: WebhookMessage) -> None:
        record = MessageRecord.from_incoming(account_id, message)
        await self._write(self._messages_collection, record.message_id, _record_document(record))

    async def save_outgoing(
        self,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
    ) -> None:
        record = MessageRecord.from_outgoing(account_id, outgoing, response)
        await self._write(self._messages_collection, record.message_id, _record_document(record))

    async def save_status(self, account_id: str, status: WebhookStatus) -> None:
        record = StatusRecord.from_status(account_id, status)
        document_id = f"{record.message_id}:{record.status}"
        await self._write(self._statuses_collection, document_id, _record_document(record))
