"""Registros persistidos de mensagens e status (formato comum aos stores)."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from wa_messaging.domain.enums import MessageDirection

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.models import (
        OutgoingMessage,
        WebhookMessage,
        WebhookStatus,
    )


def _from_epoch(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=UTC)


class MessageRecord(BaseModel):
    """Mensagem recebida ou enviada, pronta para persistência."""

    account_id: str
    message_id: str | None = None
    from_number: str | None = None
    to: str | None = None
    direction: MessageDirection
    timestamp: datetime
    content: str
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_incoming(cls, account_id: str, message: WebhookMessage) -> MessageRecord:
        """Texto vira content; outros tipos guardam o JSON da mensagem."""
        raw = message.model_dump(mode="json", by_alias=True, exclude_none=True)
        content = message.text.body if message.text else json.dumps(raw, sort_keys=True)
        return cls(
            account_id=account_id,
            message_id=message.id,
            from_number=message.from_number,
            to=message.to,
            direction=MessageDirection.INBOUND,
            timestamp=_from_epoch(message.timestamp),
            content=content,
            raw=raw,
        )

    @classmethod
    def from_outgoing(
        cls,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
        now: datetime | None = None,
    ) -> MessageRecord:
        messages = response.get("messages") or []
        message_id = messages[0].get("id") if messages and isinstance(messages[0], dict) else None
        return cls(
            account_id=account_id,
            message_id=message_id,
            from_number=outgoing.sender_phone_number,
            to=outgoing.to,
            direction=MessageDirection.OUTBOUND,
            timestamp=now or datetime.now(tz=UTC),
            content=json.dumps(outgoing.message_payload, sort_keys=True),
            raw=response,
        )


class StatusRecord(BaseModel):
    """Atualização de status de uma mensagem enviada."""

    account_id: str
    message_id: str
    status: str
    timestamp: datetime
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_status(cls, account_id: str, status: WebhookStatus) -> StatusRecord:
        return cls(
            account_id=account_id,
            message_id=status.id,
            status=status.status,
            timestamp=_from_epoch(status.timestamp),
            raw=status.model_dump(mode="json", exclude_none=True),
        )
