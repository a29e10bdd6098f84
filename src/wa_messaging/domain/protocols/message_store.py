"""Contratos de persistência de mensagens (inbound, outbound e status)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.models import (
        OutgoingMessage,
        WebhookMessage,
        WebhookStatus,
    )


class MessageStoreError(Exception):
    """Falha ao persistir mensagem em um ou mais destinos."""


class MessageStore(ABC):
    """Contrato assíncrono mínimo para gravar o tráfego de mensagens."""

    @abstractmethod
    async def save_incoming(self, account_id: str, message: WebhookMessage) -> None: ...

    @abstractmethod
    async def save_outgoing(
        self,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
    ) -> None: ...


class StatusMessageStore(MessageStore):
    """Store que também registra atualizações de status."""

    @abstractmethod
    async def save_status(self, account_id: str, status: WebhookStatus) -> None: ...
