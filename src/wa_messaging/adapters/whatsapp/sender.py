"""Envio de mensagens (template ou payload livre) via Graph API.

Responsabilidade:
- Montar o payload (templates passam pelo motor de variáveis)
- Injetar messaging_product e enviar ao endpoint de mensagens do remetente
- Persistir a mensagem enviada no store configurado (sem access token)
- Evitar exposição de tokens e telefones em logs
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wa_messaging.adapters.whatsapp.models import (
    MessageSendOptions,
    OutgoingMessage,
    SendResult,
    TemplateSendOptions,
)
from wa_messaging.adapters.whatsapp.templates import create_template_payload
from wa_messaging.domain.protocols.message_store import MessageStoreError
from wa_messaging.infra.http import HttpError
from wa_messaging.observability.logging import get_logger, mask_phone
from wa_messaging.observability.timing import timed

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.http_client import WhatsAppHttpClient
    from wa_messaging.adapters.whatsapp.phone_numbers import BusinessPhoneNumberResolver
    from wa_messaging.domain.protocols.message_store import MessageStore
    from wa_messaging.domain.protocols.template_lookup import TemplateLookupProtocol

logger: logging.Logger = get_logger(__name__)


class WhatsAppSender:
    """Orquestra montagem, envio e persistência de mensagens outbound.

    Falhas de busca de template e de transporte propagam (TemplateLookupError,
    HttpError). Após o envio aceito pela Meta, falhas de persistência ou de
    resolução do número exibido são logadas e não desfazem o resultado.
    """

    def __init__(
        self,
        http_client: WhatsAppHttpClient,
        template_lookup: TemplateLookupProtocol,
        phone_resolver: BusinessPhoneNumberResolver,
        api_endpoint: str,
        default_language: str = "en",
        store: MessageStore | None = None,
    ) -> None:
        self._http_client = http_client
        self._template_lookup = template_lookup
        self._phone_resolver = phone_resolver
        self._api_endpoint = api_endpoint.rstrip("/")
        self._default_language = default_language
        self._store = store

    def messages_endpoint(self, sender_phone_number_id: str) -> str:
        return f"{self._api_endpoint}/{sender_phone_number_id}/messages"

    async def send(self, options: TemplateSendOptions | MessageSendOptions) -> SendResult:
        """Despacha pelo tipo de opção (template x payload livre)."""
        if isinstance(options, TemplateSendOptions):
            return await self.send_template(options)
        return await self.send_message(options)

    async def send_template(self, options: TemplateSendOptions) -> SendResult:
        language = options.language or self._default_language
        with timed("template_payload", template_name=options.template_name):
            result = await create_template_payload(
                self._template_lookup,
                business_account_id=options.business_account_id,
                access_token=options.access_token,
                to=options.to,
                template_name=options.template_name,
                language=language,
                variables=options.variables,
            )

        response = await self._deliver(
            options.sender_phone_number_id,
            options.access_token,
            options.to,
            result.payload,
        )
        return SendResult(response=response, warnings=result.warning_messages)

    async def send_message(self, options: MessageSendOptions) -> SendResult:
        payload = dict(options.message_payload)
        payload.setdefault("to", options.to)
        response = await self._deliver(
            options.sender_phone_number_id,
            options.access_token,
            options.to,
            payload,
        )
        return SendResult(response=response)

    async def _deliver(
        self,
        sender_phone_number_id: str,
        access_token: str,
        to: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        payload["messaging_product"] = "whatsapp"

        with timed("whatsapp_send", sender_phone_number_id=sender_phone_number_id):
            response = await self._http_client.send_message(
                self.messages_endpoint(sender_phone_number_id),
                access_token,
                payload,
            )

        logger.info(
            "message_sent_to_whatsapp_api",
            extra={
                "sender_phone_number_id": sender_phone_number_id,
                "to": mask_phone(to),
                "message_type": payload.get("type"),
            },
        )

        if self._store is not None:
            outgoing = OutgoingMessage(
                sender_phone_number_id=sender_phone_number_id,
                sender_phone_number=await self._resolve_sender(
                    sender_phone_number_id, access_token
                ),
                to=to,
                message_payload=payload,
            )
            await self._persist(self._store, sender_phone_number_id, outgoing, response)

        return response

    async def _resolve_sender(self, phone_number_id: str, access_token: str) -> str | None:
        try:
            return await self._phone_resolver.resolve(phone_number_id, access_token)
        except HttpError as exc:
            logger.warning(
                "display_phone_number_lookup_failed",
                extra={"phone_number_id": phone_number_id, "status_code": exc.status_code},
            )
            return None

    @staticmethod
    async def _persist(
        store: MessageStore,
        account_id: str,
        outgoing: OutgoingMessage,
        response: dict[str, Any],
    ) -> None:
        try:
            await store.save_outgoing(account_id, outgoing, response)
        except MessageStoreError:
            logger.exception("outgoing_message_persist_failed", extra={"account_id": account_id})
