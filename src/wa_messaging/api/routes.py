"""Rotas HTTP: healthcheck, webhook WhatsApp e envio de mensagens."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from wa_messaging.adapters.whatsapp.models import (
    MessageSendOptions,
    TemplateSendOptions,
    WebhookPayload,
)
from wa_messaging.adapters.whatsapp.sender import WhatsAppSender
from wa_messaging.adapters.whatsapp.webhook import handle_webhook
from wa_messaging.api.dependencies import get_message_store, get_sender, get_settings
from wa_messaging.api.schemas import (
    RawMessageRequest,
    SendMessageResponse,
    TemplateMessageRequest,
)
from wa_messaging.config.settings import Settings
from wa_messaging.domain.protocols.message_store import MessageStore, MessageStoreError
from wa_messaging.domain.protocols.template_lookup import (
    TemplateLookupError,
    TemplateNotFoundError,
)
from wa_messaging.infra.http import HttpError
from wa_messaging.observability.logging import get_logger
from wa_messaging.observability.middleware import get_correlation_id

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.get("/webhooks/whatsapp")
def whatsapp_verify(
    hub_mode: str | None = Query(None, alias="hub.mode"),
    hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
    hub_challenge: str | None = Query(None, alias="hub.challenge"),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Verificação de webhook exigida pela Meta."""
    if not settings.whatsapp_verify_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="missing_verify_token",
        )

    if hub_mode != "subscribe" or hub_verify_token != settings.whatsapp_verify_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="verification_failed",
        )

    return Response(content=hub_challenge or "", media_type="text/plain")


@router.post("/webhooks/whatsapp")
async def whatsapp_webhook(
    payload: WebhookPayload,
    store: MessageStore = Depends(get_message_store),
) -> dict[str, Any]:
    """Grava mensagens e status recebidos (corpo inválido = 422)."""
    try:
        summary = await handle_webhook(payload, store)
    except MessageStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "message_store_unavailable", "correlation_id": get_correlation_id()},
        ) from exc

    return {
        "ok": True,
        "messages": summary.messages,
        "statuses": summary.statuses,
        "correlation_id": get_correlation_id(),
    }


def _require(value: str | None, detail: str) -> str:
    if not value:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
    return value


async def _send(
    sender: WhatsAppSender,
    options: TemplateSendOptions | MessageSendOptions,
) -> SendMessageResponse:
    try:
        result = await sender.send(options)
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (TemplateLookupError, HttpError) as exc:
        logger.warning(
            "send_failed",
            extra={"error_type": type(exc).__name__, "correlation_id": get_correlation_id()},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return SendMessageResponse(
        message_id=result.message_id,
        response=result.response,
        warnings=result.warnings,
    )


@router.post("/messages/template")
async def send_template_message(
    body: TemplateMessageRequest,
    settings: Settings = Depends(get_settings),
    sender: WhatsAppSender = Depends(get_sender),
) -> SendMessageResponse:
    """Envia um template aprovado; retorna resposta da Meta e avisos de variáveis."""
    options = TemplateSendOptions(
        sender_phone_number_id=_require(
            body.sender_phone_number_id or settings.whatsapp_phone_number_id,
            "missing_phone_number_id",
        ),
        business_account_id=_require(
            body.business_account_id or settings.whatsapp_business_account_id,
            "missing_business_account_id",
        ),
        access_token=_require(settings.whatsapp_access_token, "missing_access_token"),
        to=body.to,
        template_name=body.template_name,
        language=body.language,
        variables=body.variables,
    )
    return await _send(sender, options)


@router.post("/messages")
async def send_raw_message(
    body: RawMessageRequest,
    settings: Settings = Depends(get_settings),
    sender: WhatsAppSender = Depends(get_sender),
) -> SendMessageResponse:
    """Envia um payload livre (text, image, interactive...)."""
    options = MessageSendOptions(
        sender_phone_number_id=_require(
            body.sender_phone_number_id or settings.whatsapp_phone_number_id,
            "missing_phone_number_id",
        ),
        access_token=_require(settings.whatsapp_access_token, "missing_access_token"),
        to=body.to,
        message_payload=body.message_payload,
    )
    return await _send(sender, options)
