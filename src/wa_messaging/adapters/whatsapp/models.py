"""Modelos de payload para WhatsApp (webhook inbound e envio outbound).

Responsabilidade:
- Estruturar payloads do webhook da Meta (mensagens e status)
- Estruturar opções de envio (template ou payload livre)
- Nunca carregar access token em modelos que são persistidos
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WebhookText(BaseModel):
    body: str


class WebhookMedia(BaseModel):
    """Bloco de mídia inbound (image, document, video, audio)."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    mime_type: str | None = None
    sha256: str | None = None
    filename: str | None = None  # Apenas document


class WebhookMessage(BaseModel):
    """Mensagem recebida pelo webhook.

    `from` é palavra reservada em Python; usa alias.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    from_number: str = Field(alias="from")
    to: str | None = None
    timestamp: int
    type: str | None = None
    text: WebhookText | None = None
    image: WebhookMedia | None = None
    document: WebhookMedia | None = None
    video: WebhookMedia | None = None
    audio: WebhookMedia | None = None


class WebhookStatus(BaseModel):
    """Atualização de status de uma mensagem enviada (sent, delivered, read...)."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str
    timestamp: int
    recipient_id: str | None = None


class WebhookMetadata(BaseModel):
    phone_number_id: str
    display_phone_number: str | None = None


class WebhookChangeValue(BaseModel):
    model_config = ConfigDict(extra="allow")

    messaging_product: str = "whatsapp"
    metadata: WebhookMetadata
    messages: list[WebhookMessage] = Field(default_factory=list)
    statuses: list[WebhookStatus] = Field(default_factory=list)


class WebhookChange(BaseModel):
    field: str = "messages"
    value: WebhookChangeValue


class WebhookEntry(BaseModel):
    id: str
    changes: list[WebhookChange] = Field(default_factory=list)


class WebhookPayload(BaseModel):
    """Payload completo enviado pela Meta ao webhook."""

    object: str = "whatsapp_business_account"
    entry: list[WebhookEntry] = Field(default_factory=list)


class TemplateSendOptions(BaseModel):
    """Requisição de envio de template.

    `variables` aceita lista posicional ou objeto {header, body, buttons}.
    """

    sender_phone_number_id: str
    business_account_id: str
    access_token: str
    to: str  # Telefone E.164
    template_name: str
    language: str | None = None  # None = idioma padrão das settings
    variables: list[Any] | dict[str, Any] = Field(default_factory=list)


class MessageSendOptions(BaseModel):
    """Requisição de envio com payload livre (text, image, interactive...)."""

    sender_phone_number_id: str
    access_token: str
    to: str
    message_payload: dict[str, Any]


class OutgoingMessage(BaseModel):
    """Dados de uma mensagem enviada, entregues ao store (sem token)."""

    sender_phone_number_id: str
    sender_phone_number: str | None = None
    to: str
    message_payload: dict[str, Any]


class SendResult(BaseModel):
    """Resposta do provedor + avisos de variáveis (apenas templates)."""

    response: dict[str, Any]
    warnings: list[str] = Field(default_factory=list)

    @property
    def message_id(self) -> str | None:
        messages = self.response.get("messages") or []
        if messages and isinstance(messages[0], dict):
            return messages[0].get("id")
        return None
