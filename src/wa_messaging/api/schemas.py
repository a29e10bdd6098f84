"""Contratos HTTP dos endpoints de envio.

Ids de remetente e WABA são opcionais: ausentes, valem os das settings.
O access token nunca vem do corpo da requisição.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class TemplateMessageRequest(BaseModel):
    to: str = Field(min_length=1)
    template_name: str = Field(min_length=1)
    language: str | None = None
    variables: list[Any] | dict[str, Any] = Field(default_factory=list)
    sender_phone_number_id: str | None = None
    business_account_id: str | None = None


class RawMessageRequest(BaseModel):
    to: str = Field(min_length=1)
    message_payload: dict[str, Any]
    sender_phone_number_id: str | None = None


class SendMessageResponse(BaseModel):
    message_id: str | None = None
    response: dict[str, Any]
    warnings: list[str] = Field(default_factory=list)
