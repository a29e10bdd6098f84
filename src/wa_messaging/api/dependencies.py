"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from wa_messaging.adapters.whatsapp.sender import WhatsAppSender
from wa_messaging.config.settings import Settings
from wa_messaging.domain.protocols.message_store import MessageStore


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_message_store(request: Request) -> MessageStore:
    """Retorna o store de mensagens ativo."""

    return request.app.state.message_store


def get_sender(request: Request) -> WhatsAppSender:
    """Retorna o sender WhatsApp configurado."""

    return request.app.state.sender
