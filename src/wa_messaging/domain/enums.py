"""Enums de domínio para templates e mensagens Meta/WhatsApp."""

from __future__ import annotations

from enum import StrEnum


class AddressingMode(StrEnum):
    """Forma de endereçamento dos placeholders de um template.

    NONE só ocorre quando o BODY não tem nenhum placeholder.
    """

    NUMERIC = "numeric"
    NAMED = "named"
    NONE = "none"


class ComponentKind(StrEnum):
    """Tipos de componente de template conforme Meta."""

    HEADER = "HEADER"
    BODY = "BODY"
    FOOTER = "FOOTER"
    BUTTON = "BUTTON"
    BUTTONS = "BUTTONS"  # Grupo retornado pela Graph API na definição


class HeaderFormat(StrEnum):
    """Formatos de header de template."""

    TEXT = "TEXT"
    IMAGE = "IMAGE"
    DOCUMENT = "DOCUMENT"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    LOCATION = "LOCATION"


class MessageDirection(StrEnum):
    """Direção de uma mensagem persistida."""

    INBOUND = "in"
    OUTBOUND = "out"
