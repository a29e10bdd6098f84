"""Contrato de busca de definições de template aprovadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from wa_messaging.domain.templates import TemplateDef


class TemplateLookupError(Exception):
    """Falha ao obter a definição do template (fatal para a montagem)."""


class TemplateNotFoundError(TemplateLookupError):
    """Nenhum template aprovado corresponde a nome + idioma."""


class TemplateLookupProtocol(Protocol):
    """Busca (possivelmente com cache) de um TemplateDef aprovado."""

    async def fetch(
        self,
        business_account_id: str,
        access_token: str,
        template_name: str,
        language: str,
    ) -> TemplateDef:
        """Retorna o template ou levanta TemplateLookupError/TemplateNotFoundError."""
        ...
