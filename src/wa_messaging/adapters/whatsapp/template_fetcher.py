"""Busca de templates aprovados na Graph API com cache injetado.

Responsabilidades:
- Consultar /{waba_id}/message_templates filtrando nome, idioma e APPROVED
- Converter o primeiro resultado em TemplateDef
- Expandir o grupo BUTTONS em componentes BUTTON indexados (apenas os
  que têm placeholder na URL precisam de parâmetro no envio)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from wa_messaging.domain.enums import ComponentKind
from wa_messaging.domain.protocols.template_lookup import (
    TemplateLookupError,
    TemplateNotFoundError,
)
from wa_messaging.domain.templates import TemplateComponentDef, TemplateDef
from wa_messaging.infra.http import HttpError
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.http_client import WhatsAppHttpClient
    from wa_messaging.domain.protocols.cache import KeyValueCache

logger: logging.Logger = get_logger(__name__)


def template_cache_key(business_account_id: str, template_name: str, language: str) -> str:
    return f"{business_account_id}::{template_name}::{language}"


def _expand_button_group(group: dict[str, Any]) -> list[TemplateComponentDef]:
    """Converte BUTTONS.buttons[] em BUTTON por índice (só URLs dinâmicas)."""
    expanded: list[TemplateComponentDef] = []
    for index, button in enumerate(group.get("buttons") or []):
        if not isinstance(button, dict):
            continue
        url = button.get("url")
        if isinstance(url, str) and "{{" in url:
            expanded.append(
                TemplateComponentDef(
                    kind=ComponentKind.BUTTON.value,
                    button_sub_type=str(button.get("type", "URL")),
                    button_index=index,
                )
            )
    return expanded


def parse_template_components(raw_components: Any) -> tuple[TemplateComponentDef, ...]:
    """Converte a lista `components` da Graph API em definições imutáveis."""
    if not isinstance(raw_components, list):
        return ()

    parsed: list[TemplateComponentDef] = []
    for raw in raw_components:
        if not isinstance(raw, dict) or "type" not in raw:
            continue
        if str(raw["type"]).upper() == ComponentKind.BUTTONS:
            parsed.extend(_expand_button_group(raw))
            continue
        parsed.append(TemplateComponentDef.model_validate(raw))
    return tuple(parsed)


class GraphTemplateFetcher:
    """Implementação de TemplateLookupProtocol sobre a Graph API.

    Sem cache injetado, toda chamada vai à API.
    """

    def __init__(
        self,
        http_client: WhatsAppHttpClient,
        api_endpoint: str,
        cache: KeyValueCache[TemplateDef] | None = None,
    ) -> None:
        self._http_client = http_client
        self._api_endpoint = api_endpoint.rstrip("/")
        self._cache = cache

    async def fetch(
        self,
        business_account_id: str,
        access_token: str,
        template_name: str,
        language: str,
    ) -> TemplateDef:
        """Retorna o template aprovado (cache primeiro).

        Raises:
            TemplateNotFoundError: Nenhum template aprovado para nome + idioma
            TemplateLookupError: Falha de transporte ou resposta inválida
        """
        key = template_cache_key(business_account_id, template_name, language)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("template_cache_hit", extra={"template_name": template_name})
                return cached

        template = await self._fetch_remote(
            business_account_id, access_token, template_name, language
        )
        if self._cache is not None:
            self._cache.put(key, template)
        return template

    async def _fetch_remote(
        self,
        business_account_id: str,
        access_token: str,
        template_name: str,
        language: str,
    ) -> TemplateDef:
        url = f"{self._api_endpoint}/{business_account_id}/message_templates"
        params = {"status": "APPROVED", "name": template_name, "language": language}

        try:
            data = await self._http_client.get_json(url, access_token, params=params)
        except HttpError as exc:
            logger.warning(
                "template_lookup_failed",
                extra={"template_name": template_name, "status_code": exc.status_code},
            )
            raise TemplateLookupError(
                f"Falha ao buscar template '{template_name}': {exc}"
            ) from exc

        matches = data.get("data")
        if not isinstance(matches, list) or not matches:
            logger.info(
                "template_not_found",
                extra={"template_name": template_name, "language": language},
            )
            raise TemplateNotFoundError(f"Template '{template_name}' not found.")

        first = matches[0]
        try:
            template = TemplateDef(
                name=first.get("name", template_name),
                language=first.get("language", language),
                components=parse_template_components(first.get("components")),
            )
        except (AttributeError, ValidationError) as exc:
            raise TemplateLookupError(
                f"Definição inválida para template '{template_name}'"
            ) from exc

        logger.info(
            "template_fetched",
            extra={
                "template_name": template.name,
                "language": template.language,
                "component_count": len(template.components),
            },
        )
        return template
