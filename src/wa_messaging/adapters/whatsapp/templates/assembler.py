"""Montagem do payload de template (extração → modo → normalização → componentes)."""

from __future__ import annotations

import logging
from typing import Any

from wa_messaging.adapters.whatsapp.templates.components import build_components
from wa_messaging.adapters.whatsapp.templates.keys import detect_mode, extract_keys
from wa_messaging.adapters.whatsapp.templates.normalizer import normalize_variables
from wa_messaging.domain.protocols.template_lookup import TemplateLookupProtocol
from wa_messaging.domain.templates import (
    CallerVariables,
    TemplateDef,
    TemplatePayloadResult,
    coerce_variables,
)
from wa_messaging.observability.logging import get_logger, mask_phone

logger: logging.Logger = get_logger(__name__)


def assemble_template_payload(
    template: TemplateDef,
    to: str,
    variables: CallerVariables | list[Any] | dict[str, Any],
) -> TemplatePayloadResult:
    """Monta o payload a partir de um template já resolvido (sem I/O).

    Avisos vêm apenas da normalização; nunca bloqueiam o payload.
    """
    if isinstance(variables, (list, dict)):
        variables = coerce_variables(variables)

    keys = extract_keys(template.components)
    mode = detect_mode(keys)
    normalized = normalize_variables(variables, mode, keys)
    components = build_components(template.components, normalized.variables, mode, keys)

    payload: dict[str, Any] = {
        "recipient_type": "individual",
        "to": to,
        "type": "template",
        "template": {
            "name": template.name,
            "language": {"code": template.language},
            "components": components,
        },
    }

    if normalized.warnings:
        logger.info(
            "template_variable_warnings",
            extra={
                "template_name": template.name,
                "to": mask_phone(to),
                "warning_count": len(normalized.warnings),
            },
        )

    return TemplatePayloadResult(payload=payload, warnings=list(normalized.warnings))


async def create_template_payload(
    lookup: TemplateLookupProtocol,
    *,
    business_account_id: str,
    access_token: str,
    to: str,
    template_name: str,
    language: str,
    variables: CallerVariables | list[Any] | dict[str, Any],
) -> TemplatePayloadResult:
    """Busca o template e monta o payload.

    Raises:
        TemplateLookupError: Falha na busca (TemplateNotFoundError se não aprovado)
    """
    template = await lookup.fetch(business_account_id, access_token, template_name, language)
    return assemble_template_payload(template, to, variables)
