"""Normalização das variáveis do caller contra o modo e as chaves do template.

Só valores que vão para o BODY são validados e limpos; header (URL/media id)
e botões seguem crus.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import assert_never

from wa_messaging.adapters.whatsapp.templates.text import (
    sanitize_template_text,
    validate_template_text,
)
from wa_messaging.domain.enums import AddressingMode
from wa_messaging.domain.templates import (
    CallerVariables,
    NormalizationResult,
    PositionalVariables,
    StructuredVariables,
    TemplateWarning,
)
from wa_messaging.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


def positional_has_header(mode: AddressingMode, value_count: int, body_count: int) -> bool:
    """Heurística do header posicional.

    Só em modo NUMERIC e só quando há mais valores do que placeholders de BODY.
    Ambiguidade conhecida: body_count + 1 valores sem header pretendido
    (ex.: um botão extra) são lidos como header.
    """
    return mode == AddressingMode.NUMERIC and value_count > body_count


def resolve_positional_header(
    variables: PositionalVariables,
    mode: AddressingMode,
    body_count: int,
) -> bool | None:
    """Decide se o primeiro valor posicional é header.

    Decisão explícita do caller vence. Sem ela, só o modo NUMERIC aplica a
    heurística de comprimento; NAMED/NONE ficam indecisos (None) e o slot 0
    não é consumido como header na normalização.
    """
    if variables.has_header is not None:
        return variables.has_header
    if mode == AddressingMode.NUMERIC:
        return positional_has_header(mode, len(variables.values), body_count)
    return None


def _clean_value(
    raw: str,
    locator: str,
    positional: bool,
    warnings: list[TemplateWarning],
) -> str:
    for message in validate_template_text(raw):
        warnings.append(TemplateWarning(locator=locator, message=message, positional=positional))
    return sanitize_template_text(raw)


def _normalize_positional(
    variables: PositionalVariables,
    mode: AddressingMode,
    keys: Sequence[str],
) -> NormalizationResult:
    values = variables.values
    body_count = len(keys)
    has_header = resolve_positional_header(variables, mode, body_count)
    offset = 1 if has_header else 0

    if has_header:
        logger.debug(
            "positional_header_assumed",
            extra={"value_count": len(values), "body_count": body_count},
        )

    warnings: list[TemplateWarning] = []
    body_clean = tuple(
        _clean_value(raw, str(position), True, warnings)
        for position, raw in enumerate(values[offset : offset + body_count], start=1)
    )

    normalized = PositionalVariables(
        values=values[:offset] + body_clean + values[offset + body_count :],
        has_header=has_header,
    )
    return NormalizationResult(variables=normalized, warnings=warnings)


def _normalize_structured(
    variables: StructuredVariables,
    keys: Sequence[str],
) -> NormalizationResult:
    raw_body = variables.body or {}
    warnings: list[TemplateWarning] = []
    clean_body = {key: _clean_value(raw_body.get(key, ""), key, False, warnings) for key in keys}

    normalized = StructuredVariables(
        header=variables.header,
        body=clean_body,
        buttons=variables.buttons,
    )
    return NormalizationResult(variables=normalized, warnings=warnings)


def normalize_variables(
    variables: CallerVariables,
    mode: AddressingMode,
    keys: Sequence[str],
) -> NormalizationResult:
    """Reconcilia a entrada do caller com o template.

    Posicional: [header?] + body (len(keys) itens, limpos) + botões.
    Estruturada: body[key] para cada chave do template (ausente = ""),
    chaves desconhecidas descartadas.
    """
    match variables:
        case PositionalVariables():
            return _normalize_positional(variables, mode, keys)
        case StructuredVariables():
            return _normalize_structured(variables, keys)
        case _:
            assert_never(variables)
