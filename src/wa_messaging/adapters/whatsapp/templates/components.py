"""Montagem dos componentes de template no formato da API Meta.

Um componente de saída por componente da definição, na mesma ordem.
Valores ausentes viram string vazia; a montagem nunca falha.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, assert_never

from wa_messaging.adapters.whatsapp.templates.keys import PLACEHOLDER_PATTERN, is_numeric_key
from wa_messaging.adapters.whatsapp.templates.normalizer import resolve_positional_header
from wa_messaging.domain.enums import AddressingMode, ComponentKind, HeaderFormat
from wa_messaging.domain.templates import (
    CallerVariables,
    PositionalVariables,
    StructuredVariables,
    TemplateComponentDef,
)

_MEDIA_LINK_PATTERN = re.compile(r"^https?://")


@dataclass(frozen=True, slots=True)
class _ResolvedValues:
    """Valores já fatiados por destino (header, body, botões)."""

    header: str | None
    positional: tuple[str, ...]
    body: tuple[str, ...]
    buttons: tuple[str, ...]
    named_body: Mapping[str, str]
    is_positional: bool


def _read_by_key(values: Sequence[str], key: str) -> str:
    """Lê um valor posicional por chave (só chaves numéricas apontam índices)."""
    if is_numeric_key(key) and int(key) < len(values):
        return values[int(key)]
    return ""


def _numeric_entries(body: Mapping[str, str]) -> tuple[str, ...]:
    numeric_keys = sorted((k for k in body if is_numeric_key(k)), key=int)
    return tuple(body[k] for k in numeric_keys)


def _has_media_header(components: Sequence[TemplateComponentDef]) -> bool:
    return any(
        c.kind == ComponentKind.HEADER and c.format is not None and c.format != HeaderFormat.TEXT
        for c in components
    )


def _resolve_positional(
    variables: PositionalVariables,
    mode: AddressingMode,
    keys: Sequence[str],
    media_header: bool,
) -> _ResolvedValues:
    values = variables.values
    has_header = resolve_positional_header(variables, mode, len(keys))
    if has_header is None:
        # NAMED/NONE: o slot 0 é o header quando o template tem header de mídia
        has_header = media_header
    header = values[0] if has_header and values else None
    offset = 1 if header is not None else 0

    if mode == AddressingMode.NAMED:
        body = tuple(_read_by_key(values, key) for key in keys)
    else:
        body = values[offset : offset + len(keys)]

    return _ResolvedValues(
        header=header,
        positional=values,
        body=body,
        buttons=values[offset + len(body) :],
        named_body={},
        is_positional=True,
    )


def _resolve_structured(
    variables: StructuredVariables,
    mode: AddressingMode,
    keys: Sequence[str],
) -> _ResolvedValues:
    named_body = variables.body or {}
    positional = _numeric_entries(named_body) if mode == AddressingMode.NUMERIC else ()

    if variables.body is not None:
        body = tuple(named_body.get(key, "") for key in keys)
    elif mode == AddressingMode.NAMED:
        body = tuple("" for _ in keys)
    else:
        body = positional[: len(keys)]

    # O header estruturado não ocupa posição no array numérico
    buttons = variables.buttons
    if buttons is None:
        buttons = positional[len(body) :]

    return _ResolvedValues(
        header=variables.header,
        positional=positional,
        body=body,
        buttons=buttons,
        named_body=named_body,
        is_positional=False,
    )


def _resolve_values(
    components: Sequence[TemplateComponentDef],
    variables: CallerVariables,
    mode: AddressingMode,
    keys: Sequence[str],
) -> _ResolvedValues:
    match variables:
        case PositionalVariables():
            return _resolve_positional(variables, mode, keys, _has_media_header(components))
        case StructuredVariables():
            return _resolve_structured(variables, mode, keys)
        case _:
            assert_never(variables)


def _text_param(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def _named_params(keys: Sequence[str], named_body: Mapping[str, str]) -> list[dict[str, Any]]:
    return [
        {"type": "text", "parameter_name": key, "text": named_body.get(key, "")}
        for key in keys
    ]


def _build_media_header(media_format: str, value: str) -> dict[str, Any]:
    media_type = media_format.lower()
    reference = {"link": value} if _MEDIA_LINK_PATTERN.match(value) else {"id": value}
    return {"type": "header", "parameters": [{"type": media_type, media_type: reference}]}


def _build_header(
    component: TemplateComponentDef,
    resolved: _ResolvedValues,
    mode: AddressingMode,
    keys: Sequence[str],
) -> dict[str, Any]:
    if component.format and component.format != HeaderFormat.TEXT and resolved.header:
        return _build_media_header(component.format, resolved.header)

    if component.text and PLACEHOLDER_PATTERN.search(component.text):
        if mode == AddressingMode.NAMED:
            return {"type": "header", "parameters": _named_params(keys, resolved.named_body)}
        values = resolved.positional if resolved.is_positional else resolved.body
        return {"type": "header", "parameters": [_text_param(v) for v in values]}

    return {"type": "header"}


def _build_body(
    resolved: _ResolvedValues,
    mode: AddressingMode,
    keys: Sequence[str],
) -> dict[str, Any]:
    if mode == AddressingMode.NAMED:
        return {"type": "body", "parameters": _named_params(keys, resolved.named_body)}
    return {"type": "body", "parameters": [_text_param(v) for v in resolved.body]}


def _build_button(component: TemplateComponentDef, resolved: _ResolvedValues) -> dict[str, Any]:
    index = component.button_index if component.button_index is not None else 0
    text = resolved.buttons[index] if 0 <= index < len(resolved.buttons) else ""

    button: dict[str, Any] = {"type": "button"}
    if component.button_sub_type:
        button["sub_type"] = component.button_sub_type.lower()
    button["index"] = index
    button["parameters"] = [_text_param(text)]
    return button


def build_components(
    components: Sequence[TemplateComponentDef],
    variables: CallerVariables,
    mode: AddressingMode,
    keys: Sequence[str],
) -> list[dict[str, Any]]:
    """Mapeia definição + variáveis normalizadas na lista de componentes da API."""
    resolved = _resolve_values(components, variables, mode, keys)
    built: list[dict[str, Any]] = []

    for component in components:
        if component.kind == ComponentKind.HEADER:
            built.append(_build_header(component, resolved, mode, keys))
        elif component.kind == ComponentKind.BODY:
            built.append(_build_body(resolved, mode, keys))
        elif component.kind == ComponentKind.BUTTON:
            built.append(_build_button(component, resolved))
        else:
            built.append({"type": component.kind.lower()})

    return built
