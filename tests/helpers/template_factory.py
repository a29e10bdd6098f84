"""Construção de TemplateDef para testes a partir de JSON da Graph API."""

from __future__ import annotations

from typing import Any

from wa_messaging.domain.templates import TemplateComponentDef, TemplateDef


def make_template(
    *components: dict[str, Any],
    name: str = "order_update",
    language: str = "en",
) -> TemplateDef:
    return TemplateDef(
        name=name,
        language=language,
        components=tuple(TemplateComponentDef.model_validate(c) for c in components),
    )
