"""Extração de placeholders do BODY e detecção do modo de endereçamento."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from wa_messaging.domain.enums import AddressingMode
from wa_messaging.domain.templates import TemplateComponentDef

# {{1}}, {{customer_name}}: apenas caracteres de palavra ASCII
PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}", re.ASCII)
_NUMERIC_KEY_PATTERN = re.compile(r"[0-9]+")


def extract_keys(components: Iterable[TemplateComponentDef]) -> list[str]:
    """Retorna os placeholders distintos do BODY, na ordem da primeira ocorrência.

    Sem BODY com texto (ou sem placeholders) retorna lista vazia.
    """
    body = next((c for c in components if c.is_body_with_text), None)
    if body is None:
        return []
    found = (m.group(1) for m in PLACEHOLDER_PATTERN.finditer(body.text or ""))
    return list(dict.fromkeys(found))


def is_numeric_key(key: str) -> bool:
    return _NUMERIC_KEY_PATTERN.fullmatch(key) is not None


def detect_mode(keys: Sequence[str]) -> AddressingMode:
    """NUMERIC só se todas as chaves forem numéricas; mistura vira NAMED."""
    if not keys:
        return AddressingMode.NONE
    if all(is_numeric_key(k) for k in keys):
        return AddressingMode.NUMERIC
    return AddressingMode.NAMED
