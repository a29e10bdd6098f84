"""Limpeza e validação de textos de variáveis de template.

Regras da WhatsApp Business API para parâmetros de texto:
- sem quebras de linha nem caracteres de controle
- sem sequências longas de espaços
- chaves simples {x} confundem o parser de placeholders da Meta
"""

from __future__ import annotations

import re

MAX_TEMPLATE_TEXT_LENGTH = 1024

_LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")
_CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
_MULTI_SPACE_PATTERN = re.compile(r"\s{2,}")
# {x} isolado; ignora pares já duplicados ({{x}})
_SINGLE_BRACE_PATTERN = re.compile(r"(?<!\{)\{([^{}]+)\}(?!\})")
_EMOJI_PATTERN = re.compile(
    "["
    "\U0001f000-\U0001faff"  # símbolos, pictogramas, emoticons, bandeiras
    "\u2600-\u27bf"  # símbolos diversos e dingbats
    "\u231a\u231b\u23e9-\u23f3\u23f8-\u23fa"
    "\u2b05-\u2b07\u2b1b\u2b1c\u2b50\u2b55"
    "\u3030\u303d\u3297\u3299"
    "\ufe0f"  # variation selector de apresentação emoji
    "]"
)

NEWLINE_WARNING = "Template text contained newline characters which have been stripped."
EMOJI_WARNING = "Text contains emoji characters which may be disallowed."
UNBALANCED_BRACES_WARNING = "Detected unbalanced placeholder braces."


def sanitize_template_text(text: str) -> str:
    """Limpa um valor de variável para envio seguro (idempotente).

    CR e LF são caracteres de controle: saem junto com os demais, sem virar
    espaço (as linhas ficam coladas).
    """
    cleaned = _CONTROL_CHARS_PATTERN.sub("", text)
    cleaned = _MULTI_SPACE_PATTERN.sub(" ", cleaned).strip()
    return _SINGLE_BRACE_PATTERN.sub(r"{{\1}}", cleaned)


def validate_template_text(text: str) -> list[str]:
    """Retorna avisos sobre o texto bruto; nunca levanta nem altera a entrada."""
    warnings: list[str] = []
    if _LINE_BREAK_PATTERN.search(text):
        warnings.append(NEWLINE_WARNING)
    if len(text) > MAX_TEMPLATE_TEXT_LENGTH:
        warnings.append(
            f"Template text exceeds {MAX_TEMPLATE_TEXT_LENGTH} characters ({len(text)})."
        )
    if _EMOJI_PATTERN.search(text):
        warnings.append(EMOJI_WARNING)
    if text.count("{{") != text.count("}}"):
        warnings.append(UNBALANCED_BRACES_WARNING)
    return warnings
