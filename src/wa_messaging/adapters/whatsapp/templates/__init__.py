"""Motor de templates WhatsApp: variáveis do caller → componentes da API.

Fluxo: extract_keys → detect_mode → normalize_variables → build_components,
orquestrado por assemble_template_payload / create_template_payload.
"""

from wa_messaging.adapters.whatsapp.templates.assembler import (
    assemble_template_payload,
    create_template_payload,
)
from wa_messaging.adapters.whatsapp.templates.components import build_components
from wa_messaging.adapters.whatsapp.templates.keys import detect_mode, extract_keys
from wa_messaging.adapters.whatsapp.templates.normalizer import normalize_variables
from wa_messaging.adapters.whatsapp.templates.text import (
    sanitize_template_text,
    validate_template_text,
)

__all__ = [
    "assemble_template_payload",
    "create_template_payload",
    "build_components",
    "detect_mode",
    "extract_keys",
    "normalize_variables",
    "sanitize_template_text",
    "validate_template_text",
]
