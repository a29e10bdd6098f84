"""Configurações centralizadas do wa_messaging.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única
- Constantes da Graph API Meta (GRAPH_API_VERSION, GRAPH_API_BASE_URL)

Uso típico:
    from wa_messaging.config import get_settings, GRAPH_API_VERSION
"""

from wa_messaging.config.settings import (
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "GRAPH_API_VERSION",
    "GRAPH_API_BASE_URL",
]
