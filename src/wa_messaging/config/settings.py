"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou arquivo .env em dev).
Nunca hardcode secrets ou valores sensíveis.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# -----------------------------------------------------------------------------
# Constantes da Graph API Meta/WhatsApp
# Referência: https://developers.facebook.com/docs/graph-api/changelog
# -----------------------------------------------------------------------------
GRAPH_API_VERSION: str = "v22.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"

VALID_MESSAGE_STORE_BACKENDS = frozenset({"log", "memory", "firestore"})


class Settings(BaseSettings):
    """Configurações lidas do ambiente.

    Comentários em PT-BR são obrigatórios por diretriz do projeto.
    """

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "wa_messaging"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # WhatsApp / Meta API
    whatsapp_verify_token: str | None = None  # Para verificação de webhook
    whatsapp_access_token: str | None = None  # Bearer token padrão
    whatsapp_business_account_id: str | None = None  # WABA dona dos templates
    whatsapp_phone_number_id: str | None = None  # Número remetente padrão
    whatsapp_api_version: str = GRAPH_API_VERSION
    whatsapp_api_base_url: str = GRAPH_API_BASE_URL
    whatsapp_request_timeout_seconds: int = 30
    whatsapp_default_language: str = "en"  # Idioma quando o caller não informa

    # Caches (0 = sem expiração)
    template_cache_ttl_seconds: int = 0
    phone_number_cache_ttl_seconds: int = 0

    # Persistência de mensagens
    message_store_backends: str = "log"  # lista separada por vírgula: log,memory,firestore
    firestore_project_id: str | None = None
    firestore_database_id: str = "(default)"
    messages_collection: str = "whatsapp_messages"
    message_statuses_collection: str = "whatsapp_message_statuses"

    @property
    def whatsapp_api_endpoint(self) -> str:
        """Retorna a URL base completa da API WhatsApp (base + versão)."""
        return f"{self.whatsapp_api_base_url}/{self.whatsapp_api_version}"

    @property
    def message_store_backend_list(self) -> list[str]:
        """Backends de store normalizados, na ordem configurada."""
        return [
            item.strip().lower()
            for item in self.message_store_backends.split(",")
            if item.strip()
        ]

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")

    def get_messages_endpoint(self, phone_number_id: str | None = None) -> str:
        """Retorna URL completa para envio de mensagens.

        Formato: https://graph.facebook.com/v22.0/{phone_number_id}/messages
        """
        pid = phone_number_id or self.whatsapp_phone_number_id
        if not pid:
            raise ValueError("phone_number_id é obrigatório")
        return f"{self.whatsapp_api_endpoint}/{pid}/messages"

    def validate_whatsapp_config(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp fora de development.

        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        if self.is_development:
            return errors
        if not self.whatsapp_access_token:
            errors.append("WHATSAPP_ACCESS_TOKEN não configurado")
        if not self.whatsapp_verify_token:
            errors.append("WHATSAPP_VERIFY_TOKEN não configurado")
        return errors

    def validate_message_store_config(self) -> list[str]:
        """Valida backends de persistência de mensagens."""
        errors: list[str] = []
        backends = self.message_store_backend_list

        if not backends:
            errors.append("MESSAGE_STORE_BACKENDS vazio: use log | memory | firestore")

        invalid = [b for b in backends if b not in VALID_MESSAGE_STORE_BACKENDS]
        if invalid:
            errors.append(
                f"MESSAGE_STORE_BACKENDS inválido: {invalid}. "
                f"Valores válidos: {sorted(VALID_MESSAGE_STORE_BACKENDS)}"
            )

        if "memory" in backends and (self.is_staging or self.is_production):
            errors.append("MESSAGE_STORE_BACKENDS=memory é proibido em staging/production")

        if self.template_cache_ttl_seconds < 0 or self.phone_number_cache_ttl_seconds < 0:
            errors.append("TTL de cache não pode ser negativo")

        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
