"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from wa_messaging.adapters.whatsapp.http_client import (
    WhatsAppHttpClient,
    create_whatsapp_http_client,
)
from wa_messaging.adapters.whatsapp.phone_numbers import BusinessPhoneNumberResolver
from wa_messaging.adapters.whatsapp.sender import WhatsAppSender
from wa_messaging.adapters.whatsapp.template_fetcher import GraphTemplateFetcher
from wa_messaging.api.routes import router
from wa_messaging.config.settings import Settings, get_settings
from wa_messaging.domain.templates import TemplateDef
from wa_messaging.infra.cache import InMemoryCache
from wa_messaging.infra.stores import create_message_store
from wa_messaging.observability.logging import configure_logging, get_logger
from wa_messaging.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


def _create_sender(
    settings: Settings,
    http_client: WhatsAppHttpClient,
    store: Any,
) -> WhatsAppSender:
    """Monta sender com caches por instância de app."""
    endpoint = settings.whatsapp_api_endpoint
    template_cache: InMemoryCache[TemplateDef] = InMemoryCache(
        settings.template_cache_ttl_seconds
    )
    phone_cache: InMemoryCache[str] = InMemoryCache(settings.phone_number_cache_ttl_seconds)

    return WhatsAppSender(
        http_client=http_client,
        template_lookup=GraphTemplateFetcher(http_client, endpoint, cache=template_cache),
        phone_resolver=BusinessPhoneNumberResolver(http_client, endpoint, cache=phone_cache),
        api_endpoint=endpoint,
        default_language=settings.whatsapp_default_language,
        store=store,
    )


def create_app(
    settings: Settings | None = None,
    *,
    firestore_client: Any | None = None,
    http_client: WhatsAppHttpClient | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI.

    Raises:
        ValueError: Configuração inválida (WhatsApp ou stores)
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_whatsapp_config())
    validation_errors.extend(settings.validate_message_store_config())

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    http_client = http_client or create_whatsapp_http_client(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await http_client.close()

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    app.state.settings = settings
    app.state.message_store = create_message_store(settings, firestore_client=firestore_client)
    app.state.http_client = http_client
    app.state.sender = _create_sender(settings, http_client, app.state.message_store)

    logger.info(
        "app_created",
        extra={
            "environment": settings.environment,
            "message_store_backends": settings.message_store_backend_list,
        },
    )
    return app


app = create_app()
