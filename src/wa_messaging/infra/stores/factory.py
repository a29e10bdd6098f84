"""Factory de MessageStore a partir das settings.

Responsabilidades:
- Criar um store por backend configurado (log, memory, firestore)
- Validar clientes obrigatórios
- Combinar vários backends em CompositeMessageStore
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wa_messaging.infra.stores.composite_store import CompositeMessageStore
from wa_messaging.infra.stores.firestore_store import FirestoreMessageStore
from wa_messaging.infra.stores.log_store import LogMessageStore
from wa_messaging.infra.stores.memory_store import InMemoryMessageStore
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.config.settings import Settings
    from wa_messaging.domain.protocols.message_store import MessageStore

logger: logging.Logger = get_logger(__name__)


def _create_firestore_client(settings: Settings) -> Any:
    from google.cloud import firestore

    return firestore.Client(
        project=settings.firestore_project_id,
        database=settings.firestore_database_id,
    )


def _create_backend(backend: str, settings: Settings, firestore_client: Any | None) -> MessageStore:
    if backend == "log":
        logger.info("Using log message store")
        return LogMessageStore()

    if backend == "memory":
        logger.warning("Using in-memory message store (dev only)")
        return InMemoryMessageStore()

    if backend == "firestore":
        logger.info(
            "Using Firestore message store",
            extra={"collection": settings.messages_collection},
        )
        return FirestoreMessageStore(
            firestore_client or _create_firestore_client(settings),
            messages_collection=settings.messages_collection,
            statuses_collection=settings.message_statuses_collection,
        )

    msg = f"Invalid message store backend: {backend}"
    raise ValueError(msg)


def create_message_store(
    settings: Settings,
    firestore_client: Any | None = None,
) -> MessageStore:
    """Cria o store configurado em MESSAGE_STORE_BACKENDS.

    Um backend retorna o store direto; mais de um retorna CompositeMessageStore
    na ordem configurada.

    Raises:
        ValueError: Lista vazia ou backend inválido
    """
    backends = list(dict.fromkeys(settings.message_store_backend_list))
    if not backends:
        msg = "MESSAGE_STORE_BACKENDS vazio"
        raise ValueError(msg)

    stores = [_create_backend(b, settings, firestore_client) for b in backends]
    if len(stores) == 1:
        return stores[0]
    return CompositeMessageStore(stores)
