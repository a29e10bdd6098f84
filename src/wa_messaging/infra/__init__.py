"""Camada de infraestrutura: adapters para serviços externos.

- HTTP: HttpClient, HttpClientConfig, HttpError
- Cache: InMemoryCache
- Stores: LogMessageStore, InMemoryMessageStore, FirestoreMessageStore,
  CompositeMessageStore, create_message_store

Infraestrutura não decide regra de negócio; logs estruturados sem PII.
"""

from wa_messaging.infra.cache import InMemoryCache
from wa_messaging.infra.http import (
    HttpClient,
    HttpClientConfig,
    HttpError,
    create_http_client,
)
from wa_messaging.infra.stores import (
    CompositeMessageStore,
    FirestoreMessageStore,
    InMemoryMessageStore,
    LogMessageStore,
    create_message_store,
)

__all__ = [
    # HTTP
    "HttpClient",
    "HttpClientConfig",
    "HttpError",
    "create_http_client",
    # Cache
    "InMemoryCache",
    # Stores
    "CompositeMessageStore",
    "FirestoreMessageStore",
    "InMemoryMessageStore",
    "LogMessageStore",
    "create_message_store",
]
