"""Re-exports dos contratos de domínio para uso por adapters e infra."""

from __future__ import annotations

from wa_messaging.domain.protocols.cache import KeyValueCache
from wa_messaging.domain.protocols.message_store import (
    MessageStore,
    MessageStoreError,
    StatusMessageStore,
)
from wa_messaging.domain.protocols.template_lookup import (
    TemplateLookupError,
    TemplateLookupProtocol,
    TemplateNotFoundError,
)

__all__ = [
    "KeyValueCache",
    "MessageStore",
    "MessageStoreError",
    "StatusMessageStore",
    "TemplateLookupError",
    "TemplateLookupProtocol",
    "TemplateNotFoundError",
]
