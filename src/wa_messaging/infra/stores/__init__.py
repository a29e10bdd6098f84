"""Stores de mensagens WhatsApp (log, memória, Firestore, composto)."""

from wa_messaging.infra.stores.composite_store import CompositeMessageStore
from wa_messaging.infra.stores.factory import create_message_store
from wa_messaging.infra.stores.firestore_store import FirestoreMessageStore
from wa_messaging.infra.stores.log_store import LogMessageStore
from wa_messaging.infra.stores.memory_store import InMemoryMessageStore

__all__ = [
    "CompositeMessageStore",
    "FirestoreMessageStore",
    "InMemoryMessageStore",
    "LogMessageStore",
    "create_message_store",
]
