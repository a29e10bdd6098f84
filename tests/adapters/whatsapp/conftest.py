"""Fixtures para testes do adapter WhatsApp."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.helpers.template_factory import make_template
from wa_messaging.adapters.whatsapp.phone_numbers import BusinessPhoneNumberResolver
from wa_messaging.adapters.whatsapp.sender import WhatsAppSender
from wa_messaging.infra.stores.memory_store import InMemoryMessageStore


@pytest.fixture()
def memory_store() -> InMemoryMessageStore:
    return InMemoryMessageStore()


@pytest.fixture()
def template_lookup() -> AsyncMock:
    lookup = AsyncMock()
    lookup.fetch = AsyncMock(
        return_value=make_template(
            {"type": "HEADER", "format": "IMAGE"},
            {"type": "BODY", "text": "Hi {{1}}"},
            {"type": "BUTTON", "sub_type": "URL", "index": 0},
            name="promo",
            language="en_US",
        )
    )
    return lookup


@pytest.fixture()
def phone_resolver() -> MagicMock:
    resolver = MagicMock(spec=BusinessPhoneNumberResolver)
    resolver.resolve = AsyncMock(return_value="+1 555 000 1111")
    return resolver


@pytest.fixture()
def sender(
    mock_graph_client: MagicMock,
    template_lookup: AsyncMock,
    phone_resolver: MagicMock,
    memory_store: InMemoryMessageStore,
) -> WhatsAppSender:
    return WhatsAppSender(
        http_client=mock_graph_client,
        template_lookup=template_lookup,
        phone_resolver=phone_resolver,
        api_endpoint="https://graph.test/v22.0",
        default_language="en_US",
        store=memory_store,
    )
