"""Testes para handle_webhook e modelos do payload Meta."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.helpers.webhook_factory import webhook_body
from wa_messaging.adapters.whatsapp.models import WebhookPayload
from wa_messaging.adapters.whatsapp.webhook import handle_webhook
from wa_messaging.domain.enums import MessageDirection
from wa_messaging.domain.protocols.message_store import MessageStore
from wa_messaging.infra.stores.memory_store import InMemoryMessageStore

TEXT_MESSAGE = {
    "id": "wamid.IN1",
    "from": "5511988887777",
    "timestamp": "1700000000",
    "type": "text",
    "text": {"body": "Olá"},
}
IMAGE_MESSAGE = {
    "id": "wamid.IN2",
    "from": "5511988887777",
    "timestamp": "1700000100",
    "type": "image",
    "image": {"id": "media-1", "mime_type": "image/jpeg"},
}
STATUS = {
    "id": "wamid.OUT1",
    "status": "delivered",
    "timestamp": "1700000200",
    "recipient_id": "5511988887777",
}


def _payload(*changes: dict, entries: int = 1) -> WebhookPayload:
    return WebhookPayload.model_validate(
        {
            "object": "whatsapp_business_account",
            "entry": [{"id": f"waba-{i}", "changes": list(changes)} for i in range(entries)],
        }
    )


class TestWebhookModels:
    def test_from_alias_and_timestamp_coercion(self) -> None:
        payload = _payload(webhook_body(messages=[TEXT_MESSAGE]))

        message = payload.entry[0].changes[0].value.messages[0]
        assert message.from_number == "5511988887777"
        assert message.timestamp == 1700000000
        assert message.text is not None
        assert message.text.body == "Olá"

    def test_missing_lists_default_empty(self) -> None:
        payload = _payload(webhook_body())

        value = payload.entry[0].changes[0].value
        assert value.messages == []
        assert value.statuses == []


class TestHandleWebhook:
    @pytest.mark.asyncio
    async def test_saves_messages_under_phone_number_id(self) -> None:
        store = InMemoryMessageStore()

        summary = await handle_webhook(
            _payload(webhook_body(messages=[TEXT_MESSAGE, IMAGE_MESSAGE], phone_number_id="pn-9")),
            store,
        )

        assert summary.messages == 2
        records = store.by_direction(MessageDirection.INBOUND)
        assert [r.message_id for r in records] == ["wamid.IN1", "wamid.IN2"]
        assert {r.account_id for r in records} == {"pn-9"}
        assert records[0].content == "Olá"
        assert '"media-1"' in records[1].content

    @pytest.mark.asyncio
    async def test_every_change_is_processed(self) -> None:
        store = InMemoryMessageStore()
        payload = _payload(
            webhook_body(messages=[TEXT_MESSAGE], phone_number_id="pn-1"),
            webhook_body(statuses=[STATUS], phone_number_id="pn-2"),
            entries=2,
        )

        summary = await handle_webhook(payload, store)

        assert summary.messages == 2
        assert summary.statuses == 2
        assert {s.account_id for s in store.statuses} == {"pn-2"}
        assert store.statuses[0].status == "delivered"

    @pytest.mark.asyncio
    async def test_statuses_skipped_for_store_without_status_support(self) -> None:
        store = MagicMock(spec=MessageStore)
        store.save_incoming = AsyncMock()

        summary = await handle_webhook(
            _payload(webhook_body(messages=[TEXT_MESSAGE], statuses=[STATUS])), store
        )

        store.save_incoming.assert_awaited_once()
        assert summary.statuses == 0
        assert summary.statuses_skipped == 1

    @pytest.mark.asyncio
    async def test_no_store_is_noop(self) -> None:
        summary = await handle_webhook(_payload(webhook_body(messages=[TEXT_MESSAGE])), None)

        assert summary.messages == 0

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self) -> None:
        store = InMemoryMessageStore()
        store.save_incoming = AsyncMock(side_effect=RuntimeError("boom"))  # type: ignore[method-assign]

        with pytest.raises(RuntimeError):
            await handle_webhook(_payload(webhook_body(messages=[TEXT_MESSAGE])), store)
