from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from wa_messaging.adapters.whatsapp.http_client import WhatsAppHttpClient
from wa_messaging.api.app import create_app
from wa_messaging.config.settings import Settings, get_settings


@pytest.fixture()
def mock_graph_client() -> MagicMock:
    """WhatsAppHttpClient com send_message/get_json mockados."""
    client = MagicMock(spec=WhatsAppHttpClient)
    client.send_message = AsyncMock(return_value={"messages": [{"id": "wamid.OUT1"}]})
    client.get_json = AsyncMock(return_value={})
    client.close = AsyncMock()
    return client


@pytest.fixture()
def api_settings() -> Settings:
    return Settings(
        whatsapp_verify_token="test-token",
        whatsapp_access_token="test-access-token",
        whatsapp_business_account_id="waba-1",
        whatsapp_phone_number_id="pn-1",
        message_store_backends="memory",
    )


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, api_settings: Settings, mock_graph_client: MagicMock):
    monkeypatch.setenv("WHATSAPP_VERIFY_TOKEN", "test-token")
    get_settings.cache_clear()
    app = create_app(api_settings, http_client=mock_graph_client)
    with TestClient(app) as test_client:
        yield test_client
