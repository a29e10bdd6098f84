"""Testes para GraphTemplateFetcher (busca + cache injetado)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from wa_messaging.adapters.whatsapp.http_client import WhatsAppHttpClient
from wa_messaging.adapters.whatsapp.template_fetcher import (
    GraphTemplateFetcher,
    parse_template_components,
    template_cache_key,
)
from wa_messaging.domain.protocols.template_lookup import (
    TemplateLookupError,
    TemplateNotFoundError,
)
from wa_messaging.infra.cache import InMemoryCache
from wa_messaging.infra.http import HttpError

GRAPH_TEMPLATE = {
    "name": "promo",
    "language": "pt_BR",
    "status": "APPROVED",
    "components": [
        {"type": "HEADER", "format": "IMAGE", "example": {"header_handle": ["x"]}},
        {"type": "BODY", "text": "Oi {{1}}"},
        {"type": "FOOTER", "text": "Sair: STOP"},
        {
            "type": "BUTTONS",
            "buttons": [
                {"type": "QUICK_REPLY", "text": "Sim"},
                {"type": "URL", "text": "Rastrear", "url": "https://t.co/{{1}}"},
                {"type": "URL", "text": "Site", "url": "https://example.com"},
            ],
        },
    ],
}


@pytest.fixture()
def graph_client() -> MagicMock:
    client = MagicMock(spec=WhatsAppHttpClient)
    client.get_json = AsyncMock(return_value={"data": [GRAPH_TEMPLATE]})
    return client


class TestParseTemplateComponents:
    def test_buttons_group_expands_dynamic_urls(self) -> None:
        components = parse_template_components(GRAPH_TEMPLATE["components"])

        assert [c.kind for c in components] == ["HEADER", "BODY", "FOOTER", "BUTTON"]
        button = components[-1]
        assert button.button_index == 1
        assert button.button_sub_type == "URL"

    def test_invalid_input_returns_empty(self) -> None:
        assert parse_template_components(None) == ()
        assert parse_template_components([{"text": "no type"}, "junk"]) == ()


class TestGraphTemplateFetcher:
    @pytest.mark.asyncio
    async def test_fetch_queries_approved_template(self, graph_client: MagicMock) -> None:
        fetcher = GraphTemplateFetcher(graph_client, "https://graph.test/v22.0")

        template = await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")

        graph_client.get_json.assert_awaited_once_with(
            "https://graph.test/v22.0/waba-1/message_templates",
            "tok",
            params={"status": "APPROVED", "name": "promo", "language": "pt_BR"},
        )
        assert template.name == "promo"
        assert template.language == "pt_BR"
        assert template.components[1].text == "Oi {{1}}"

    @pytest.mark.asyncio
    async def test_cache_hit_skips_request(self, graph_client: MagicMock) -> None:
        cache = InMemoryCache()
        fetcher = GraphTemplateFetcher(graph_client, "https://graph.test/v22.0", cache=cache)

        first = await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")
        second = await fetcher.fetch("waba-1", "other-token", "promo", "pt_BR")

        assert first is second
        assert graph_client.get_json.await_count == 1
        assert cache.get(template_cache_key("waba-1", "promo", "pt_BR")) is first

    @pytest.mark.asyncio
    async def test_cache_key_includes_language(self, graph_client: MagicMock) -> None:
        fetcher = GraphTemplateFetcher(
            graph_client, "https://graph.test/v22.0", cache=InMemoryCache()
        )

        await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")
        await fetcher.fetch("waba-1", "tok", "promo", "en")

        assert graph_client.get_json.await_count == 2

    @pytest.mark.asyncio
    async def test_without_cache_always_fetches(self, graph_client: MagicMock) -> None:
        fetcher = GraphTemplateFetcher(graph_client, "https://graph.test/v22.0")

        await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")
        await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")

        assert graph_client.get_json.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_result_is_not_found(self, graph_client: MagicMock) -> None:
        graph_client.get_json.return_value = {"data": []}
        fetcher = GraphTemplateFetcher(graph_client, "https://graph.test/v22.0")

        with pytest.raises(TemplateNotFoundError, match="promo"):
            await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")

    @pytest.mark.asyncio
    async def test_not_found_is_a_lookup_error(self, graph_client: MagicMock) -> None:
        graph_client.get_json.return_value = {}
        fetcher = GraphTemplateFetcher(graph_client, "https://graph.test/v22.0")

        with pytest.raises(TemplateLookupError):
            await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")

    @pytest.mark.asyncio
    async def test_transport_failure_is_lookup_error(self, graph_client: MagicMock) -> None:
        graph_client.get_json.side_effect = HttpError("HTTP 500", status_code=500)
        fetcher = GraphTemplateFetcher(graph_client, "https://graph.test/v22.0")

        with pytest.raises(TemplateLookupError) as exc_info:
            await fetcher.fetch("waba-1", "tok", "promo", "pt_BR")

        assert not isinstance(exc_info.value, TemplateNotFoundError)
        assert isinstance(exc_info.value.__cause__, HttpError)
