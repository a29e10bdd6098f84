"""Testes para WhatsAppHttpClient.

Valida:
- Envio bem-sucedido com Bearer token
- Erros Meta permanentes vs transitórios (corpo 2xx e não-2xx)
- Parsing de resposta JSON
- Token fora da URL
"""

from __future__ import annotations

import httpx
import pytest

from wa_messaging.adapters.whatsapp.http_client import (
    WhatsAppHttpClient,
    _is_permanent_error,
    create_whatsapp_http_client,
    parse_meta_error,
)
from wa_messaging.config.settings import Settings
from wa_messaging.infra.http import HttpClientConfig, HttpError


class TestParseMetaError:
    def test_parse_error_with_valid_error_object(self) -> None:
        error = parse_meta_error(
            {"error": {"type": "OAuthException", "code": 190, "message": "Invalid token"}}
        )

        assert error is not None
        assert error.error_type == "OAuthException"
        assert error.error_code == 190
        assert error.error_message == "Invalid token"
        assert error.is_permanent is True

    def test_parse_no_error_returns_none(self) -> None:
        assert parse_meta_error({"messages": [{"id": "wamid.1"}]}) is None

    def test_parse_none_returns_none(self) -> None:
        assert parse_meta_error(None) is None

    def test_parse_malformed_error_object(self) -> None:
        assert parse_meta_error({"error": "string error"}) is None

    def test_rate_limit_is_transient(self) -> None:
        error = parse_meta_error({"error": {"type": "RateLimitException", "code": 429}})

        assert error is not None
        assert error.is_permanent is False


class TestIsPermanentError:
    def test_400_is_permanent(self) -> None:
        assert _is_permanent_error(400, "Other") is True

    def test_500_is_transient(self) -> None:
        assert _is_permanent_error(500, "ServerError") is False

    def test_invalid_request_type_is_permanent(self) -> None:
        assert _is_permanent_error(999, "InvalidRequest") is True


def _client(handler) -> WhatsAppHttpClient:
    return WhatsAppHttpClient(
        HttpClientConfig(timeout_seconds=5.0), transport=httpx.MockTransport(handler)
    )


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_send_message_success_uses_bearer(self) -> None:
        seen: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"messages": [{"id": "wamid.ABC"}]})

        async with _client(handler) as client:
            result = await client.send_message(
                "https://graph.test/v22.0/pn-1/messages",
                "secret-token",
                {"messaging_product": "whatsapp", "to": "5511999999999"},
            )

        assert result == {"messages": [{"id": "wamid.ABC"}]}
        request = seen["request"]
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert "secret-token" not in str(request.url)

    @pytest.mark.asyncio
    async def test_meta_error_in_2xx_body_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"error": {"type": "OAuthException", "code": 401, "message": "bad"}}
            )

        async with _client(handler) as client:
            with pytest.raises(HttpError) as exc_info:
                await client.send_message("https://graph.test/m", "t", {})

        assert exc_info.value.is_retryable is False
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_http_error_reclassified_by_meta_code(self) -> None:
        """HTTP 400 com erro Meta transitório vira retryable."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={"error": {"type": "Throttling", "code": 130429, "message": "slow"}}
            )

        async with _client(handler) as client:
            with pytest.raises(HttpError) as exc_info:
                await client.send_message("https://graph.test/m", "t", {})

        assert exc_info.value.is_retryable is True
        assert "transitório" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_http_error_without_meta_body_propagates(self) -> None:
        async with _client(lambda request: httpx.Response(502, text="gateway")) as client:
            with pytest.raises(HttpError) as exc_info:
                await client.send_message("https://graph.test/m", "t", {})

        assert exc_info.value.status_code == 502
        assert exc_info.value.is_retryable is True

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        async with _client(lambda request: httpx.Response(200, text="not json")) as client:
            with pytest.raises(HttpError, match="JSON"):
                await client.send_message("https://graph.test/m", "t", {})


class TestGetJson:
    @pytest.mark.asyncio
    async def test_get_json_passes_params(self) -> None:
        seen: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"data": []})

        async with _client(handler) as client:
            data = await client.get_json(
                "https://graph.test/v22.0/waba/message_templates",
                "tok",
                params={"status": "APPROVED", "name": "promo"},
            )

        assert data == {"data": []}
        assert seen["request"].url.params["status"] == "APPROVED"
        assert seen["request"].url.params["name"] == "promo"
        assert seen["request"].headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_non_object_json_raises(self) -> None:
        async with _client(lambda request: httpx.Response(200, json=[1, 2])) as client:
            with pytest.raises(HttpError):
                await client.get_json("https://graph.test/x", "tok")


def test_create_whatsapp_http_client() -> None:
    client = create_whatsapp_http_client(Settings(whatsapp_request_timeout_seconds=12))

    assert isinstance(client, WhatsAppHttpClient)
    assert client._config.timeout_seconds == 12.0
