"""Cliente HTTP especializado para a Graph API Meta/WhatsApp.

Estende HttpClient genérico com comportamentos específicos:
- Autenticação Bearer por requisição (token nunca vai na URL nem nos logs)
- Tratamento de erros Meta (error.type, error.code)
- Validação de response: nunca retorna JSON mal-formado
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from wa_messaging.infra.http import HttpClient, HttpClientConfig, HttpError
from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.config.settings import Settings

logger: logging.Logger = get_logger(__name__)

_PERMANENT_CODES = frozenset({400, 401, 403, 404, 413})
_PERMANENT_TYPES = frozenset({"OAuthException", "InvalidRequest"})


@dataclass(frozen=True)
class WhatsAppApiError:
    """Erro retornado pela API Meta/WhatsApp."""

    error_type: str
    error_code: int
    error_message: str
    is_permanent: bool


def _is_permanent_error(error_code: int, error_type: str) -> bool:
    """Permanentes: 400, 401, 403, 404, 413 ou tipos de auth/requisição inválida."""
    return error_code in _PERMANENT_CODES or error_type in _PERMANENT_TYPES


def parse_meta_error(response_data: dict[str, Any] | None) -> WhatsAppApiError | None:
    """Extrai o objeto `error` da Meta; None se não houver."""
    if not response_data:
        return None
    error_obj = response_data.get("error")
    if not isinstance(error_obj, dict):
        return None

    error_type = str(error_obj.get("type", "unknown"))
    error_code = error_obj.get("code", 0)
    if not isinstance(error_code, int):
        error_code = 0

    return WhatsAppApiError(
        error_type=error_type,
        error_code=error_code,
        error_message=str(error_obj.get("message", "Erro desconhecido")),
        is_permanent=_is_permanent_error(error_code, error_type),
    )


def _meta_http_error(meta_error: WhatsAppApiError, method: str, endpoint: str) -> HttpError:
    logger.warning(
        "whatsapp_api_error",
        extra={
            "method": method,
            "endpoint": endpoint,
            "error_type": meta_error.error_type,
            "error_code": meta_error.error_code,
            "is_permanent": meta_error.is_permanent,
        },
    )
    kind = "permanente" if meta_error.is_permanent else "transitório"
    return HttpError(
        f"Erro {kind}: {meta_error.error_message}",
        status_code=meta_error.error_code,
        is_retryable=not meta_error.is_permanent,
    )


class WhatsAppHttpClient(HttpClient):
    """Cliente HTTP para a Graph API.

    - Erros Meta no corpo (mesmo com 2xx) viram HttpError classificado
    - Erros HTTP com corpo Meta são reclassificados pelo código da Meta
    """

    @staticmethod
    def _auth_headers(access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    async def send_message(
        self,
        endpoint: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """POST do payload no endpoint de mensagens; retorna o JSON da Meta."""
        try:
            response = await self.post(
                endpoint, json=payload, headers=self._auth_headers(access_token)
            )
        except HttpError as exc:
            raise self._reclassify(exc, "POST", endpoint) from exc
        return self._process_response_json(response, "POST", endpoint)

    async def get_json(
        self,
        url: str,
        access_token: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET autenticado na Graph API; retorna o JSON da resposta."""
        try:
            response = await self.get(
                url, params=params, headers=self._auth_headers(access_token)
            )
        except HttpError as exc:
            raise self._reclassify(exc, "GET", url) from exc
        return self._process_response_json(response, "GET", url)

    @staticmethod
    def _reclassify(exc: HttpError, method: str, endpoint: str) -> HttpError:
        meta_error = parse_meta_error(exc.body)
        if meta_error is None:
            return exc
        return _meta_http_error(meta_error, method, endpoint)

    @staticmethod
    def _process_response_json(
        response: httpx.Response,
        method: str,
        endpoint: str,
    ) -> dict[str, Any]:
        try:
            response_data = response.json()
        except ValueError as e:
            logger.error("whatsapp_invalid_json", extra={"endpoint": endpoint})
            raise HttpError("Response JSON inválido") from e

        if not isinstance(response_data, dict):
            logger.error("whatsapp_invalid_json", extra={"endpoint": endpoint})
            raise HttpError("Response JSON inválido")

        meta_error = parse_meta_error(response_data)
        if meta_error:
            raise _meta_http_error(meta_error, method, endpoint)

        logger.debug(
            "whatsapp_request_success",
            extra={"method": method, "endpoint": endpoint, "status_code": response.status_code},
        )
        return response_data


def create_whatsapp_http_client(settings: Settings) -> WhatsAppHttpClient:
    """Factory para criar cliente WhatsApp configurado."""
    config = HttpClientConfig(
        timeout_seconds=float(settings.whatsapp_request_timeout_seconds),
        default_headers={"User-Agent": f"{settings.service_name}/{settings.version}"},
    )
    logger.info("whatsapp_http_client_created", extra={"timeout": config.timeout_seconds})
    return WhatsAppHttpClient(config=config)
