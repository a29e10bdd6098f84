"""Cliente HTTP centralizado com timeout e logging.

Este módulo fornece um cliente HTTP configurável para chamadas
externas (Graph API Meta), com:
- Timeouts configuráveis
- Logging estruturado (sem PII, URLs sanitizadas)
- Injeção de headers padrão
- Classificação de falhas (transitória x permanente) em HttpError

Uma única tentativa por requisição; quem chama decide se repete.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from wa_messaging.observability.logging import get_logger

if TYPE_CHECKING:
    from wa_messaging.config.settings import Settings

logger: logging.Logger = get_logger(__name__)

_ACCESS_TOKEN_PATTERN = re.compile(r"access_token=[^&]+")


def _sanitize_url(url: str) -> str:
    """Remove tokens e credenciais da URL para logging seguro."""
    if "access_token=" in url:
        return _ACCESS_TOKEN_PATTERN.sub("access_token=***", url)
    return url


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem expor informações sensíveis.

    `body` guarda o JSON de erro do provedor quando existir (nunca logado).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
        body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable
        self.body = body


def is_retryable_status(status_code: int) -> bool:
    """429 e 5xx são transitórios."""
    return status_code == 429 or 500 <= status_code < 600


def _error_body(response: httpx.Response) -> dict[str, Any] | None:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


class HttpClient:
    """Cliente HTTP assíncrono com logging.

    Uso típico:
        async with HttpClient(config) as client:
            response = await client.post(url, json=payload)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Retorna cliente httpx (lazy loading)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                headers=self._config.default_headers,
                verify=self._config.verify_ssl,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Fecha o cliente e libera recursos."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Executa a requisição e classifica falhas.

        Raises:
            HttpError: Status não-2xx, timeout ou erro de conexão
        """
        client = await self._get_client()
        safe_url = _sanitize_url(url)
        logger.debug("http_request_start", extra={"method": method, "url": safe_url})

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning(
                "http_request_timeout",
                extra={"method": method, "url": safe_url, "error": str(exc)},
            )
            raise HttpError("Timeout", is_retryable=True) from exc
        except httpx.ConnectError as exc:
            logger.warning(
                "http_connect_error",
                extra={"method": method, "url": safe_url, "error": str(exc)},
            )
            raise HttpError("Erro de conexão", is_retryable=True) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "http_request_unexpected_error",
                extra={"method": method, "url": safe_url, "error_type": type(exc).__name__},
            )
            raise HttpError(f"Erro inesperado: {type(exc).__name__}") from exc

        if response.is_success:
            logger.debug(
                "http_request_success",
                extra={"method": method, "url": safe_url, "status_code": response.status_code},
            )
            return response

        retryable = is_retryable_status(response.status_code)
        logger.warning(
            "http_request_failed",
            extra={
                "method": method,
                "url": safe_url,
                "status_code": response.status_code,
                "is_retryable": retryable,
            },
        )
        raise HttpError(
            f"HTTP {response.status_code}",
            status_code=response.status_code,
            is_retryable=retryable,
            body=_error_body(response),
        )

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        return await self._request("POST", url, json=json, **kwargs)


def create_http_client(settings: Settings | None = None) -> HttpClient:
    """Factory para criar cliente HTTP configurado.

    Args:
        settings: Configurações da aplicação. Se None, usa get_settings()
    """
    if settings is None:
        from wa_messaging.config.settings import get_settings

        settings = get_settings()

    config = HttpClientConfig(
        timeout_seconds=float(settings.whatsapp_request_timeout_seconds),
        default_headers={"User-Agent": f"{settings.service_name}/{settings.version}"},
    )
    logger.info("http_client_created", extra={"timeout_seconds": config.timeout_seconds})
    return HttpClient(config)
