"""Middleware HTTP: correlation_id por request e linha de acesso estruturada.

O correlation_id vem do header `x-correlation-id` (Meta não envia; chamadas
internas de envio podem enviar) ou é gerado. Valores fora do formato
esperado são descartados para não poluir os logs.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_ID_HEADER = "x-correlation-id"

_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# logging.py importa este módulo; get_logger aqui seria import circular
access_logger: logging.Logger = logging.getLogger("wa_messaging.access")


def get_correlation_id() -> str:
    """Retorna o correlation_id do request corrente (vazio fora de request)."""

    return _correlation_id.get()


def _incoming_correlation_id(request: Request) -> str | None:
    value = request.headers.get(CORRELATION_ID_HEADER)
    if value and _VALID_CORRELATION_ID.match(value):
        return value
    return None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Propaga correlation_id e registra `http_request` ao fim de cada request."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        correlation_id = _incoming_correlation_id(request) or uuid.uuid4().hex
        token = _correlation_id.set(correlation_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            access_logger.info(
                "http_request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
        finally:
            _correlation_id.reset(token)

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
