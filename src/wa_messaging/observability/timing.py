"""Medição de latência dos passos de envio (montagem do template, POST na Graph API)."""

from __future__ import annotations

import contextlib
import time
from collections.abc import Generator
from typing import Any

from wa_messaging.observability.logging import get_logger

logger = get_logger(__name__)


@contextlib.contextmanager
def timed(step: str, **fields: Any) -> Generator[None, None, None]:
    """Loga `step_latency` com elapsed_ms e outcome (ok/error).

    `fields` entram no extra do log (ids, nome do template); nunca passar
    tokens nem telefones sem máscara.

    Uso:
        with timed("whatsapp_send", sender_phone_number_id=pid):
            response = await client.send_message(...)
    """
    start = time.perf_counter()
    outcome = "error"
    try:
        yield
        outcome = "ok"
    finally:
        logger.info(
            "step_latency",
            extra={
                **fields,
                "step": step,
                "outcome": outcome,
                "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
