"""Resolução do número exibido (display_phone_number) de um phone_number_id."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wa_messaging.observability.logging import get_logger, mask_phone

if TYPE_CHECKING:
    from wa_messaging.adapters.whatsapp.http_client import WhatsAppHttpClient
    from wa_messaging.domain.protocols.cache import KeyValueCache

logger: logging.Logger = get_logger(__name__)


class BusinessPhoneNumberResolver:
    """Consulta GET /{phone_number_id}?fields=display_phone_number, com cache por id.

    Raises:
        HttpError: Falha de transporte (propagada ao chamador)
    """

    def __init__(
        self,
        http_client: WhatsAppHttpClient,
        api_endpoint: str,
        cache: KeyValueCache[str] | None = None,
    ) -> None:
        self._http_client = http_client
        self._api_endpoint = api_endpoint.rstrip("/")
        self._cache = cache

    async def resolve(self, phone_number_id: str, access_token: str) -> str | None:
        if self._cache is not None:
            cached = self._cache.get(phone_number_id)
            if cached is not None:
                return cached

        data = await self._http_client.get_json(
            f"{self._api_endpoint}/{phone_number_id}",
            access_token,
            params={"fields": "display_phone_number"},
        )
        display = data.get("display_phone_number")
        if not isinstance(display, str) or not display:
            logger.warning(
                "display_phone_number_missing",
                extra={"phone_number_id": phone_number_id},
            )
            return None

        if self._cache is not None:
            self._cache.put(phone_number_id, display)
        logger.debug(
            "display_phone_number_resolved",
            extra={"phone_number_id": phone_number_id, "display": mask_phone(display)},
        )
        return display
