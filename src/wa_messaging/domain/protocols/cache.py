"""Contrato de cache chave/valor injetável (templates, números de telefone)."""

from __future__ import annotations

from typing import Protocol, TypeVar

T = TypeVar("T")


class KeyValueCache(Protocol[T]):
    """Cache mínimo get/put; implementações decidem expiração."""

    def get(self, key: str) -> T | None: ...

    def put(self, key: str, value: T) -> None: ...
