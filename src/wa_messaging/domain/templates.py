"""Modelos de domínio para templates WhatsApp e variáveis do caller.

Responsabilidade:
- Representar a definição de template (imutável, vinda da Graph API)
- Representar as duas formas de entrada de variáveis (posicional x estruturada)
  como variante explícita, sem "sniffing" de formato em runtime
- Representar avisos (nunca bloqueiam a montagem do payload)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wa_messaging.domain.enums import ComponentKind


class TemplateComponentDef(BaseModel):
    """Componente de template (header, body, button...).

    Os nomes de campo da Graph API (type, sub_type, index) são aceitos como alias.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: str = Field(alias="type")
    format: str | None = None
    text: str | None = None
    button_sub_type: str | None = Field(default=None, alias="sub_type")
    button_index: int | None = Field(default=None, alias="index")

    @field_validator("kind", "format", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @property
    def is_body_with_text(self) -> bool:
        return self.kind == ComponentKind.BODY and bool(self.text)


class TemplateDef(BaseModel):
    """Template aprovado: nome, idioma e componentes em ordem."""

    model_config = ConfigDict(frozen=True)

    name: str
    language: str
    components: tuple[TemplateComponentDef, ...] = ()


@dataclass(frozen=True, slots=True)
class PositionalVariables:
    """Entrada posicional: [header?, ...body na ordem das chaves, ...botões].

    `has_header` explícito (True/False) vence a heurística do normalizador.
    None significa indeciso: em NUMERIC o normalizador aplica a heurística;
    em NAMED/NONE o primeiro valor ainda serve de header de mídia.
    """

    values: tuple[str, ...] = ()
    has_header: bool | None = None


@dataclass(frozen=True, slots=True)
class StructuredVariables:
    """Entrada estruturada: header (URL ou media id), body por nome, botões por índice."""

    header: str | None = None
    body: Mapping[str, str] | None = None
    buttons: tuple[str, ...] | None = None


CallerVariables = PositionalVariables | StructuredVariables

_STRUCTURED_FIELDS = frozenset({"header", "body", "buttons"})


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_text_tuple(values: Any) -> tuple[str, ...] | None:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        return None
    return tuple(_as_text(v) for v in values)


def _as_text_mapping(values: Any) -> dict[str, str] | None:
    if not isinstance(values, Mapping):
        return None
    return {str(k): _as_text(v) for k, v in values.items()}


def coerce_variables(raw: Any) -> CallerVariables:
    """Converte entrada solta (JSON) na variante tipada.

    - lista/tupla → PositionalVariables
    - dict com header/body/buttons → StructuredVariables
    - dict "plano" (sem essas chaves) → StructuredVariables com body=dict
    - qualquer outra coisa → StructuredVariables vazio

    Campos com formato errado viram None (entrada malformada é tolerada).
    """
    if isinstance(raw, (PositionalVariables, StructuredVariables)):
        return raw

    as_tuple = _as_text_tuple(raw)
    if as_tuple is not None:
        return PositionalVariables(values=as_tuple)

    if not isinstance(raw, Mapping):
        return StructuredVariables()

    if not _STRUCTURED_FIELDS.intersection(raw.keys()):
        return StructuredVariables(body=_as_text_mapping(raw))

    header = raw.get("header")
    return StructuredVariables(
        header=None if header is None else _as_text(header),
        body=_as_text_mapping(raw.get("body")),
        buttons=_as_text_tuple(raw.get("buttons")),
    )


@dataclass(frozen=True, slots=True)
class TemplateWarning:
    """Aviso consultivo sobre um valor de variável.

    `locator` é a posição 1-based (entrada posicional) ou o nome da chave.
    """

    locator: str
    message: str
    positional: bool = False

    def __str__(self) -> str:
        if self.positional:
            return f"Placeholder #{self.locator}: {self.message}"
        return f'Variable "{self.locator}": {self.message}'


@dataclass(slots=True)
class NormalizationResult:
    """Variáveis normalizadas + avisos acumulados."""

    variables: CallerVariables
    warnings: list[TemplateWarning] = field(default_factory=list)


@dataclass(slots=True)
class TemplatePayloadResult:
    """Payload pronto para o transporte + avisos do normalizador."""

    payload: dict[str, Any]
    warnings: list[TemplateWarning] = field(default_factory=list)

    @property
    def warning_messages(self) -> list[str]:
        return [str(w) for w in self.warnings]
