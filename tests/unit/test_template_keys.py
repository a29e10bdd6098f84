"""Testes para extração de placeholders e detecção de modo."""

from __future__ import annotations

import pytest

from tests.helpers.template_factory import make_template
from wa_messaging.adapters.whatsapp.templates.keys import (
    detect_mode,
    extract_keys,
    is_numeric_key,
)
from wa_messaging.domain.enums import AddressingMode


class TestExtractKeys:
    """Testes para extract_keys."""

    def test_distinct_keys_in_first_occurrence_order(self) -> None:
        """Chaves repetidas aparecem uma vez, na ordem da primeira ocorrência."""
        template = make_template({"type": "BODY", "text": "Hi {{name}}, code {{code}} for {{name}}"})

        assert extract_keys(template.components) == ["name", "code"]

    def test_numeric_keys(self) -> None:
        template = make_template({"type": "BODY", "text": "{{2}} then {{1}} then {{2}}"})

        assert extract_keys(template.components) == ["2", "1"]

    def test_only_first_body_with_text_is_scanned(self) -> None:
        """HEADER e BODY subsequentes são ignorados."""
        template = make_template(
            {"type": "HEADER", "format": "TEXT", "text": "Hello {{header_key}}"},
            {"type": "BODY", "text": ""},
            {"type": "BODY", "text": "Second {{1}}"},
            {"type": "BODY", "text": "Third {{9}}"},
        )

        assert extract_keys(template.components) == ["1"]

    def test_no_body_returns_empty(self) -> None:
        template = make_template({"type": "HEADER", "format": "IMAGE"})

        assert extract_keys(template.components) == []

    def test_body_without_placeholders_returns_empty(self) -> None:
        template = make_template({"type": "BODY", "text": "Static text {single} {{ spaced }}"})

        assert extract_keys(template.components) == []

    def test_lowercase_component_type_is_accepted(self) -> None:
        template = make_template({"type": "body", "text": "Hi {{1}}"})

        assert extract_keys(template.components) == ["1"]


class TestDetectMode:
    """Testes para detect_mode."""

    def test_empty_is_none(self) -> None:
        assert detect_mode([]) is AddressingMode.NONE

    def test_all_digits_is_numeric(self) -> None:
        assert detect_mode(["1", "2", "10"]) is AddressingMode.NUMERIC

    def test_named_keys(self) -> None:
        assert detect_mode(["first_name", "order"]) is AddressingMode.NAMED

    def test_mixed_keys_are_named(self) -> None:
        """Verificação numérica precisa ser unânime."""
        assert detect_mode(["1", "name"]) is AddressingMode.NAMED


@pytest.mark.parametrize(
    ("key", "expected"),
    [("1", True), ("007", True), ("1a", False), ("", False), ("name", False)],
)
def test_is_numeric_key(key: str, expected: bool) -> None:
    assert is_numeric_key(key) is expected
