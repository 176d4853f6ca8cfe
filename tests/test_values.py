"""Tests for typed field values and comma-separated option parsing."""

from __future__ import annotations

import pytest

from src.forms.errors import ValidationError
from src.forms.values import FieldValues, coerce_value
from src.models.enums import FieldType
from src.schemas.forms import DynamicField, parse_options


def _field(name: str, ftype: FieldType = FieldType.TEXT, **kwargs) -> DynamicField:
    return DynamicField(id=name, name=name, label=name, type=ftype, **kwargs)


class TestParseOptions:
    def test_trims_and_drops_empty(self):
        assert parse_options("Yes, No, ,Maybe") == ["Yes", "No", "Maybe"]

    def test_none(self):
        assert parse_options(None) == []

    def test_list_passthrough(self):
        assert parse_options([" a ", "", "b"]) == ["a", "b"]


class TestCoerceValue:
    def test_number_from_string(self):
        assert coerce_value(_field("hours", FieldType.NUMBER), "1250") == 1250
        assert coerce_value(_field("hours", FieldType.NUMBER), "12.5") == 12.5

    def test_number_blank_clears(self):
        assert coerce_value(_field("hours", FieldType.NUMBER), "  ") == ""

    def test_number_rejects_text(self):
        with pytest.raises(ValidationError):
            coerce_value(_field("hours", FieldType.NUMBER), "lots")

    def test_number_rejects_bool(self):
        with pytest.raises(ValidationError):
            coerce_value(_field("hours", FieldType.NUMBER), True)

    def test_checkbox_list(self):
        assert coerce_value(_field("checks", FieldType.CHECKBOX), ["Oil", "Belt"]) == ["Oil", "Belt"]

    def test_checkbox_rejects_mixed(self):
        with pytest.raises(ValidationError):
            coerce_value(_field("checks", FieldType.CHECKBOX), ["Oil", 3])

    def test_text_from_number(self):
        assert coerce_value(_field("site"), 42) == "42"

    def test_text_rejects_list(self):
        with pytest.raises(ValidationError):
            coerce_value(_field("site"), ["a"])


class TestFieldValues:
    def test_unknown_field(self):
        values = FieldValues([_field("site")])
        with pytest.raises(ValidationError):
            values.set("nope", "x")

    def test_effective_falls_back_to_default(self):
        values = FieldValues([_field("site", default_value="Yard A"), _field("notes")])
        assert values.effective("site") == "Yard A"
        assert values.effective("notes") == ""
        values.set("site", "Dock 3")
        assert values.effective("site") == "Dock 3"

    def test_effective_checkbox_empty_list(self):
        values = FieldValues([_field("checks", FieldType.CHECKBOX, options=["Oil"])])
        assert values.effective("checks") == []

    def test_toggle_keeps_other_options(self):
        values = FieldValues([_field("checks", FieldType.CHECKBOX, options=["Oil", "Belt", "Filter"])])
        values.toggle("checks", "Oil", True)
        values.toggle("checks", "Filter", True)
        assert values.toggle("checks", "Oil", False) == ["Filter"]

    def test_toggle_unknown_option(self):
        values = FieldValues([_field("checks", FieldType.CHECKBOX, options=["Oil"])])
        with pytest.raises(ValidationError):
            values.toggle("checks", "Coolant", True)

    def test_toggle_non_checkbox(self):
        with pytest.raises(ValidationError):
            FieldValues([_field("site")]).toggle("site", "x", True)

    def test_display_map(self):
        values = FieldValues([_field("customerName")])
        values.set("customerName", "id-1")
        values.set_display("customerName", "Acme")
        assert values.display("customerName") == "Acme"
        assert values.as_dict() == {"customerName": "id-1", "customerName_display": "Acme"}

    def test_clear(self):
        values = FieldValues([_field("site")], {"site": "Yard"}, {"site": "Yard"})
        values.clear()
        assert values.as_dict() == {}

    def test_constructor_skips_undeclared(self):
        values = FieldValues([_field("site")], {"site": "Yard", "gone": "x"})
        assert values.values == {"site": "Yard"}
