"""Typed field-value map for a fill-up session.

Values are keyed by declared field name and checked against the field type:
- number   -> int | float (numeric strings are coerced, "" clears)
- checkbox -> list[str] of ticked options
- others   -> str
Autocomplete display texts (`<field>_display`) live in a separate map.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from src.forms.errors import ValidationError
from src.models.enums import FieldType
from src.schemas.forms import DynamicField, FieldValue

DISPLAY_SUFFIX = "_display"


def coerce_value(field: DynamicField, value: Any) -> FieldValue:
    """Check/convert a raw value for `field`, raising ValidationError on mismatch."""
    if field.type == FieldType.NUMBER:
        return _coerce_number(field.name, value)
    if field.type == FieldType.CHECKBOX:
        if isinstance(value, str):
            return [value] if value else []
        if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
            return list(value)
        raise ValidationError(f"{field.name} expects a list of options")
    if isinstance(value, bool) or isinstance(value, (list, tuple, dict)):
        raise ValidationError(f"{field.name} expects text")
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field.name} expects text")
    return value


def _coerce_number(name: str, value: Any) -> FieldValue:
    if isinstance(value, bool):
        raise ValidationError(f"{name} expects a number")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ""
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise ValidationError(f"{name} expects a number, got {value!r}") from exc
        if not number.is_finite():
            raise ValidationError(f"{name} expects a number, got {value!r}")
        return int(number) if number == number.to_integral_value() and "." not in text else float(number)
    raise ValidationError(f"{name} expects a number")


def is_blank(value: FieldValue | None) -> bool:
    return value is None or value == "" or value == []


class FieldValues:
    """Schema-driven accessor over the flat value map."""

    def __init__(
        self,
        fields: Iterable[DynamicField],
        values: Mapping[str, FieldValue] | None = None,
        displays: Mapping[str, str] | None = None,
    ) -> None:
        self._fields: dict[str, DynamicField] = {f.name: f for f in fields if f.name}
        self._displays: dict[str, str] = dict(displays or {})
        # Restored values were checked when they were set
        self._values: dict[str, FieldValue] = {
            name: value for name, value in (values or {}).items() if name in self._fields
        }

    def field(self, name: str) -> DynamicField:
        try:
            return self._fields[name]
        except KeyError:
            raise ValidationError(f"Unknown field: {name}") from None

    def set(self, name: str, value: Any) -> FieldValue:
        coerced = coerce_value(self.field(name), value)
        self._values[name] = coerced
        return coerced

    def select(self, name: str, entity_id: str, label: str) -> str:
        """Autocomplete pick: keep the entity id as the value, whatever the field type."""
        self.field(name)
        self._values[name] = entity_id
        self._displays[name] = label
        return entity_id

    def get(self, name: str) -> FieldValue | None:
        self.field(name)
        return self._values.get(name)

    def effective(self, name: str) -> FieldValue:
        """The value a submit would send: entered value, else default, else ""."""
        field = self.field(name)
        value = self._values.get(name)
        if not is_blank(value):
            return value
        if not is_blank(field.default_value):
            return field.default_value
        return [] if field.type == FieldType.CHECKBOX else ""

    def toggle(self, name: str, option: str, checked: bool) -> list[str]:
        """Add or remove one option of a checkbox group, keeping the others."""
        field = self.field(name)
        if field.type != FieldType.CHECKBOX:
            raise ValidationError(f"{name} is not a checkbox group")
        if field.options and option not in field.options:
            raise ValidationError(f"{option!r} is not an option of {name}")
        current = self._values.get(name)
        selected = list(current) if isinstance(current, list) else []
        if checked and option not in selected:
            selected.append(option)
        elif not checked:
            selected = [v for v in selected if v != option]
        self._values[name] = selected
        return selected

    def set_display(self, name: str, text: str) -> None:
        self.field(name)
        self._displays[name] = text

    def display(self, name: str) -> str:
        """Text shown in an autocomplete input: display text, else the value."""
        if name in self._displays:
            return self._displays[name]
        value = self.effective(name)
        return ", ".join(value) if isinstance(value, list) else str(value)

    def clear(self) -> None:
        self._values.clear()
        self._displays.clear()

    def as_dict(self) -> dict[str, FieldValue]:
        """Flat map including `<field>_display` entries."""
        flat: dict[str, FieldValue] = dict(self._values)
        for name, text in self._displays.items():
            flat[f"{name}{DISPLAY_SUFFIX}"] = text
        return flat

    @property
    def values(self) -> dict[str, FieldValue]:
        return dict(self._values)

    @property
    def displays(self) -> dict[str, str]:
        return dict(self._displays)
