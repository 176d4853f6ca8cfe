"""Customer/engine autocomplete for the fill-up form.

A text-like field whose name contains "customer" (or "engine") gets a
dropdown of matching entities. Picking one copies a fixed set of entity
attributes into the template's recognised fields, matched by field name
case-insensitively. The copy is a one-off snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from src.models.enums import TEXT_LIKE_FIELD_TYPES, PresetKind
from src.schemas.entities import CustomerOut, EngineOut
from src.schemas.forms import DynamicField

# Recognised field name (lower-cased) -> entity attributes, first non-empty wins
CUSTOMER_FIELD_MAP: dict[str, tuple[str, ...]] = {
    "customername": ("name",),
    "customer": ("customer", "name"),
    "customeremail": ("email",),
    "customeraddress": ("address",),
    "customercontactperson": ("contact_person",),
    "customerequipment": ("equipment",),
}

ENGINE_FIELD_MAP: dict[str, tuple[str, ...]] = {
    "enginemodel": ("model",),
    "engineserialno": ("serial_no",),
    "enginealtbrandmodel": ("alt_brand_model",),
    "engineequipmodel": ("equip_model",),
    "engineequipserialno": ("equip_serial_no",),
    "enginealtserialno": ("alt_serial_no",),
    "enginelocation": ("location",),
    "enginerating": ("rating",),
    "enginerpm": ("rpm",),
    "enginestartvoltage": ("start_voltage",),
    "enginerunhours": ("run_hours",),
    "enginefuelpumpsn": ("fuel_pump_sn",),
    "enginefuelpumpcode": ("fuel_pump_code",),
    "enginelubeoil": ("lube_oil",),
    "enginefueltype": ("fuel_type",),
    "enginecoolantadditive": ("coolant_additive",),
    "engineturbomodel": ("turbo_model",),
    "engineturbosn": ("turbo_sn",),
}

FIELD_MAPS: dict[PresetKind, dict[str, tuple[str, ...]]] = {
    PresetKind.CUSTOMER: CUSTOMER_FIELD_MAP,
    PresetKind.ENGINE: ENGINE_FIELD_MAP,
}

# Attributes searched when filtering the dropdown
SEARCH_ATTRIBUTES: dict[PresetKind, tuple[str, ...]] = {
    PresetKind.CUSTOMER: ("name", "email", "contact_person"),
    PresetKind.ENGINE: ("model", "serial_no", "equip_model"),
}


def autocomplete_kind(field: DynamicField) -> PresetKind | None:
    """Which entity list a field looks up, if any (customer wins over engine)."""
    if field.type not in TEXT_LIKE_FIELD_TYPES:
        return None
    lowered = field.name.lower()
    if "customer" in lowered:
        return PresetKind.CUSTOMER
    if "engine" in lowered:
        return PresetKind.ENGINE
    return None


def display_label(entity: CustomerOut | EngineOut) -> str:
    if isinstance(entity, CustomerOut):
        return entity.name
    return entity.model


def filter_entities(
    entities: Sequence[CustomerOut] | Sequence[EngineOut],
    kind: PresetKind,
    search: str,
) -> list[Any]:
    """Case-insensitive substring match; an empty search returns everything."""
    if not search:
        return list(entities)
    needle = search.lower()
    attrs = SEARCH_ATTRIBUTES[kind]
    return [
        entity for entity in entities
        if any(needle in (getattr(entity, attr) or "").lower() for attr in attrs)
    ]


def fill_values(
    fields: Iterable[DynamicField],
    entity: CustomerOut | EngineOut,
    kind: PresetKind,
) -> dict[str, str]:
    """Values to copy into the template's recognised fields for `entity`."""
    mapping = FIELD_MAPS[kind]
    updates: dict[str, str] = {}
    for field in fields:
        attrs = mapping.get(field.name.lower())
        if attrs is None:
            continue
        value = next((getattr(entity, a) for a in attrs if getattr(entity, a, None)), None)
        updates[field.name] = str(value) if value is not None else ""
    return updates
