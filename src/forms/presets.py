"""Preset field bundles the builder can stamp into a section in one action.

Field names are fixed: the fill-up form recognises them when auto-filling
from a selected customer or engine (see src.forms.autocomplete).
"""

from __future__ import annotations

from dataclasses import dataclass

from src.models.enums import FieldType, PresetKind


@dataclass(frozen=True)
class PresetField:
    """One entry of a preset bundle."""

    name: str
    label: str
    type: FieldType = FieldType.TEXT


CUSTOMER_PRESET: tuple[PresetField, ...] = (
    PresetField("customerName", "Name"),
    PresetField("customerEquipment", "Equipment"),
    PresetField("customer", "Customer"),
    PresetField("customerContactPerson", "Contact Person"),
    PresetField("customerAddress", "Address", FieldType.TEXTAREA),
    PresetField("customerEmail", "Email", FieldType.EMAIL),
)

ENGINE_PRESET: tuple[PresetField, ...] = (
    PresetField("engineModel", "Engine Model"),
    PresetField("engineSerialNo", "Serial No."),
    PresetField("engineAltBrandModel", "Alt Brand Model"),
    PresetField("engineEquipModel", "Equipment Model"),
    PresetField("engineEquipSerialNo", "Equipment Serial No."),
    PresetField("engineAltSerialNo", "Alt Serial No."),
    PresetField("engineLocation", "Location"),
    PresetField("engineRating", "Rating"),
    PresetField("engineRpm", "RPM"),
    PresetField("engineStartVoltage", "Start Voltage"),
    PresetField("engineRunHours", "Run Hours"),
    PresetField("engineFuelPumpSN", "Fuel Pump S/N"),
    PresetField("engineFuelPumpCode", "Fuel Pump Code"),
    PresetField("engineLubeOil", "Lube Oil"),
    PresetField("engineFuelType", "Fuel Type"),
    PresetField("engineCoolantAdditive", "Coolant Additive"),
    PresetField("engineTurboModel", "Turbo Model"),
    PresetField("engineTurboSN", "Turbo S/N"),
)

PRESETS: dict[PresetKind, tuple[PresetField, ...]] = {
    PresetKind.CUSTOMER: CUSTOMER_PRESET,
    PresetKind.ENGINE: ENGINE_PRESET,
}
