"""Tests for customer/engine autocomplete matching and auto-fill."""

from __future__ import annotations

import uuid

from src.forms.autocomplete import autocomplete_kind, display_label, fill_values, filter_entities
from src.models.enums import FieldType, PresetKind
from src.schemas.entities import CustomerOut, EngineOut
from src.schemas.forms import DynamicField


def _field(name: str, ftype: FieldType = FieldType.TEXT) -> DynamicField:
    return DynamicField(id=name, name=name, label=name, type=ftype)


def _customer(**kwargs) -> CustomerOut:
    return CustomerOut(id=uuid.uuid4(), **kwargs)


def _engine(**kwargs) -> EngineOut:
    return EngineOut(id=uuid.uuid4(), **kwargs)


class TestAutocompleteKind:
    def test_customer_field(self):
        assert autocomplete_kind(_field("customerName")) == PresetKind.CUSTOMER

    def test_engine_field_case_insensitive(self):
        assert autocomplete_kind(_field("EngineSerialNo")) == PresetKind.ENGINE

    def test_customer_wins(self):
        assert autocomplete_kind(_field("customerEngine")) == PresetKind.CUSTOMER

    def test_not_text_like(self):
        assert autocomplete_kind(_field("customerName", FieldType.SELECT)) is None
        assert autocomplete_kind(_field("engineDate", FieldType.DATE)) is None

    def test_unrelated(self):
        assert autocomplete_kind(_field("jobSite")) is None


class TestFilterEntities:
    def test_customer_by_email_and_contact(self):
        acme = _customer(name="Acme", email="ops@acme.com", contact_person="Jo")
        beta = _customer(name="Beta", email="info@beta.io", contact_person="Sam")
        assert filter_entities([acme, beta], PresetKind.CUSTOMER, "ACME") == [acme]
        assert filter_entities([acme, beta], PresetKind.CUSTOMER, "sam") == [beta]

    def test_engine_by_serial_and_equip_model(self):
        first = _engine(model="QSK60", serial_no="SN-001", equip_model="C2000")
        second = _engine(model="3516", serial_no="ZX9", equip_model="Genset X")
        assert filter_entities([first, second], PresetKind.ENGINE, "zx") == [second]
        assert filter_entities([first, second], PresetKind.ENGINE, "c2000") == [first]

    def test_empty_search_returns_all(self):
        items = [_customer(name="A"), _customer(name="B")]
        assert filter_entities(items, PresetKind.CUSTOMER, "") == items


class TestFillValues:
    def test_acme_example(self):
        acme = _customer(name="Acme", email="a@x.com", address="123 St", contact_person="Jo", equipment="Pump")
        fields = [
            _field("customerName"),
            _field("customerEmail"),
            _field("customerAddress"),
            _field("customerContactPerson"),
            _field("customerEquipment"),
            _field("jobSite"),
        ]
        assert fill_values(fields, acme, PresetKind.CUSTOMER) == {
            "customerName": "Acme",
            "customerEmail": "a@x.com",
            "customerAddress": "123 St",
            "customerContactPerson": "Jo",
            "customerEquipment": "Pump",
        }

    def test_customer_field_prefers_parent_customer(self):
        entity = _customer(name="Acme Site 2", customer="Acme Holdings")
        assert fill_values([_field("customer")], entity, PresetKind.CUSTOMER) == {"customer": "Acme Holdings"}

    def test_customer_field_falls_back_to_name(self):
        entity = _customer(name="Acme")
        assert fill_values([_field("customer")], entity, PresetKind.CUSTOMER) == {"customer": "Acme"}

    def test_missing_attribute_becomes_empty(self):
        entity = _engine(model="QSK60")
        assert fill_values([_field("engineRpm"), _field("engineModel")], entity, PresetKind.ENGINE) == {
            "engineRpm": "",
            "engineModel": "QSK60",
        }

    def test_engine_field_names_case_insensitive(self):
        entity = _engine(model="QSK60", turbo_sn="T-77", fuel_pump_sn="FP-1")
        fields = [_field("engineTurboSN"), _field("ENGINEFUELPUMPSN")]
        assert fill_values(fields, entity, PresetKind.ENGINE) == {"engineTurboSN": "T-77", "ENGINEFUELPUMPSN": "FP-1"}


class TestDisplayLabel:
    def test_labels(self):
        assert display_label(_customer(name="Acme")) == "Acme"
        assert display_label(_engine(model="QSK60")) == "QSK60"
