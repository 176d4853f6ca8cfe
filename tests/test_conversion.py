"""Tests for editable template <-> stored document conversion."""

from __future__ import annotations

import uuid

import pytest

from src.forms.conversion import definition_from_document, document_from_definition
from src.forms.errors import ValidationError
from src.models.enums import FieldType
from src.schemas.forms import BackendField, DynamicField, FormTemplateDocument, TemplateDefinition


class TestDocumentFromDefinition:
    def test_fields_written_in_order(self):
        definition = TemplateDefinition(
            name="Genset PM",
            form_type="preventive",
            fields=[
                DynamicField(id="b", name="second", order=2),
                DynamicField(id="a", name="first", order=1, type=FieldType.SELECT, options="Yes, No"),
            ],
        )
        document = document_from_definition(definition)
        assert [f.field_name for f in document.fields] == ["first", "second"]
        assert document.fields[0].options == ["Yes", "No"]

    def test_invalid_company_id(self):
        definition = TemplateDefinition(name="x", form_type="y", company_id="acme")
        with pytest.raises(ValidationError):
            document_from_definition(definition)

    def test_wire_names(self):
        definition = TemplateDefinition(
            name="x", form_type="y", fields=[DynamicField(id="a", name="jobSite", default_value="Yard")],
        )
        dumped = document_from_definition(definition).fields[0].model_dump(by_alias=True, mode="json")
        assert dumped["fieldName"] == "jobSite"
        assert dumped["fieldType"] == "text"
        assert dumped["defaultValue"] == "Yard"


class TestDefinitionFromDocument:
    def test_ids_and_order_from_position(self):
        document = FormTemplateDocument(
            id=uuid.uuid4(),
            name="x",
            form_type="y",
            fields=[
                BackendField(field_name="a", field_type=FieldType.TEXT),
                BackendField(field_name="b", field_type=FieldType.NUMBER, label="B"),
            ],
        )
        definition = definition_from_document(document)
        assert [(f.id, f.order) for f in definition.fields] == [("field-0", 0), ("field-1", 1)]
        assert definition.fields[0].label == "a"
        assert definition.fields[1].label == "B"
        assert definition.id == str(document.id)
