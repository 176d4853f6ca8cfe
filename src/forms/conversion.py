"""Conversion between the editable template and the Schema Store document."""

from __future__ import annotations

import uuid

from src.forms.errors import ValidationError
from src.schemas.forms import (
    BackendField,
    DynamicField,
    FormTemplateDocument,
    TemplateDefinition,
)


def to_backend_field(field: DynamicField) -> BackendField:
    return BackendField(
        field_name=field.name,
        field_type=field.type,
        required=field.required,
        label=field.label,
        placeholder=field.placeholder,
        options=list(field.options),
        default_value=field.default_value,
        validation=field.validation,
        section=field.section,
    )


def from_backend_field(field: BackendField, index: int) -> DynamicField:
    """Stored fields carry no id/order; both are derived from list position."""
    return DynamicField(
        id=f"field-{index}",
        name=field.field_name,
        label=field.label or field.field_name,
        type=field.field_type,
        required=field.required,
        placeholder=field.placeholder,
        options=field.options or [],
        default_value=field.default_value,
        validation=field.validation,
        order=index,
        section=field.section,
    )


def document_from_definition(definition: TemplateDefinition) -> FormTemplateDocument:
    """Flatten the editable template into its store document.

    Fields are written in render order (stable on `order`) so that reloading,
    which re-derives `order` from position, keeps the same ordering.
    """
    ordered = sorted(definition.fields, key=lambda f: f.order)
    try:
        company_id = uuid.UUID(definition.company_id) if definition.company_id else None
    except ValueError as exc:
        raise ValidationError(f"Invalid company id: {definition.company_id}") from exc
    return FormTemplateDocument(
        id=uuid.UUID(definition.id) if definition.id else None,
        name=definition.name,
        form_type=definition.form_type,
        company_id=company_id,
        fields=[to_backend_field(f) for f in ordered],
        sections=list(definition.sections),
    )


def definition_from_document(document: FormTemplateDocument) -> TemplateDefinition:
    return TemplateDefinition(
        id=str(document.id) if document.id else None,
        name=document.name,
        form_type=document.form_type,
        company_id=str(document.company_id) if document.company_id else None,
        fields=[from_backend_field(f, i) for i, f in enumerate(document.fields)],
        sections=list(document.sections),
    )
