"""Pydantic schemas for form templates and submissions.

Two shapes exist for a template:
- TemplateDefinition: the editable, in-memory form used by the builder and
  renderer (`DynamicField` + custom `Section` lists).
- FormTemplateDocument: the Schema Store document (`BackendField` list), which
  is what gets written to and read from `company_forms`.

Wire names are camelCase (`fieldName`, `defaultValue`, `sectionNumber`, ...);
Python attributes are snake_case.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.models.enums import FieldType

# A single submitted value: text-ish inputs are strings, number inputs are
# numbers, checkbox groups are the list of ticked options.
FieldValue = Union[str, int, float, list[str]]

# {sectionName: {fieldName: value}}
SectionData = dict[str, dict[str, FieldValue]]


def parse_options(raw: str | list[str] | None) -> list[str]:
    """Turn comma-separated option text into a clean list.

    "Yes, No, ,Maybe" -> ["Yes", "No", "Maybe"]
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, (list, tuple)) and all(isinstance(part, str) for part in raw):
        parts = list(raw)
    else:
        raise ValueError("options must be comma-separated text or a list of strings")
    return [part.strip() for part in parts if part and part.strip()]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Template structure ────────────────────────────────────────────────


class FieldValidation(_CamelModel):
    """Optional constraints carried with a field (not enforced server-side)."""

    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    message: str | None = None


class Section(_CamelModel):
    """A named, ordered grouping of fields."""

    id: str
    name: str
    label: str
    order: int = 0
    section_number: int | None = None


class DynamicField(_CamelModel):
    """A field as edited in the builder and rendered by the fill-up form."""

    id: str
    name: str = ""
    label: str = ""
    type: FieldType = FieldType.TEXT
    required: bool = False
    placeholder: str | None = None
    default_value: FieldValue | None = None
    options: list[str] = Field(default_factory=list)
    validation: FieldValidation | None = None
    order: int = 0
    section: str | None = None

    @field_validator("options", mode="before")
    @classmethod
    def _split_options(cls, v: str | list[str] | None) -> list[str]:
        return parse_options(v)


class BackendField(_CamelModel):
    """A field as persisted in the Schema Store."""

    field_name: str
    field_type: FieldType
    required: bool = False
    label: str | None = None
    placeholder: str | None = None
    options: list[str] | None = None
    default_value: FieldValue | None = None
    validation: FieldValidation | None = None
    section: str | None = None


class TemplateDefinition(_CamelModel):
    """Editable template: header data plus fields and custom sections."""

    id: str | None = None
    name: str = ""
    form_type: str = ""
    company_id: str | None = None
    fields: list[DynamicField] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)


class FormTemplateDocument(_CamelModel):
    """Schema Store document for a template."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID | None = None
    name: str
    form_type: str
    company_id: uuid.UUID | None = None
    fields: list[BackendField] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FormTemplateSummary(_CamelModel):
    """Row in the template list."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    name: str
    form_type: str
    company_id: uuid.UUID | None = None
    created_at: datetime | None = None


# ── Submissions ───────────────────────────────────────────────────────


class FormRecordCreate(_CamelModel):
    """Payload for a new submission."""

    company_form_id: uuid.UUID
    job_order: str | None = None
    data: SectionData


class FormRecordUpdate(_CamelModel):
    """Payload replacing an existing submission."""

    company_form_id: uuid.UUID
    job_order: str | None = None
    data: SectionData


class FormRecordOut(_CamelModel):
    """A stored submission."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: uuid.UUID
    company_form_id: uuid.UUID
    job_order: str | None = None
    data: SectionData = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime | None = None


class RecordPage(_CamelModel):
    """One page of the filtered records list."""

    records: list[FormRecordOut]
    total: int
    page: int
    page_size: int
    total_pages: int
    pages: list[int]
