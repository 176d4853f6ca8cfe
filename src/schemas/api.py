"""Request/response bodies of the dashboard API (builder, fill-up, records)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.enums import BuilderMode, PresetKind, RendererMode, RendererState
from src.schemas.forms import DynamicField, FieldValue, Section, TemplateDefinition


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Builder ──────────────────────────────────────────────────────────


class BuilderOpen(_ApiModel):
    """Start a builder session; with a template id it edits that template."""

    template_id: str | None = None


class TemplateDetails(_ApiModel):
    name: str | None = None
    form_type: str | None = None
    company_id: str | None = None


class SectionCreate(_ApiModel):
    name: str
    label: str


class FieldCreate(_ApiModel):
    section: str | None = None


class PresetCreate(_ApiModel):
    kind: PresetKind
    section: str | None = None


class Confirmation(_ApiModel):
    """The blocking confirm step of saves, record edits and deletes."""

    confirm: bool = False


class BuilderView(_ApiModel):
    session_id: str
    mode: BuilderMode
    template: TemplateDefinition
    sections: list[Section]


# ── Fill-up ──────────────────────────────────────────────────────────


class FillOpen(_ApiModel):
    template_id: str


class FieldValueIn(_ApiModel):
    value: Any


class OptionToggle(_ApiModel):
    option: str
    checked: bool


class AutocompleteInput(_ApiModel):
    text: str = ""


class EntitySelection(_ApiModel):
    entity_id: str


class SubmitRequest(_ApiModel):
    confirm: bool = False
    job_order: str | None = None


class FieldView(_ApiModel):
    field: DynamicField
    value: FieldValue | None = None
    display: str | None = None
    autocomplete: PresetKind | None = None


class SectionView(_ApiModel):
    section: Section
    fields: list[FieldView]


class FillView(_ApiModel):
    session_id: str
    state: RendererState
    mode: RendererMode
    template_id: str | None = None
    template_name: str | None = None
    record_id: str | None = None
    job_order: str | None = None
    has_fields: bool
    can_submit: bool
    active_dropdown: str | None = None
    sections: list[SectionView] = Field(default_factory=list)


class Suggestion(_ApiModel):
    id: str
    label: str
    detail: str | None = None
