"""Form builder: edits a template's sections and fields before it is saved.

All mutations apply to the builder's own state in call order. Nothing reaches
the Schema Store until `save()` is called with the confirm step done; a failed
save leaves the editable state as it was so the operator can retry.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from src.forms.conversion import definition_from_document, document_from_definition
from src.forms.errors import (
    ConfirmationRequiredError,
    NotFoundError,
    ValidationError,
)
from src.forms.presets import PRESETS
from src.forms.sections import (
    DEFAULT_SECTION_NAME,
    DEFAULT_SECTION_NAMES,
    is_valid_section_name,
    resolve_sections,
)
from src.models.enums import BuilderMode, FieldType, PresetKind
from src.notifications.events import emit
from src.schemas.events import EventType, NotificationLevel, SystemEvent
from src.schemas.forms import (
    DynamicField,
    FormTemplateDocument,
    Section,
    TemplateDefinition,
)
from src.stores.templates import create_template, replace_template

logger = logging.getLogger(__name__)

# Accept both python attribute names and camelCase wire names in update_field()
_FIELD_KEYS: dict[str, str] = {}
for _name in DynamicField.model_fields:
    _FIELD_KEYS[_name] = _name
    _FIELD_KEYS[to_camel(_name)] = _name


class BuilderSnapshot(BaseModel):
    """Serializable builder state (kept in Redis between requests)."""

    mode: BuilderMode = BuilderMode.CREATE
    template: TemplateDefinition = Field(default_factory=TemplateDefinition)


class FormBuilder:
    """Editable template plus the operations of the form builder."""

    def __init__(
        self,
        template: TemplateDefinition | None = None,
        mode: BuilderMode = BuilderMode.CREATE,
    ) -> None:
        self.template = template or TemplateDefinition()
        self.mode = mode

    @classmethod
    def for_document(cls, document: FormTemplateDocument) -> FormBuilder:
        """Open an existing template for editing."""
        return cls(definition_from_document(document), mode=BuilderMode.EDIT)

    @classmethod
    def from_snapshot(cls, snapshot: BuilderSnapshot) -> FormBuilder:
        return cls(snapshot.template, mode=snapshot.mode)

    def to_snapshot(self) -> BuilderSnapshot:
        return BuilderSnapshot(mode=self.mode, template=self.template)

    # ── Read helpers ────────────────────────────────────────────────

    @property
    def fields(self) -> list[DynamicField]:
        return self.template.fields

    @property
    def custom_sections(self) -> list[Section]:
        return self.template.sections

    def sections(self) -> list[Section]:
        return resolve_sections(self.template)

    def _section_names(self) -> set[str]:
        return {s.name for s in self.sections()}

    def _find_field(self, field_id: str) -> DynamicField:
        for field in self.template.fields:
            if field.id == field_id:
                return field
        raise NotFoundError(f"Field {field_id} not found")

    def _require_section(self, section_name: str | None) -> str:
        name = section_name or DEFAULT_SECTION_NAME
        if name not in self._section_names():
            raise ValidationError(f"Unknown section: {name}")
        return name

    # ── Header ──────────────────────────────────────────────────────

    def set_details(
        self,
        *,
        name: str | None = None,
        form_type: str | None = None,
        company_id: str | None = None,
    ) -> None:
        """Update template name, type and owning company (None leaves a value as is)."""
        if name is not None:
            self.template.name = name.strip()
        if form_type is not None:
            self.template.form_type = form_type.strip()
        if company_id is not None:
            self.template.company_id = company_id or None

    # ── Sections ────────────────────────────────────────────────────

    def add_section(self, name: str, label: str) -> Section:
        """Append a custom section after validating its machine key."""
        name = (name or "").strip()
        label = (label or "").strip()
        if not name or not label:
            raise ValidationError("Please provide both field name and label for the section")
        if not is_valid_section_name(name):
            raise ValidationError("Field name must be camelCase with no spaces or special characters")
        existing = self.sections()
        if any(s.name == name for s in existing):
            raise ValidationError("A section with this name already exists")

        section = Section(id=f"custom-{uuid.uuid4().hex}", name=name, label=label, order=len(existing))
        self.template.sections.append(section)
        logger.info("Section added: %s (%s)", name, label)
        return section

    def remove_section(self, section_id: str) -> Section:
        """Remove a custom section and every field tagged with it.

        Default sections are protected, including stored overrides of a
        default: the call fails and nothing changes.
        """
        section = next((s for s in self.template.sections if s.id == section_id), None)
        if section is None or section.name in DEFAULT_SECTION_NAMES:
            raise ValidationError("Cannot remove default sections")

        self.template.sections = [s for s in self.template.sections if s.id != section_id]
        before = len(self.template.fields)
        self.template.fields = [f for f in self.template.fields if f.section != section.name]
        logger.info(
            "Section removed: %s (%d fields dropped)",
            section.name,
            before - len(self.template.fields),
        )
        return section

    # ── Fields ──────────────────────────────────────────────────────

    def add_field(self, section_name: str | None = None) -> DynamicField:
        """Append a blank text field to a section."""
        section = self._require_section(section_name)
        field = DynamicField(
            id=uuid.uuid4().hex,
            type=FieldType.TEXT,
            required=False,
            placeholder="",
            order=len(self.template.fields),
            section=section,
        )
        self.template.fields.append(field)
        return field

    def add_preset_fields(self, kind: PresetKind | str, section_name: str | None = None) -> list[DynamicField]:
        """Stamp the customer or engine preset bundle into a section."""
        try:
            preset = PRESETS[PresetKind(kind)]
        except ValueError as exc:
            raise ValidationError(f"Unknown preset: {kind}") from exc
        section = self._require_section(section_name)

        start = len(self.template.fields)
        added = [
            DynamicField(
                id=f"{uuid.uuid4().hex}-{offset + 1}",
                name=entry.name,
                label=entry.label,
                type=entry.type,
                required=False,
                order=start + offset,
                section=section,
            )
            for offset, entry in enumerate(preset)
        ]
        self.template.fields.extend(added)
        logger.info("Added %d %s preset fields to %s", len(added), PresetKind(kind).value, section)
        return added

    def update_field(self, field_id: str, updates: dict[str, Any]) -> DynamicField:
        """Shallow-merge attributes into a field (options may be comma-separated text)."""
        current = self._find_field(field_id)
        merged = current.model_dump()
        for key, value in updates.items():
            attr = _FIELD_KEYS.get(key)
            if attr is None or attr == "id":
                raise ValidationError(f"Unknown field attribute: {key}")
            merged[attr] = value
        try:
            updated = DynamicField.model_validate(merged)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        self.template.fields = [updated if f.id == field_id else f for f in self.template.fields]
        return updated

    def remove_field(self, field_id: str) -> DynamicField:
        field = self._find_field(field_id)
        self.template.fields = [f for f in self.template.fields if f.id != field_id]
        return field

    # ── Save ────────────────────────────────────────────────────────

    def validate(self) -> None:
        """Local checks before anything is sent to the store."""
        if not self.template.name:
            raise ValidationError("Form name is required")
        if not self.template.form_type:
            raise ValidationError("Form type is required")
        if not self.template.company_id:
            raise ValidationError("Company is required")
        known = self._section_names()
        for field in self.template.fields:
            if not field.name:
                raise ValidationError(f"Field {field.id} has no name")
            if (field.section or DEFAULT_SECTION_NAME) not in known:
                raise ValidationError(f"Field {field.name} references unknown section {field.section}")

    async def save(self, db: AsyncSession, *, confirmed: bool, actor: str | None = None) -> FormTemplateDocument:
        """Create or replace the template at the Schema Store.

        Requires the confirm step. On failure the error propagates and the
        builder state is left exactly as it was.
        """
        if not confirmed:
            raise ConfirmationRequiredError(
                "Confirm to create this form" if self.mode == BuilderMode.CREATE else "Confirm to update this form"
            )
        self.validate()
        document = document_from_definition(self.template)

        if self.mode == BuilderMode.CREATE:
            row = await create_template(db, document)
            event_type, message = EventType.TEMPLATE_CREATED, "Form created successfully!"
        else:
            if not self.template.id:
                raise ValidationError("Cannot update a form that was never saved")
            row = await replace_template(db, self.template.id, document)
            event_type, message = EventType.TEMPLATE_UPDATED, "Form updated successfully!"

        saved = FormTemplateDocument.model_validate(row)
        self.template.id = str(saved.id)
        self.mode = BuilderMode.EDIT

        await emit(SystemEvent(
            event_type=event_type,
            entity_id=saved.id,
            actor_id=actor,
            actor_role="operator",
            message=message,
            level=NotificationLevel.SUCCESS,
            data={"name": saved.name, "fields": len(saved.fields), "sections": len(saved.sections)},
            source_module="forms.builder",
        ))
        return saved
