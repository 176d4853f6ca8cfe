"""Fill-up form renderer: turns a stored template into an input session.

Session lifecycle:

    LOADING --loaded--> READY --submit--> SUBMITTING --submitted--> READY (values cleared)
       |                  ^                    |
       +--failed--> NOT_FOUND                  +--failed--> READY (values kept)

NOT_FOUND only leaves through a new `load_template()`. While SUBMITTING any
further submit is refused, which is what blocks duplicate submissions.
The same renderer, opened with `open_record()`, edits an existing record in
place (the save then needs the confirm step and issues an update).
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.forms.autocomplete import autocomplete_kind, display_label, fill_values, filter_entities
from src.forms.conversion import definition_from_document
from src.forms.errors import (
    ConfirmationRequiredError,
    FetchError,
    FormError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.forms.records import flatten_record_data
from src.forms.sections import fields_for_section, render_sections, section_of
from src.forms.values import FieldValues
from src.models.enums import PresetKind, RendererMode, RendererState
from src.notifications.events import emit
from src.schemas.entities import CustomerOut, EngineOut
from src.schemas.events import EventType, NotificationLevel, SystemEvent
from src.schemas.forms import (
    DynamicField,
    FieldValue,
    FormRecordCreate,
    FormRecordOut,
    FormRecordUpdate,
    Section,
    SectionData,
    TemplateDefinition,
)
from src.stores.entities import list_customers, list_engines
from src.stores.records import create_record, update_record
from src.stores.templates import get_template_document

logger = logging.getLogger(__name__)

# {current_state: {trigger: next_state}}
TRANSITIONS: dict[RendererState, dict[str, RendererState]] = {
    RendererState.LOADING: {
        "loaded": RendererState.READY,
        "failed": RendererState.NOT_FOUND,
    },
    RendererState.READY: {
        "submit": RendererState.SUBMITTING,
        "load": RendererState.LOADING,
    },
    RendererState.SUBMITTING: {
        "submitted": RendererState.READY,
        "failed": RendererState.READY,
    },
    RendererState.NOT_FOUND: {
        "load": RendererState.LOADING,
    },
}


class RendererSnapshot(BaseModel):
    """Serializable renderer session (kept in Redis between requests)."""

    state: RendererState = RendererState.LOADING
    mode: RendererMode = RendererMode.SUBMIT
    template_id: str | None = None
    template: TemplateDefinition | None = None
    record_id: str | None = None
    job_order: str | None = None
    values: dict[str, FieldValue] = Field(default_factory=dict)
    displays: dict[str, str] = Field(default_factory=dict)
    active_dropdown: str | None = None
    entities_loaded: bool = False
    customers: list[CustomerOut] = Field(default_factory=list)
    engines: list[EngineOut] = Field(default_factory=list)


class FormRenderer:
    """One fill-up (or record edit) session."""

    def __init__(self, snapshot: RendererSnapshot | None = None) -> None:
        snap = snapshot or RendererSnapshot()
        self.state = snap.state
        self.mode = snap.mode
        self.template_id = snap.template_id
        self.template = snap.template
        self.record_id = snap.record_id
        self.job_order = snap.job_order
        self.active_dropdown = snap.active_dropdown
        self.entities_loaded = snap.entities_loaded
        self.customers = list(snap.customers)
        self.engines = list(snap.engines)
        self._values = FieldValues(self.fields, snap.values, snap.displays)

    def to_snapshot(self) -> RendererSnapshot:
        return RendererSnapshot(
            state=self.state,
            mode=self.mode,
            template_id=self.template_id,
            template=self.template,
            record_id=self.record_id,
            job_order=self.job_order,
            values=self._values.values,
            displays=self._values.displays,
            active_dropdown=self.active_dropdown,
            entities_loaded=self.entities_loaded,
            customers=self.customers,
            engines=self.engines,
        )

    # ── State machine ───────────────────────────────────────────────

    def _transition(self, trigger: str) -> RendererState:
        allowed = TRANSITIONS.get(self.state, {})
        if trigger not in allowed:
            msg = f"Cannot {trigger} while {self.state.value} (valid: {list(allowed)})"
            raise InvalidTransitionError(msg)
        old = self.state
        self.state = allowed[trigger]
        logger.debug("Renderer %s --%s--> %s (template=%s)", old.value, trigger, self.state.value, self.template_id)
        return self.state

    def _require_ready(self) -> None:
        if self.state != RendererState.READY:
            raise InvalidTransitionError(f"Form is {self.state.value}, not ready for input")

    # ── Loading ─────────────────────────────────────────────────────

    async def load_template(self, db: AsyncSession, template_id: str) -> TemplateDefinition:
        """Fetch the template and enter READY, or NOT_FOUND on failure."""
        if self.state != RendererState.LOADING:
            self._transition("load")
        self.template_id = str(template_id)
        self.template = None
        self._values = FieldValues([])
        self.active_dropdown = None

        try:
            document = await get_template_document(db, template_id)
        except (NotFoundError, FetchError):
            self._transition("failed")
            logger.warning("Form template %s could not be loaded", template_id)
            raise

        self.template = definition_from_document(document)
        self._values = FieldValues(self.fields)
        self._transition("loaded")
        return self.template

    async def load_entities(self, db: AsyncSession) -> None:
        """Fetch the customer/engine lists once; later calls reuse the cache."""
        if self.entities_loaded:
            return
        try:
            self.customers = [CustomerOut.model_validate(c) for c in await list_customers(db)]
        except FetchError:
            logger.warning("Customer list unavailable, customer autocomplete disabled")
            self.customers = []
        try:
            self.engines = [EngineOut.model_validate(e) for e in await list_engines(db)]
        except FetchError:
            logger.warning("Engine list unavailable, engine autocomplete disabled")
            self.engines = []
        self.entities_loaded = True

    def open_record(self, record: FormRecordOut) -> None:
        """Switch to edit mode, pre-filled from a stored record's data."""
        self._require_ready()
        self.mode = RendererMode.EDIT
        self.record_id = str(record.id)
        self.job_order = record.job_order
        self._values = FieldValues(self.fields)
        known = {f.name for f in self.fields}
        for name, value in flatten_record_data(record.data).items():
            if name not in known:
                continue
            try:
                self._values.set(name, value)
            except ValidationError:
                logger.warning("Record %s: stored %s=%r no longer fits its field", record.id, name, value)

    # ── Read helpers ────────────────────────────────────────────────

    @property
    def fields(self) -> list[DynamicField]:
        return list(self.template.fields) if self.template else []

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)

    @property
    def can_submit(self) -> bool:
        """Submit/reset controls exist only for a ready form with fields."""
        return self.state == RendererState.READY and self.has_fields

    @property
    def values(self) -> dict[str, FieldValue]:
        return self._values.as_dict()

    def sections(self) -> list[tuple[Section, list[DynamicField]]]:
        if self.template is None:
            return []
        return [(s, fields_for_section(self.template, s.name)) for s in render_sections(self.template)]

    def field(self, name: str) -> DynamicField:
        return self._values.field(name)

    def display(self, name: str) -> str:
        return self._values.display(name)

    # ── Input ───────────────────────────────────────────────────────

    def set_field_value(self, name: str, value: Any) -> FieldValue:
        self._require_ready()
        return self._values.set(name, value)

    def toggle_option(self, name: str, option: str, checked: bool) -> list[str]:
        self._require_ready()
        return self._values.toggle(name, option, checked)

    def set_job_order(self, job_order: str | None) -> None:
        self._require_ready()
        self.job_order = job_order or None

    # ── Autocomplete ────────────────────────────────────────────────

    def _entities(self, kind: PresetKind) -> list[Any]:
        return self.customers if kind == PresetKind.CUSTOMER else self.engines

    def _kind_of(self, name: str) -> PresetKind:
        kind = autocomplete_kind(self.field(name))
        if kind is None:
            raise ValidationError(f"{name} has no autocomplete")
        return kind

    def type_autocomplete(self, name: str, text: str) -> list[Any]:
        """Typing into an autocomplete field: update its display text and open its dropdown."""
        self._require_ready()
        kind = self._kind_of(name)
        self._values.set_display(name, text)
        self.active_dropdown = name
        return filter_entities(self._entities(kind), kind, text)

    def suggestions(self, name: str) -> list[Any]:
        kind = self._kind_of(name)
        return filter_entities(self._entities(kind), kind, self._values.display(name))

    def select_entity(self, name: str, entity_id: str) -> dict[str, FieldValue]:
        """Pick a dropdown entry and copy its attributes into recognised fields."""
        self._require_ready()
        kind = self._kind_of(name)
        entity = next((e for e in self._entities(kind) if str(e.id) == str(entity_id)), None)
        if entity is None:
            raise NotFoundError(f"{kind.value.capitalize()} {entity_id} not found")

        label = display_label(entity)
        applied: dict[str, FieldValue] = {name: self._values.select(name, str(entity.id), label)}
        for field_name, value in fill_values(self.fields, entity, kind).items():
            try:
                applied[field_name] = self._values.set(field_name, value)
            except ValidationError:
                logger.warning("Skipped auto-fill of %s with %r", field_name, value)
        self.active_dropdown = None
        return applied

    def close_dropdown(self) -> None:
        """A click outside every autocomplete container."""
        self.active_dropdown = None

    # ── Submit ──────────────────────────────────────────────────────

    def grouped_data(self) -> SectionData:
        """Section-keyed payload: every declared field, defaults filled in."""
        data: SectionData = {}
        for field in self.fields:
            if not field.name:
                continue
            data.setdefault(section_of(field), {})[field.name] = self._values.effective(field.name)
        return data

    def begin_submit(self, *, confirmed: bool = False) -> SectionData:
        """Enter SUBMITTING and freeze the payload; refuses a second submit."""
        if not self.has_fields:
            raise ValidationError("No fields defined for this form")
        if self.mode == RendererMode.EDIT and not confirmed:
            raise ConfirmationRequiredError("Confirm to save changes to this record")
        self._transition("submit")
        return self.grouped_data()

    async def complete_submit(
        self, db: AsyncSession, data: SectionData, *, actor: str | None = None
    ) -> FormRecordOut:
        """Send the payload in one store call and settle the session state."""
        if self.state != RendererState.SUBMITTING:
            raise InvalidTransitionError("No submission in progress")
        try:
            if self.mode == RendererMode.EDIT:
                row = await update_record(db, self.record_id, FormRecordUpdate(
                    company_form_id=self.template_id, job_order=self.job_order, data=data,
                ))
            else:
                row = await create_record(db, FormRecordCreate(
                    company_form_id=self.template_id, job_order=self.job_order, data=data,
                ))
        except FormError as exc:
            self._transition("failed")
            await emit(SystemEvent(
                event_type=EventType.SUBMISSION_FAILED,
                actor_id=actor,
                actor_role="operator",
                message="Failed to update record" if self.mode == RendererMode.EDIT else "Failed to submit form",
                level=NotificationLevel.ERROR,
                data={"template_id": self.template_id, "error": str(exc)},
                source_module="forms.renderer",
            ))
            raise

        self._transition("submitted")
        record = FormRecordOut.model_validate(row)
        if self.mode == RendererMode.SUBMIT:
            self._values.clear()
            self.job_order = None
        self.active_dropdown = None

        await emit(SystemEvent(
            event_type=EventType.RECORD_UPDATED if self.mode == RendererMode.EDIT else EventType.RECORD_SUBMITTED,
            entity_id=record.id,
            actor_id=actor,
            actor_role="operator",
            message="Record updated successfully!" if self.mode == RendererMode.EDIT else "Form submitted successfully!",
            level=NotificationLevel.SUCCESS,
            data={"template_id": self.template_id, "sections": sorted(data)},
            source_module="forms.renderer",
        ))
        return record

    async def submit(self, db: AsyncSession, *, confirmed: bool = False, actor: str | None = None) -> FormRecordOut:
        data = self.begin_submit(confirmed=confirmed)
        return await self.complete_submit(db, data, actor=actor)

    def reset(self) -> None:
        """Clear every entered value without persisting anything."""
        self._require_ready()
        self._values.clear()
        self.active_dropdown = None
