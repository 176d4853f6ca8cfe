"""Section model: the fixed default sections and ordering/lookup rules.

Every template implicitly owns the six default sections. Custom sections are
stored with the template; a stored section whose name matches a default one
replaces that default (this is how a template can number the defaults).
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from src.schemas.forms import DynamicField, Section, TemplateDefinition

# Machine key pattern for section names (camelCase, no separators)
SECTION_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*$")

DEFAULT_SECTIONS: tuple[Section, ...] = (
    Section(id="basicInformation", name="basicInformation", label="Basic Information", order=0),
    Section(id="engineInformation", name="engineInformation", label="Engine Information", order=1),
    Section(id="serviceDetails", name="serviceDetails", label="Service Details", order=2),
    Section(id="warrantyCoverage", name="warrantyCoverage", label="Warranty Coverage", order=3),
    Section(id="servicesSummary", name="servicesSummary", label="Services Summary", order=4),
    Section(id="signatures", name="signatures", label="Signatures", order=5),
)

DEFAULT_SECTION_NAMES: frozenset[str] = frozenset(s.name for s in DEFAULT_SECTIONS)

# Untagged fields land here
DEFAULT_SECTION_NAME = DEFAULT_SECTIONS[0].name


def is_valid_section_name(name: str) -> bool:
    return bool(SECTION_NAME_PATTERN.match(name))


def section_of(field: DynamicField) -> str:
    """The section a field renders in, defaulting untagged fields."""
    return field.section or DEFAULT_SECTION_NAME


def humanize_section_name(name: str) -> str:
    """Derive a display label from a camelCase key: 'newSection' -> 'New Section'."""
    spaced = re.sub(r"([A-Z])", r" \1", name).strip()
    return spaced[:1].upper() + spaced[1:]


def resolve_sections(template: TemplateDefinition | Iterable[Section]) -> list[Section]:
    """Ordered union of the default sections and the template's custom ones.

    Sorted by `section_number` when every section in the set has one, else by
    `order`; ties keep insertion order (defaults first, then custom sections
    as stored).
    """
    custom = list(template.sections if isinstance(template, TemplateDefinition) else template)
    overrides = {s.name: s for s in custom if s.name in DEFAULT_SECTION_NAMES}

    merged = [overrides.get(s.name, s) for s in DEFAULT_SECTIONS]
    merged.extend(s for s in custom if s.name not in DEFAULT_SECTION_NAMES)

    if all(s.section_number is not None for s in merged):
        keyed = [(s.section_number, idx, s) for idx, s in enumerate(merged)]
    else:
        keyed = [(s.order, idx, s) for idx, s in enumerate(merged)]
    return [s for _, _, s in sorted(keyed, key=lambda k: (k[0], k[1]))]


def render_sections(template: TemplateDefinition) -> list[Section]:
    """Sections to render: the resolved set plus any section key that only
    appears on a field (older templates), labelled from the key itself."""
    sections = resolve_sections(template)
    known = {s.name for s in sections}
    next_order = len(sections)
    for field in template.fields:
        name = section_of(field)
        if name not in known:
            sections.append(Section(id=name, name=name, label=humanize_section_name(name), order=next_order))
            known.add(name)
            next_order += 1
    return sections


def fields_for_section(template: TemplateDefinition, section_name: str) -> list[DynamicField]:
    """Fields tagged with `section_name`, in render order."""
    matching = [f for f in template.fields if section_of(f) == section_name]
    return sorted(matching, key=lambda f: f.order)
