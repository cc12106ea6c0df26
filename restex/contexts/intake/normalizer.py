"""
Resume Schema Normalization

Turns any of the known raw resume shapes into the canonical ResumeModel.

Known shapes:
1. Flat: name, title, experience[] ... at the top level
2. Content-nested: {"content": {...flat...}}
3. Header/sections: {"header": {name, title, contacts...}, "sections": {experience: [...], ...}}

The shape is detected once (detect_shape) and resolved into a SourceView;
every extraction step after that reads through the view and never inspects the
raw union again.

Normalization never fails on missing or placeholder data. The only error is
MalformedInputError, raised when the root is not an object.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Collection, Dict, List, Mapping, Optional, Tuple

from restex.contexts.intake.exceptions import MalformedInputError
from restex.contexts.intake.logger import (
    _log_debug,
    log_normalization_summary,
    log_shape_detected,
)
from restex.contexts.templating.resume_data_structure import (
    Contact,
    ContactKind,
    Education,
    Experience,
    Project,
    ResumeModel,
    infer_contact_kind,
)
from restex.utils.settings import get_empty_sentinels

# Keys (lowercased) accepted as contact kinds, in contact objects and in contacts[].type
CONTACT_KIND_ALIASES: Dict[str, ContactKind] = {
    "email": ContactKind.EMAIL,
    "e-mail": ContactKind.EMAIL,
    "mail": ContactKind.EMAIL,
    "phone": ContactKind.PHONE,
    "mobile": ContactKind.PHONE,
    "tel": ContactKind.PHONE,
    "telephone": ContactKind.PHONE,
    "linkedin": ContactKind.LINKEDIN,
    "linked_in": ContactKind.LINKEDIN,
    "github": ContactKind.GITHUB,
    "website": ContactKind.WEBSITE,
    "web": ContactKind.WEBSITE,
    "url": ContactKind.WEBSITE,
    "site": ContactKind.WEBSITE,
    "portfolio": ContactKind.WEBSITE,
    "homepage": ContactKind.WEBSITE,
}

CANONICAL_KINDS: Dict[str, ContactKind] = {kind.value: kind for kind in ContactKind}

LOCATION_KIND = "location"
CONTACT_OBJECT_KEYS = ("contact", "contact_info")
CONTACT_LIST_KEYS = ("contacts",)
PROJECT_KEYS = ("projects", "featured_project", "featured_projects")


class ResumeShape(str, Enum):
    FLAT = "flat"
    CONTENT = "content"
    HEADER_SECTIONS = "header_sections"


@dataclass(frozen=True)
class SourceView:
    """
    Resolved lookup scopes for one raw resume.

    Attributes:
        shape: Detected raw shape
        root: The raw object itself
        primary: Main source of scalars (content object, header, or root)
        header: Header object when the shape has one, else {}
        sections: Sections object when the shape has one, else {}
    """

    shape: ResumeShape
    root: Mapping[str, Any]
    primary: Mapping[str, Any]
    header: Mapping[str, Any] = field(default_factory=dict)
    sections: Mapping[str, Any] = field(default_factory=dict)

    def scalar_scopes(self) -> List[Mapping[str, Any]]:
        """Scopes searched for identity scalars, most specific first."""
        return _unique_scopes([self.primary, self.header, self.root])

    def array_scopes(self) -> List[Mapping[str, Any]]:
        """Scopes searched for section arrays, most specific first."""
        return _unique_scopes([self.sections, self.primary, self.root])


def _unique_scopes(scopes: List[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    unique = []
    for scope in scopes:
        if scope and all(scope is not seen for seen in unique):
            unique.append(scope)
    return unique


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def detect_shape(raw: Mapping[str, Any]) -> ResumeShape:
    """Decide which of the known raw shapes an input object uses."""
    if isinstance(raw.get("content"), Mapping):
        return ResumeShape.CONTENT
    if isinstance(raw.get("header"), Mapping) or isinstance(raw.get("sections"), Mapping):
        return ResumeShape.HEADER_SECTIONS
    return ResumeShape.FLAT


def resolve_sources(raw: Mapping[str, Any], shape: ResumeShape) -> SourceView:
    """Build the lookup scopes for a detected shape."""
    if shape == ResumeShape.CONTENT:
        content = raw["content"]
        return SourceView(
            shape=shape,
            root=raw,
            primary=content,
            header=_mapping(content.get("header")),
            sections=_mapping(content.get("sections")),
        )

    if shape == ResumeShape.HEADER_SECTIONS:
        header = _mapping(raw.get("header"))
        return SourceView(
            shape=shape,
            root=raw,
            primary=header,
            header=header,
            sections=_mapping(raw.get("sections")),
        )

    return SourceView(shape=shape, root=raw, primary=raw)


# ============================================================================
# Value coercion
# ============================================================================


def _text(value: Any, sentinels: Collection[str]) -> str:
    """Coerce a leaf to a clean string; anything that means "no data" becomes ""."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return "" if stripped in sentinels else stripped
    return ""


def _text_list(value: Any, sentinels: Collection[str], split_commas: bool = False) -> Tuple[str, ...]:
    """
    Coerce a list-ish value to a tuple of non-empty strings.

    A lone string is treated as a one-item list, or split on commas when
    split_commas is set. Empty and sentinel entries are always dropped, even if
    the cleaner already ran.
    """
    if isinstance(value, str):
        items = value.split(",") if split_commas else [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return ()

    texts = (_text(item, sentinels) for item in items)
    return tuple(text for text in texts if text)


def _field(entry: Mapping[str, Any], sentinels: Collection[str], *aliases: str) -> str:
    for alias in aliases:
        text = _text(entry.get(alias), sentinels)
        if text:
            return text
    return ""


def _list_field(
    entry: Mapping[str, Any],
    sentinels: Collection[str],
    *aliases: str,
    split_commas: bool = False,
) -> Tuple[str, ...]:
    for alias in aliases:
        items = _text_list(entry.get(alias), sentinels, split_commas=split_commas)
        if items:
            return items
    return ()


def _scalar(view: SourceView, sentinels: Collection[str], *aliases: str) -> str:
    for scope in view.scalar_scopes():
        text = _field(scope, sentinels, *aliases)
        if text:
            return text
    return ""


def _array(view: SourceView, *aliases: str) -> List[Any]:
    """First non-empty list found under any alias, searching sections, primary, root."""
    for scope in view.array_scopes():
        for alias in aliases:
            value = scope.get(alias)
            if isinstance(value, (list, tuple)) and value:
                return list(value)
    return []


def _raw_value(view: SourceView, *aliases: str) -> Any:
    """First present value under any alias (any type), searching sections, primary, root."""
    for scope in view.array_scopes():
        for alias in aliases:
            if scope.get(alias) is not None:
                return scope[alias]
    return None


# ============================================================================
# Section builders
# ============================================================================


def _contact_kind(raw_kind: Any) -> Optional[ContactKind]:
    if not isinstance(raw_kind, str):
        return None
    return CONTACT_KIND_ALIASES.get(raw_kind.strip().lower())


def _contact_objects(view: SourceView) -> List[Tuple[Mapping[str, Any], bool]]:
    """
    Objects that may carry contact fields, paired with an "aliases allowed" flag.

    Dedicated contact objects accept every alias key; the header and primary
    objects are only scanned for the canonical kind names.
    """
    objects = []
    for scope in view.scalar_scopes():
        for key in CONTACT_OBJECT_KEYS:
            contact_obj = scope.get(key)
            if isinstance(contact_obj, Mapping):
                objects.append((contact_obj, True))
    for scope in view.scalar_scopes():
        objects.append((scope, False))
    return objects


def _build_location(view: SourceView, sentinels: Collection[str]) -> str:
    for contact_obj, _ in _contact_objects(view):
        location = _field(contact_obj, sentinels, LOCATION_KIND)
        if location:
            return location
    return _scalar(view, sentinels, LOCATION_KIND)


def _build_contacts(
    view: SourceView, location: str, sentinels: Collection[str]
) -> Tuple[Tuple[Contact, ...], str]:
    """
    Collect contacts from object and array forms.

    Returns:
        (contacts, location) where location may have been filled from a
        contacts[] entry of type "location"
    """
    contacts: List[Contact] = []
    seen = set()

    def add(kind: ContactKind, value: str) -> None:
        if value and (kind, value) not in seen:
            seen.add((kind, value))
            contacts.append(Contact(kind=kind, value=value))

    # Object form: canonical order within each object
    for contact_obj, aliases_allowed in _contact_objects(view):
        by_kind: Dict[ContactKind, str] = {}
        for key, value in contact_obj.items():
            if aliases_allowed:
                kind = _contact_kind(key)
            else:
                kind = CANONICAL_KINDS.get(key) if isinstance(key, str) else None
            text = _text(value, sentinels)
            if kind is not None and text and kind not in by_kind:
                by_kind[kind] = text
        for kind in ContactKind.ordered():
            if kind in by_kind:
                add(kind, by_kind[kind])

    # Array form: given order
    for entry in _array(view, *CONTACT_LIST_KEYS) or _scalar_list(view, *CONTACT_LIST_KEYS):
        if isinstance(entry, Mapping):
            raw_kind = entry.get("type", entry.get("kind"))
            value = _text(entry.get("value"), sentinels)
            if isinstance(raw_kind, str) and raw_kind.strip().lower() == LOCATION_KIND:
                # Location entries never become contacts
                location = location or value
                continue
            kind = _contact_kind(raw_kind)
        else:
            raw_kind = None
            value = _text(entry, sentinels)
            kind = infer_contact_kind(value) if value else None

        if kind is None:
            if value:
                _log_debug(f"Dropping contact with unknown kind {raw_kind!r}: {value!r}")
            continue
        add(kind, value)

    return tuple(contacts), location


def _scalar_list(view: SourceView, *aliases: str) -> List[Any]:
    """Like _array, but searching the scalar scopes (header before root)."""
    for scope in view.scalar_scopes():
        for alias in aliases:
            value = scope.get(alias)
            if isinstance(value, (list, tuple)) and value:
                return list(value)
    return []


def _date_range(entry: Mapping[str, Any], sentinels: Collection[str]) -> str:
    start = _field(entry, sentinels, "start_date", "startDate", "start")
    end = _field(entry, sentinels, "end_date", "endDate", "end")
    return " - ".join(part for part in (start, end) if part)


def _build_experience(entry: Any, sentinels: Collection[str]) -> Optional[Experience]:
    if not isinstance(entry, Mapping):
        return None

    experience = Experience(
        position=_field(entry, sentinels, "position", "title", "role"),
        company=_field(entry, sentinels, "company", "employer", "organization"),
        location=_field(entry, sentinels, "location"),
        dates=_field(entry, sentinels, "dates") or _date_range(entry, sentinels),
        highlights=_list_field(
            entry, sentinels, "highlights", "bullets", "achievements", "responsibilities", "description"
        ),
        tags=_list_field(entry, sentinels, "tags", split_commas=True),
    )
    return None if experience == Experience() else experience


def _build_education(entry: Any, sentinels: Collection[str]) -> Optional[Education]:
    if not isinstance(entry, Mapping):
        return None

    education = Education(
        degree=_field(entry, sentinels, "degree"),
        institution=_field(entry, sentinels, "institution", "school", "university"),
        location=_field(entry, sentinels, "location"),
        dates=_field(entry, sentinels, "dates", "year", "graduation_date") or _date_range(entry, sentinels),
        details=_list_field(entry, sentinels, "details", "highlights", "courses", "description"),
    )
    return None if education == Education() else education


def _build_project(entry: Any, sentinels: Collection[str]) -> Optional[Project]:
    if isinstance(entry, (str, int, float)):
        name = _text(entry, sentinels)
        return Project(name=name) if name else None
    if not isinstance(entry, Mapping):
        return None

    description = _field(entry, sentinels, "description", "summary")
    if not description:
        description = " ".join(_list_field(entry, sentinels, "description", "summary"))

    project = Project(
        name=_field(entry, sentinels, "name", "title"),
        description=description,
        technologies=_list_field(
            entry, sentinels, "technologies", "tech_stack", "stack", "tags", split_commas=True
        ),
        link=_field(entry, sentinels, "link", "url"),
    )
    return None if project == Project() else project


def flatten_skills(value: Any, sentinels: Collection[str]) -> Tuple[str, ...]:
    """
    Flatten any supported skills shape to one ordered tuple.

    Supported shapes:
    - ["Go", "Rust"]
    - [{"category": "Languages", "items": ["Go", "Rust"]}, ...]
    - {"Languages": ["Go", "Rust"], "Tools": [...]}
    - "Go, Rust"

    Category labels are discarded; group order then item order is preserved.
    """
    if isinstance(value, str):
        return _text_list(value, sentinels, split_commas=True)

    if isinstance(value, Mapping):
        if "items" in value or "skills" in value:
            return flatten_skills(value.get("items", value.get("skills")), sentinels)
        skills: Tuple[str, ...] = ()
        for items in value.values():
            skills += flatten_skills(items, sentinels)
        return skills

    if isinstance(value, (list, tuple)):
        skills = ()
        for item in value:
            if isinstance(item, Mapping):
                if "items" in item or "skills" in item:
                    skills += flatten_skills(item.get("items", item.get("skills")), sentinels)
                else:
                    name = _field(item, sentinels, "name", "skill")
                    skills += (name,) if name else ()
            else:
                text = _text(item, sentinels)
                skills += (text,) if text else ()
        return skills

    return ()


# ============================================================================
# Entry point
# ============================================================================


def normalize(cleaned: Any) -> ResumeModel:
    """
    Normalize raw (ideally pre-cleaned) resume JSON into a ResumeModel.

    Args:
        cleaned: Deserialized JSON value; must be an object

    Returns:
        ResumeModel with every field populated or defaulted

    Raises:
        MalformedInputError: If the root value is not an object

    Example:
        >>> model = normalize({"content": {"name": "Ada", "skills": ["Go", "Not provided"]}})
        >>> model.name, model.skills
        ('Ada', ('Go',))
    """
    if not isinstance(cleaned, Mapping):
        raise MalformedInputError(
            "Resume input must be a JSON object", root_type=type(cleaned).__name__
        )

    sentinels = get_empty_sentinels()
    shape = detect_shape(cleaned)
    view = resolve_sources(cleaned, shape)
    log_shape_detected(shape.value, cleaned.keys())

    location = _build_location(view, sentinels)
    contacts, location = _build_contacts(view, location, sentinels)

    experience = tuple(
        item for item in (_build_experience(entry, sentinels) for entry in _array(view, "experience"))
        if item is not None
    )
    education = tuple(
        item for item in (_build_education(entry, sentinels) for entry in _array(view, "education"))
        if item is not None
    )
    projects = tuple(
        item for item in (_build_project(entry, sentinels) for entry in _array(view, *PROJECT_KEYS))
        if item is not None
    )

    model = ResumeModel(
        name=_scalar(view, sentinels, "name", "full_name"),
        title=_scalar(view, sentinels, "title", "headline"),
        location=location,
        contacts=contacts,
        education=education,
        experience=experience,
        skills=flatten_skills(_raw_value(view, "skills"), sentinels),
        projects=projects,
    )
    log_normalization_summary(model)
    return model
