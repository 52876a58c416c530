from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Declarative import schema models for the CRM tabular import tool.

An ImportSchema is constant data: which logical fields an entity kind has,
which header keywords select each field, how the raw cell is coerced, what
makes a row acceptable and which value identifies a record for dedup.
The same pipeline serves every entity kind by reading these descriptors.
"""

__all__ = [
    "EntityKind",
    "Coerce",
    "Categorical",
    "FieldRule",
    "PreferredColumn",
    "Composite",
    "ImportSchema",
    "FieldMap",
    "ABSENT",
]

# Column index for a logical field that was not found in the header
ABSENT = -1

FieldMap = dict[str, int]


class EntityKind(Enum):
    """Schema id: which import call-site the file belongs to."""
    CONTACT = "contact"
    DEAL = "deal"
    OFFER = "offer"

    @classmethod
    def parse(cls, value: EntityKind | str) -> EntityKind:
        if isinstance(value, EntityKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown entity kind: {value!r}") from None


class Coerce(Enum):
    """How a raw cell string is turned into a typed value."""
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    CATEGORY = "category"
    DATE = "date"


@dataclass(frozen=True)
class Categorical:
    """Closed enumeration matched by keyword substring.

    A cell equal to a value (case-insensitive) is that value. Otherwise choices
    are checked in order and the first value whose keyword occurs in the
    lowercased cell wins. Anything else gets ``fallback``.
    """
    choices: tuple[tuple[str, tuple[str, ...]], ...]
    fallback: str

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(value for value, _ in self.choices)

    def match(self, raw: str) -> str:
        lowered = raw.strip().lower()
        if not lowered:
            return self.fallback
        for value in self.values:
            if lowered == value.lower():
                return value
        for value, keywords in self.choices:
            if any(k in lowered for k in keywords):
                return value
        return self.fallback


@dataclass(frozen=True)
class FieldRule:
    """One logical field of a schema and its header keyword rules."""
    name: str
    keywords: tuple[str, ...]  # include: compact header must contain one of these
    avoid: tuple[str, ...] = ()  # reject the header if it contains any of these
    coerce: Coerce = Coerce.TEXT
    category: Categorical | None = None
    default: Any = None  # None -> coercion default ("" / 0.0 / fallback)
    keep_blank: bool = False  # category only: leave empty cells empty

    def matches(self, compact_header: str) -> bool:
        if not compact_header:
            return False
        if not any(k in compact_header for k in self.keywords):
            return False
        return not any(a in compact_header for a in self.avoid)


@dataclass(frozen=True)
class PreferredColumn:
    """Header that must contain one keyword from every group (lowercase form).

    Used for export conventions such as ``E-mail 1 - Value`` where a stricter
    two-keyword check should beat the generic keyword match.
    """
    field: str
    require_all: tuple[tuple[str, ...], ...]

    def matches(self, lowered_header: str) -> bool:
        return all(any(k in lowered_header for k in group) for group in self.require_all)


@dataclass(frozen=True)
class Composite:
    """Logical field assembled from part columns when it has no column itself."""
    target: str
    parts: tuple[str, ...]


@dataclass(frozen=True)
class ImportSchema:
    """Fixed descriptor per entity kind."""
    kind: EntityKind
    fields: tuple[FieldRule, ...]
    template: tuple[str, ...]  # canonical column order (positional fallback + template export)
    template_labels: tuple[str, ...]
    template_example: tuple[str, ...]
    record_type: type
    table_name: str
    fallback_trigger: tuple[str, ...] = ()  # empty -> fallback only when nothing mapped
    preferred: tuple[PreferredColumn, ...] = ()
    composites: tuple[Composite, ...] = ()
    accept_if_any: tuple[str, ...] = ()
    min_filled_cells: int = 0
    name_field: str | None = None
    name_email_field: str | None = None
    dedup_field: str | None = None  # None -> no duplicate detection for this kind
    field_names: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_names", tuple(f.name for f in self.fields))

    def rule(self, name: str) -> FieldRule:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    @property
    def email_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.coerce is Coerce.EMAIL)
