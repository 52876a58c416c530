from __future__ import annotations

import re
import uuid
from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Union

"""CRM record models produced by a successful row import.

These are the CandidateRecord types: fully coerced, schema-typed values that
are not yet known to be unique. Only accepted records are handed to the
persistence store.

``from_dict`` also reads the browser CRM's camelCase records
(``clientName``, ``propertyAddress``) so an existing store can seed dedup.
"""

__all__ = [
    "Contact",
    "Deal",
    "Offer",
    "CandidateRecord",
    "record_field_names",
]


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _new_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


class _RecordMixin:
    # ストア側のキー名 -> フィールド名 (camelCase 変換で届かないもの)
    store_aliases: ClassVar[dict[str, str]] = {}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Any:
        """Build a record from a stored dict; unknown keys are ignored.

        Exact field names win over aliased or camelCase keys.

        Raises:
            TypeError: a required field is missing
        """
        names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        kwargs = {k: v for k, v in data.items() if k in names}
        for key, value in data.items():
            name = cls.store_aliases.get(key) or _snake_case(key)
            if name in names:
                kwargs.setdefault(name, value)
        return cls(**kwargs)


@dataclass(frozen=True)
class Contact(_RecordMixin):
    name: str
    email: str = ""
    phone: str = ""
    type: str = "Lead"
    notes: str = ""
    id: str = field(default_factory=lambda: _new_id("c"))


@dataclass(frozen=True)
class Deal(_RecordMixin):
    store_aliases: ClassVar[dict[str, str]] = {"type": "deal_type"}

    address: str
    client_name: str
    mls_number: str = ""
    price: float = 0.0
    deal_type: str = "Sale"
    status: str = "Lead"
    commission_rate: float = 0.0
    notes: str = ""
    id: str = field(default_factory=lambda: _new_id("d"))


@dataclass(frozen=True)
class Offer(_RecordMixin):
    property_address: str
    client_name: str
    buyer_email: str = ""
    co_buyer_name: str = ""
    co_buyer_email: str = ""
    buyer_address: str = ""
    amount: float = 0.0
    earnest_money_percent: float = 0.0
    loan_type: str = ""
    status: str = "Pending"
    submitted_date: str = ""
    notes: str = ""
    id: str = field(default_factory=lambda: _new_id("o"))


CandidateRecord = Union[Contact, Deal, Offer]


def record_field_names(record_type: type) -> list[str]:
    """Data columns of a record type, ``id`` first (store column order)."""
    names = [f.name for f in fields(record_type) if f.name != "id"]
    return ["id", *names]
