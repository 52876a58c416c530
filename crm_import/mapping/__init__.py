"""Header -> logical field mapping and the per-entity import schemas."""

from .header_mapper import build_field_map, mapped_fields, normalize_header
from .schemas import CONTACT_SCHEMA, DEAL_SCHEMA, OFFER_SCHEMA, get_schema

__all__ = [
    "CONTACT_SCHEMA",
    "DEAL_SCHEMA",
    "OFFER_SCHEMA",
    "build_field_map",
    "get_schema",
    "mapped_fields",
    "normalize_header",
]
