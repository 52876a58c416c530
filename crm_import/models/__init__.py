"""Domain models for the CRM tabular import tool.

This package contains the schema descriptors, record types, per-import
outcome and run-level result models used throughout the application.
"""

from .config_models import DatabaseConfig, FileMappingConfig, ImportConfig, StoreConfig
from .import_outcome import DUPLICATE_ROW, SKIPPED_ROW, ImportOutcome, SkippedRow
from .import_schema import ABSENT, EntityKind, FieldMap, ImportSchema
from .records import CandidateRecord, Contact, Deal, Offer

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "FileMappingConfig",
    "ImportConfig",
    "StoreConfig",
    # Schema models
    "ABSENT",
    "EntityKind",
    "FieldMap",
    "ImportSchema",
    # Records
    "CandidateRecord",
    "Contact",
    "Deal",
    "Offer",
    # Outcome
    "DUPLICATE_ROW",
    "SKIPPED_ROW",
    "ImportOutcome",
    "SkippedRow",
]
