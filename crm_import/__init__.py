"""Tabular import of CRM contacts, deals and offers.

Delimited text (comma / semicolon / tab) and .xlsx exports from address books
and MLS tools are mapped onto the CRM's own schemas, validated, deduplicated
and appended to a record store.
"""

__version__ = "0.1.0"
