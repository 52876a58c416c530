from __future__ import annotations

from crm_import.mapping.schemas import CONTACT_SCHEMA, DEAL_SCHEMA
from crm_import.models.records import Contact, Deal
from crm_import.services.dedup import BATCH, EXISTING, Deduplicator, identity_key


def test_identity_key_is_case_and_space_insensitive():
    assert identity_key(Contact(name="a", email=" Jane@Example.COM "), CONTACT_SCHEMA) == "jane@example.com"


def test_empty_email_has_no_identity():
    assert identity_key(Contact(name="a", email=""), CONTACT_SCHEMA) is None


def test_identity_key_from_plain_dict():
    assert identity_key({"name": "a", "email": "X@y.z"}, CONTACT_SCHEMA) == "x@y.z"


def test_existing_duplicate_is_reported_before_batch():
    d = Deduplicator(CONTACT_SCHEMA, existing=[Contact(name="old", email="jane@example.com")])
    assert d.check(Contact(name="new", email="JANE@example.com")) == EXISTING


def test_batch_duplicate():
    d = Deduplicator(CONTACT_SCHEMA)
    first = Contact(name="a", email="a@x.io")
    assert d.check(first) is None
    d.accept(first)
    assert d.check(Contact(name="b", email="A@X.IO")) == BATCH


def test_blank_emails_never_collide():
    d = Deduplicator(CONTACT_SCHEMA)
    a = Contact(name="a")
    d.accept(a)
    assert d.check(Contact(name="a")) is None


def test_deals_are_never_duplicates():
    existing = [Deal(address="1 Main", client_name="x", mls_number="ML1")]
    d = Deduplicator(DEAL_SCHEMA, existing=existing)
    again = Deal(address="1 Main", client_name="x", mls_number="ML1")
    assert d.check(again) is None
    d.accept(again)
    assert d.check(again) is None
