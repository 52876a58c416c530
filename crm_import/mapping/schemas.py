from __future__ import annotations

from ..models.import_schema import (
    Categorical,
    Coerce,
    Composite,
    EntityKind,
    FieldRule,
    ImportSchema,
    PreferredColumn,
)
from ..models.records import Contact, Deal, Offer

"""ImportSchema constants for Contacts, Deals and Offers.

Keyword lists are matched against the compact header form (lowercase,
alphanumerics only), so ``E-mail 1 - Value`` is seen as ``email1value``.
Avoid-lists keep fields with overlapping vocabularies apart: a
``Phone Type`` column must never become the phone or the contact type.

The ``template`` order of each schema is the positional fallback order and the
column order of the downloadable template file; keep them in sync.
"""

__all__ = [
    "CONTACT_TYPES",
    "DEAL_TYPES",
    "DEAL_STATUSES",
    "OFFER_STATUSES",
    "LOAN_TYPES",
    "CONTACT_SCHEMA",
    "DEAL_SCHEMA",
    "OFFER_SCHEMA",
    "get_schema",
]

CONTACT_TYPES = Categorical(
    choices=(
        ("Buyer", ("buyer", "buy", "purchaser", "tenant")),
        ("Seller", ("seller", "sell", "owner", "landlord")),
        ("Vendor", ("vendor", "supplier", "contractor", "lender", "inspector")),
        ("Lead", ("lead", "prospect")),
        ("Other", ("other",)),
    ),
    fallback="Lead",
)

DEAL_TYPES = Categorical(
    choices=(
        ("Rental", ("rent", "lease")),
        ("Sale", ("sale", "sell", "sold", "purchase")),
    ),
    fallback="Sale",
)

DEAL_STATUSES = Categorical(
    choices=(
        ("Under Contract", ("under contract", "contract", "pending", "escrow")),
        ("Closed", ("closed", "sold", "settled")),
        ("Lost", ("lost", "expired", "withdrawn", "cancel", "terminated")),
        ("Active", ("active", "coming soon", "new", "listed")),
        ("Lead", ("lead", "prospect")),
    ),
    fallback="Lead",
)

OFFER_STATUSES = Categorical(
    choices=(
        ("Accepted", ("accept",)),
        ("Rejected", ("reject", "declin")),
        ("Countered", ("counter",)),
        ("Withdrawn", ("withdraw",)),
        ("Pending", ("pending", "submitted", "open")),
    ),
    fallback="Pending",
)

LOAN_TYPES = Categorical(
    choices=(
        ("Cash", ("cash",)),
        ("FHA", ("fha",)),
        ("Conventional", ("conv",)),
        ("VA", ("va loan", "veteran")),
    ),
    fallback="Other",
)

_LABEL_WORDS = ("type", "label")


CONTACT_SCHEMA = ImportSchema(
    kind=EntityKind.CONTACT,
    fields=(
        FieldRule(
            "name",
            keywords=("name", "contact"),
            avoid=(
                "first", "given", "last", "family", "surname", "middle",
                "nick", "phonetic", "company", "organization", "file", "user",
                "type", "email", "mail", "phone",
            ),
        ),
        FieldRule("first_name", keywords=("first", "given"), avoid=("email", "mail", "phone")),
        FieldRule(
            "last_name",
            keywords=("last", "family", "surname"),
            avoid=("email", "mail", "phone", "contacted", "modified", "updated"),
        ),
        FieldRule(
            "email",
            keywords=("email", "mail"),
            avoid=_LABEL_WORDS + ("mailing",),
            coerce=Coerce.EMAIL,
        ),
        FieldRule(
            "phone",
            keywords=("phone", "mobile", "cell", "tel"),
            avoid=_LABEL_WORDS,
        ),
        FieldRule(
            "type",
            keywords=("type", "category", "role", "group", "status"),
            avoid=("email", "mail", "phone", "mobile", "cell", "tel", "address"),
            coerce=Coerce.CATEGORY,
            category=CONTACT_TYPES,
        ),
        FieldRule("notes", keywords=("note", "comment", "memo", "description")),
    ),
    template=("name", "email", "phone", "type", "notes"),
    template_labels=("Name", "Email", "Phone", "Type", "Notes"),
    template_example=("Jane Doe", "jane@example.com", "555-0100", "Buyer", "Pre-approved, wants 3 bed"),
    record_type=Contact,
    table_name="contacts",
    fallback_trigger=("name", "first_name", "last_name", "email"),
    preferred=(
        PreferredColumn("email", require_all=(("email", "e-mail"), ("value",))),
        PreferredColumn("phone", require_all=(("phone",), ("value",))),
    ),
    composites=(Composite("name", parts=("first_name", "last_name")),),
    accept_if_any=("name", "email"),
    name_field="name",
    name_email_field="email",
    dedup_field="email",
)


DEAL_SCHEMA = ImportSchema(
    kind=EntityKind.DEAL,
    fields=(
        FieldRule("mls_number", keywords=("mls", "listingid", "listingnumber")),
        FieldRule(
            "address",
            keywords=("address", "street", "property", "location"),
            avoid=("email", "mail", "type", "price", "agent"),
        ),
        FieldRule(
            "client_name",
            keywords=("client", "owner", "seller", "buyer", "contact", "name"),
            avoid=("agent", "email", "mail", "phone", "street", "address", "file"),
        ),
        FieldRule(
            "price",
            keywords=("price", "amount", "value", "cost"),
            avoid=("commission", "rate", "percent", "sqft"),
            coerce=Coerce.NUMBER,
        ),
        FieldRule(
            "deal_type",
            keywords=("type", "kind", "transaction"),
            avoid=("property", "loan", "phone", "email"),
            coerce=Coerce.CATEGORY,
            category=DEAL_TYPES,
        ),
        FieldRule(
            "status",
            keywords=("status", "stage"),
            coerce=Coerce.CATEGORY,
            category=DEAL_STATUSES,
            default="Lead",
        ),
        FieldRule("commission_rate", keywords=("commission", "split"), coerce=Coerce.NUMBER),
        FieldRule("notes", keywords=("note", "comment", "remark", "description")),
    ),
    template=(
        "mls_number", "address", "client_name", "price",
        "deal_type", "status", "commission_rate", "notes",
    ),
    template_labels=(
        "MLS Number", "Address", "Client Name", "Price",
        "Type", "Status", "Commission Rate", "Notes",
    ),
    template_example=(
        "ML81234567", "124 Maple Ave, Springfield", "Sarah Jenkins", "$450,000",
        "Sale", "Active", "2.5", "Needs painting first",
    ),
    record_type=Deal,
    table_name="deals",
    min_filled_cells=2,
    name_field="client_name",
)


OFFER_SCHEMA = ImportSchema(
    kind=EntityKind.OFFER,
    fields=(
        FieldRule(
            "property_address",
            keywords=("property", "address", "street", "listing"),
            avoid=("buyer", "email", "mail", "price", "type"),
        ),
        FieldRule(
            "client_name",
            keywords=("buyer", "client", "purchaser", "name"),
            avoid=("email", "mail", "address", "phone", "agent", "cobuyer", "secondbuyer", "file"),
        ),
        FieldRule(
            "buyer_email",
            keywords=("email", "mail"),
            avoid=("cobuyer", "secondbuyer", "mailing", "address") + _LABEL_WORDS,
            coerce=Coerce.EMAIL,
        ),
        FieldRule("co_buyer_name", keywords=("cobuyer", "secondbuyer"), avoid=("email", "mail", "address", "phone")),
        FieldRule("co_buyer_email", keywords=("cobuyeremail", "cobuyermail", "secondbuyeremail"), coerce=Coerce.EMAIL),
        FieldRule("buyer_address", keywords=("buyeraddress", "buyermailing"), avoid=("cobuyer",)),
        FieldRule(
            "amount",
            keywords=("amount", "price", "offer"),
            avoid=("earnest", "emd", "deposit", "percent", "date", "status", "note", "loan"),
            coerce=Coerce.NUMBER,
        ),
        FieldRule("earnest_money_percent", keywords=("earnest", "emd", "deposit"), coerce=Coerce.NUMBER),
        FieldRule(
            "loan_type",
            keywords=("loan", "financing", "finance"),
            coerce=Coerce.CATEGORY,
            category=LOAN_TYPES,
            keep_blank=True,
        ),
        FieldRule(
            "status",
            keywords=("status",),
            coerce=Coerce.CATEGORY,
            category=OFFER_STATUSES,
            default="Pending",
        ),
        FieldRule("submitted_date", keywords=("submitted", "date"), coerce=Coerce.DATE),
        FieldRule("notes", keywords=("note", "comment", "remark")),
    ),
    template=(
        "property_address", "client_name", "buyer_email", "amount",
        "earnest_money_percent", "loan_type", "status", "submitted_date", "notes",
    ),
    template_labels=(
        "Property Address", "Buyer Name", "Buyer Email", "Offer Amount",
        "Earnest Money %", "Loan Type", "Status", "Submitted Date", "Notes",
    ),
    template_example=(
        "88 Skyview Penthouse", "Michael Bond", "michael@example.com", "$1,250,000",
        "3", "Conventional", "Pending", "2024-05-01", "Escalation clause to 1.3M",
    ),
    record_type=Offer,
    table_name="offers",
    fallback_trigger=("property_address", "client_name", "amount"),
    min_filled_cells=2,
    name_field="client_name",
    name_email_field="buyer_email",
)


_SCHEMAS: dict[EntityKind, ImportSchema] = {
    EntityKind.CONTACT: CONTACT_SCHEMA,
    EntityKind.DEAL: DEAL_SCHEMA,
    EntityKind.OFFER: OFFER_SCHEMA,
}


def get_schema(kind: EntityKind | str) -> ImportSchema:
    return _SCHEMAS[EntityKind.parse(kind)]
