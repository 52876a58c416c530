from __future__ import annotations

import pytest

from crm_import.mapping.header_mapper import build_field_map
from crm_import.mapping.schemas import get_schema
from crm_import.models.import_schema import EntityKind
from crm_import.services.pipeline import run_import
from crm_import.services.templates import render_template, template_file_name
from crm_import.tabular.tokenizer import tokenize


def test_contact_template_text():
    assert render_template("contact") == (
        "Name,Email,Phone,Type,Notes\n"
        'Jane Doe,jane@example.com,555-0100,Buyer,"Pre-approved, wants 3 bed"\n'
    )


def test_template_file_name():
    assert template_file_name(EntityKind.OFFER) == "offers_template.csv"


@pytest.mark.parametrize("kind", list(EntityKind))
def test_template_header_maps_back_to_template_order(kind: EntityKind):
    schema = get_schema(kind)
    header = tokenize(render_template(kind), ",")[0]
    assert header == list(schema.template_labels)
    fm = build_field_map(header, schema)
    for idx, name in enumerate(schema.template):
        assert fm[name] == idx


@pytest.mark.parametrize("kind", list(EntityKind))
def test_template_example_row_is_accepted(kind: EntityKind):
    outcome = run_import(render_template(kind), kind)
    assert outcome.accepted_count == 1
    assert outcome.skipped_count == 0
