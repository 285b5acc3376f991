"""Tests for CHECK constraint classification."""

import pytest

from pg_seedling.schema.constraints import classify_check


@pytest.mark.parametrize(
    ("definition", "kind"),
    [
        ("CHECK ((status IN ('draft', 'published')))", "inclusion"),
        ("CHECK ((status NOT IN ('deleted')))", "exclusion"),
        ("CHECK ((email LIKE '%@%'))", "format"),
        ("CHECK ((length(name) >= 2))", "length"),
        ("CHECK ((price > 0))", "numericality"),
        ("CHECK ((age BETWEEN 18 AND 65))", "numericality"),
        ("CHECK ((starts_at < ends_at))", "comparison"),
        ("CHECK ((price > (0)::numeric)) NOT VALID", "numericality"),
    ],
)
def test_classify_check(definition, kind):
    assert classify_check(definition) == kind


def test_unrecognized_expression_falls_back_to_check():
    assert classify_check("CHECK ((is_active IS NOT NULL))") == "check"


def test_unparseable_expression_falls_back_to_check():
    assert classify_check("CHECK ((((") == "check"


def test_empty_definition_is_check():
    assert classify_check("CHECK") == "check"
