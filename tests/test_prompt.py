"""Tests for the seed generation prompt builder."""

import uuid

import pytest

from pg_seedling.prompts.seed_generation import (
    build_seed_prompt,
    render_association_constraints,
)
from pg_seedling.schema.describer import (
    Association,
    AssociationConstraint,
    ModelDescription,
    Validation,
)


@pytest.fixture
def description() -> ModelDescription:
    return ModelDescription(
        name="Post",
        storage_name="posts",
        attributes={"title": "string", "user_id": "integer"},
        validations=(Validation(attributes=("title",), kind="presence"),),
        associations=(
            Association(name="user", kind="belongs_to", foreign_key="user_id", related_model="users"),
        ),
    )


@pytest.mark.parametrize("count", [1, 3, 10, 250])
def test_prompt_contains_requested_count(description, count):
    prompt = build_seed_prompt(description, count)

    assert f"generate {count} valid JSON objects" in prompt


def test_prompt_renders_count_verbatim_without_validation(description):
    assert "generate -2 valid JSON objects" in build_seed_prompt(description, -2)


def test_prompt_includes_context_when_given(description):
    prompt = build_seed_prompt(description, 5, context="Include sample emails")

    assert "Context: Include sample emails" in prompt


@pytest.mark.parametrize("context", [None, "", "   \n"])
def test_prompt_omits_blank_context(description, context):
    assert "Context:" not in build_seed_prompt(description, 3, context=context)


def test_prompt_sections_are_in_fixed_order(description):
    constraints = [AssociationConstraint("user_id", "users", (1, 2))]

    prompt = build_seed_prompt(description, 2, context="Blog posts", constraints=constraints)

    positions = [
        prompt.index("data generation assistant"),
        prompt.index("Context: Blog posts"),
        prompt.index("Model: Post"),
        prompt.index("Association constraints:"),
        prompt.index("Rules:"),
    ]
    assert positions == sorted(positions)


def test_prompt_without_constraints_has_no_constraint_block(description):
    assert "Association constraints" not in build_seed_prompt(description, 2)


def test_rules_block_demands_json_array_only(description):
    prompt = build_seed_prompt(description, 2)

    assert "Exclude identity and audit columns (id, created_at, updated_at)." in prompt
    assert "Output ONLY a JSON array of objects" in prompt
    assert "no markdown" in prompt


def test_prompt_is_deterministic(description):
    constraints = [AssociationConstraint("user_id", "users", (1, 2))]

    assert build_seed_prompt(description, 4, "ctx", constraints) == build_seed_prompt(
        description, 4, "ctx", constraints
    )


def test_constraint_block_lists_ids_and_forbids_new_ones():
    sample = uuid.UUID("12345678-1234-5678-1234-567812345678")
    block = render_association_constraints(
        [
            AssociationConstraint("user_id", "users", (1, 2, 3)),
            AssociationConstraint("org_id", "orgs", (sample,)),
        ]
    )

    assert "- user_id: must be one of [1, 2, 3] (existing users records)" in block
    assert f'- org_id: must be one of ["{sample}"] (existing orgs records)' in block
    assert "Use ONLY the following existing IDs." in block
    assert "Do NOT create" in block
