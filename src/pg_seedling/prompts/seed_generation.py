"""Prompt builder for deterministic seed-data generation requests."""

from __future__ import annotations

import json
from typing import Sequence

from pg_seedling.schema.describer import AssociationConstraint, ModelDescription

_RULES = (
    "Rules:\n"
    "- Exclude identity and audit columns (id, created_at, updated_at).\n"
    "- Use realistic data for each attribute that matches its declared type.\n"
    "- Output ONLY a JSON array of objects. No prose, no markdown, no code fences."
)


def _render_id(value: object) -> str:
    return json.dumps(value, default=str)


def render_association_constraints(
    constraints: Sequence[AssociationConstraint],
) -> str:
    """Render the candidate foreign key values block."""
    lines = [
        f"- {constraint.foreign_key}: must be one of "
        f"[{', '.join(_render_id(value) for value in constraint.sampled_ids)}] "
        f"(existing {constraint.related_model} records)"
        for constraint in constraints
    ]
    return (
        "Association constraints:\n"
        "Use ONLY the following existing IDs.\n"
        "Do NOT create, invent or infer associated records or IDs.\n"
        + "\n".join(lines)
    )


def build_seed_prompt(
    description: ModelDescription,
    count: int,
    context: str | None = None,
    constraints: Sequence[AssociationConstraint] | None = None,
) -> str:
    """Build the generation prompt for ``count`` records of one model.

    ``count`` is rendered as given; callers validate it.
    """
    sections = [
        "You are a PostgreSQL data generation assistant.\n"
        f"Using the following model details, generate {count} valid JSON objects."
    ]

    normalized_context = (context or "").strip()
    if normalized_context:
        sections.append(f"Context: {normalized_context}")

    sections.append(description.summary().rstrip("\n"))

    if constraints:
        sections.append(render_association_constraints(constraints))

    sections.append(_RULES)
    return "\n\n".join(sections) + "\n"
