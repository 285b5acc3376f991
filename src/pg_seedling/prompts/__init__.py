"""Prompt builders for pg-seedling."""

from pg_seedling.prompts.seed_generation import (
    build_seed_prompt,
    render_association_constraints,
)

__all__ = [
    "build_seed_prompt",
    "render_association_constraints",
]
