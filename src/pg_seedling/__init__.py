"""Generate synthetic PostgreSQL seed data with an LLM."""

__version__ = "0.1.0"
