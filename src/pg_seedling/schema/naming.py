"""Minimal inflection helpers for mapping model names to table names."""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
}
_IRREGULAR_SINGULARS = {plural: singular for singular, plural in _IRREGULAR_PLURALS.items()}
_UNCOUNTABLE = frozenset({"data", "equipment", "information", "metadata", "series", "species"})


def underscore(name: str) -> str:
    """``OrderItem`` -> ``order_item``; ``Admin::User`` -> ``admin_user``."""
    cleaned = name.strip().replace("::", "_").replace("-", "_").replace(" ", "_")
    return _CAMEL_BOUNDARY.sub("_", cleaned).lower()


def _inflect_last_word(name: str, transform) -> str:
    head, sep, last = name.rpartition("_")
    return f"{head}{sep}{transform(last)}"


def _pluralize_word(word: str) -> str:
    if not word or word in _UNCOUNTABLE:
        return word
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    return word + "s"


def _singularize_word(word: str) -> str:
    if not word or word in _UNCOUNTABLE:
        return word
    if word in _IRREGULAR_SINGULARS:
        return _IRREGULAR_SINGULARS[word]
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if re.search(r"(s|x|z|ch|sh)es$", word):
        return word[:-2]
    if word.endswith(("ss", "us", "is")):
        return word
    if word.endswith("s"):
        return word[:-1]
    return word


def pluralize(name: str) -> str:
    return _inflect_last_word(name, _pluralize_word)


def singularize(name: str) -> str:
    return _inflect_last_word(name, _singularize_word)


def tableize(name: str) -> str:
    """``User`` -> ``users``; ``OrderItem`` -> ``order_items``."""
    return pluralize(underscore(name))


def classify(table_name: str) -> str:
    """``order_items`` -> ``OrderItem``."""
    return "".join(part.capitalize() for part in singularize(table_name).split("_") if part)
