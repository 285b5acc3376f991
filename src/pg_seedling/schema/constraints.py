"""Classify PostgreSQL CHECK constraints into validation kinds with SQLGlot."""

from __future__ import annotations

import logging
import re

from sqlglot import exp, parse_one
from sqlglot.errors import SqlglotError

logger = logging.getLogger(__name__)

_CHECK_PREFIX = re.compile(r"^\s*CHECK\s*", re.IGNORECASE)
_NOT_VALID_SUFFIX = re.compile(r"\s+NOT\s+VALID\s*$", re.IGNORECASE)

_FORMAT_NODES = (exp.RegexpLike, exp.RegexpILike, exp.Like, exp.ILike, exp.SimilarTo)
_RANGE_NODES = (exp.GT, exp.GTE, exp.LT, exp.LTE, exp.Between)


def _strip_definition(definition: str) -> str:
    body = _NOT_VALID_SUFFIX.sub("", definition.strip())
    return _CHECK_PREFIX.sub("", body, count=1).strip()


def _unwrap(node: exp.Expression) -> exp.Expression:
    while isinstance(node, (exp.Cast, exp.Paren, exp.Neg)):
        node = node.this
    return node


def _is_numeric_literal(node: exp.Expression | None) -> bool:
    if node is None:
        return False
    node = _unwrap(node)
    return isinstance(node, exp.Literal) and not node.is_string


def _is_inclusion(expression: exp.Expression) -> bool:
    for node in expression.find_all(exp.In):
        if not isinstance(node.parent, exp.Not):
            return True
    return any(isinstance(node.expression, exp.Any) for node in expression.find_all(exp.EQ))


def _is_exclusion(expression: exp.Expression) -> bool:
    for node in expression.find_all(exp.In):
        if isinstance(node.parent, exp.Not):
            return True
    return any(isinstance(node.expression, exp.All) for node in expression.find_all(exp.NEQ))


def _range_kind(expression: exp.Expression) -> str | None:
    comparisons = list(expression.find_all(*_RANGE_NODES))
    if not comparisons:
        return None
    for node in comparisons:
        if isinstance(node, exp.Between):
            if _is_numeric_literal(node.args.get("low")) or _is_numeric_literal(
                node.args.get("high")
            ):
                return "numericality"
            continue
        if _is_numeric_literal(node.this) or _is_numeric_literal(node.expression):
            return "numericality"
    return "comparison"


def classify_check(definition: str) -> str:
    """Map a ``pg_get_constraintdef`` CHECK body to a validation kind.

    Unrecognized or unparseable expressions fall back to ``check``.
    """
    body = _strip_definition(definition)
    if not body:
        return "check"

    try:
        expression = parse_one(body, read="postgres")
    except SqlglotError as exc:
        logger.debug("Could not parse CHECK constraint %r: %s", definition, exc)
        return "check"

    if expression.find(*_FORMAT_NODES):
        return "format"
    if _is_exclusion(expression):
        return "exclusion"
    if _is_inclusion(expression):
        return "inclusion"
    if expression.find(exp.Length):
        return "length"
    return _range_kind(expression) or "check"
