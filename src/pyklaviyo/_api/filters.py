"""Profile filter expressions.

Clauses render as ``operator(field,value)`` and are joined with one
logical operator, in the order given.  Clause order is not normalized,
so the same clauses in a different order give a different expression
and a different cache key.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from pyklaviyo._constants import PROFILES_CACHE_PREFIX
from pyklaviyo.exceptions import KlaviyoValidationError
from pyklaviyo.models.filters import FilterClause, LogicalOperator

_logger = logging.getLogger(__name__)


def _clause_for_log(clause: Any) -> str:
    if isinstance(clause, FilterClause):
        return clause.model_dump_json()
    try:
        return json.dumps(clause, default=str)
    except (TypeError, ValueError):
        return repr(clause)


def parse_clause(clause: FilterClause | Mapping[str, Any]) -> FilterClause | None:
    """Validate one clause; ``None`` (and an error log line) when it is unusable."""
    if isinstance(clause, FilterClause):
        return clause
    if not isinstance(clause, Mapping):
        _logger.error("Invalid filter: %s", _clause_for_log(clause))
        return None
    try:
        return FilterClause.model_validate(dict(clause))
    except ValidationError:
        _logger.error("Invalid filter: %s", _clause_for_log(clause))
        return None


def build_filter_expression(
    clauses: Sequence[FilterClause | Mapping[str, Any]],
    join_operator: LogicalOperator | str = LogicalOperator.AND,
) -> str:
    """Render *clauses* joined by *join_operator* (``and``/``or``).

    Invalid clauses are skipped.  Raises :class:`KlaviyoValidationError`
    when no clause was given, none is valid, or the join operator is unknown.
    """
    try:
        operator = LogicalOperator(str(join_operator).strip().lower())
    except ValueError as exc:
        raise KlaviyoValidationError(
            f"Unknown logical operator: {join_operator!r}",
            fields=("operator",),
        ) from exc

    if not clauses:
        raise KlaviyoValidationError("No filters provided for profile query", fields=("filters",))

    rendered = [parsed.render() for parsed in map(parse_clause, clauses) if parsed is not None]
    if not rendered:
        raise KlaviyoValidationError("No valid filters to apply", fields=("filters",))

    return f" {operator.value} ".join(rendered)


def filter_cache_key(expression: str) -> str:
    """Cache key of a profile query: ``profiles_`` + md5 of the expression."""
    return PROFILES_CACHE_PREFIX + hashlib.md5(expression.encode("utf-8")).hexdigest()  # noqa: S324
