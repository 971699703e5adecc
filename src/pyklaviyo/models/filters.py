"""Profile filter clauses."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator


class FilterOperator(StrEnum):
    EQUALS = "equals"
    NOT = "not"
    CONTAINS = "contains"
    CONTAINS_ANY = "contains-any"
    CONTAINS_ALL = "contains-all"
    STARTS_WITH = "starts-with"
    ENDS_WITH = "ends-with"
    GREATER_THAN = "greater-than"
    GREATER_OR_EQUAL = "greater-or-equal"
    LESS_THAN = "less-than"
    LESS_OR_EQUAL = "less-or-equal"
    ANY = "any"
    HAS = "has"


class LogicalOperator(StrEnum):
    AND = "and"
    OR = "or"


FilterValue = str | bool | int | float | datetime | date


class FilterClause(BaseModel):
    """One ``operator(field,value)`` condition of a profile filter."""

    model_config = ConfigDict(frozen=True)

    field: str
    operator: FilterOperator
    value: FilterValue

    @field_validator("field")
    @classmethod
    def _field_non_empty(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("field must be non-empty")
        return name

    def render_value(self) -> str:
        value = self.value
        if isinstance(value, str):
            escaped = value.replace('"', '\\"')
            return f'"{escaped}"'
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)

    def render(self) -> str:
        return f"{self.operator.value}({self.field},{self.render_value()})"
