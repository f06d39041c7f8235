# (c) Nelen & Schuurmans

from enum import Enum
from typing import Any

from pydantic import model_validator

from .types import Id
from .value_object import ValueObject

__all__ = ["Filter", "ComparisonFilter", "ComparisonOperator"]


class Filter(ValueObject):
    field: str
    values: list[Any]

    @classmethod
    def for_id(cls, id: Id) -> "Filter":
        return cls(field="id", values=[id])


class ComparisonOperator(str, Enum):
    LT = "lt"
    LE = "le"
    GE = "ge"
    GT = "gt"
    EQ = "eq"
    NE = "ne"
    # string operators; these compare case-insensitively
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"

    @property
    def is_textual(self) -> bool:
        return self in (ComparisonOperator.CONTAINS, ComparisonOperator.STARTS_WITH)


class ComparisonFilter(Filter):
    operator: ComparisonOperator

    @model_validator(mode="after")
    def verify_no_operator_for_multiple_values(self):
        if len(self.values) != 1:
            raise ValueError("ComparisonFilter needs to have exactly one value")
        return self

    @model_validator(mode="after")
    def verify_text_operator_has_text_value(self):
        if self.operator.is_textual and not isinstance(self.values[0], str):
            raise ValueError(f"'{self.operator.value}' needs a string value")
        return self

    @classmethod
    def contains(cls, field: str, value: str) -> "ComparisonFilter":
        return cls(field=field, values=[value], operator=ComparisonOperator.CONTAINS)
