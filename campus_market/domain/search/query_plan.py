"""
Query plans: predicate objects plus ordering, independent of SQL syntax.

Values live only inside `Predicate.value`; the store compiles every one of
them to a bound parameter.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class ListingField(str, Enum):
    ID = "id"
    NAME = "name"
    DESCRIPTION = "description"
    PRICE = "price"
    CATEGORY = "category_id"
    CONDITION = "condition"
    STATUS = "status"
    CREATED_AT = "created_at"


class Operator(str, Enum):
    CONTAINS = "contains"  # case-insensitive substring
    EQUALS = "eq"
    AT_LEAST = "gte"
    AT_MOST = "lte"
    ONE_OF = "in"


@dataclass(frozen=True)
class Predicate:
    """A single filter; matches when any of `fields` satisfies `operator`."""

    fields: tuple[ListingField, ...]
    operator: Operator
    value: Any

    @classmethod
    def on(cls, field: ListingField, operator: Operator, value: Any) -> "Predicate":
        return cls(fields=(field,), operator=operator, value=value)

    @property
    def bind_values(self) -> tuple[Any, ...]:
        values = tuple(self.value) if self.operator is Operator.ONE_OF else (self.value,)
        return tuple(v for _ in self.fields for v in values)


@dataclass(frozen=True)
class OrderTerm:
    field: ListingField
    descending: bool = False


@dataclass(frozen=True)
class QueryPlan:
    predicates: tuple[Predicate, ...] = ()
    ordering: tuple[OrderTerm, ...] = ()

    @property
    def bind_values(self) -> tuple[Any, ...]:
        """Every bound value in predicate order."""
        return tuple(v for p in self.predicates for v in p.bind_values)

    def for_count(self) -> "QueryPlan":
        """Same predicates, no ordering."""
        return replace(self, ordering=())
