"""Query descriptor value objects.

A QueryDescriptor is the store-independent description of one fetch:
a conjunctive predicate list, one ordering directive and a row window.
It is built per fetch and never persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from catalog_browser.domain.base import ValueObject


class PredicateOp(str, Enum):
    """Predicate operators every product store must support."""

    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    # Case-insensitive substring match OR-ed across several fields
    CONTAINS_ANY = "contains_any"


class SortDirection(str, Enum):
    """Ordering direction."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Predicate(ValueObject):
    """Single filter condition.

    Attributes:
        op: Operator.
        fields: Target fields. Only CONTAINS_ANY uses more than one.
        value: Operand. Membership operands are sorted tuples so equal
            predicates compare and hash equal.
    """

    op: PredicateOp
    fields: tuple[str, ...]
    value: Any

    @property
    def field(self) -> str:
        """Primary target field."""
        return self.fields[0]

    @classmethod
    def equals(cls, field: str, value: Any) -> Self:
        return cls(PredicateOp.EQ, (field,), value)

    @classmethod
    def greater_than(cls, field: str, value: Any) -> Self:
        return cls(PredicateOp.GT, (field,), value)

    @classmethod
    def at_least(cls, field: str, value: Any) -> Self:
        return cls(PredicateOp.GTE, (field,), value)

    @classmethod
    def less_than(cls, field: str, value: Any) -> Self:
        return cls(PredicateOp.LT, (field,), value)

    @classmethod
    def at_most(cls, field: str, value: Any) -> Self:
        return cls(PredicateOp.LTE, (field,), value)

    @classmethod
    def one_of(cls, field: str, values: Any) -> Self:
        return cls(PredicateOp.IN, (field,), tuple(sorted(values)))

    @classmethod
    def contains_text(cls, fields: tuple[str, ...], text: str) -> Self:
        return cls(PredicateOp.CONTAINS_ANY, tuple(fields), text)

    def render(self) -> str:
        """Render as a compact, stable string."""
        if self.op is PredicateOp.IN:
            operand = "(" + ",".join(str(v) for v in self.value) + ")"
        else:
            operand = repr(self.value)
        return f"{'|'.join(self.fields)}.{self.op.value}.{operand}"


@dataclass(frozen=True)
class Ordering(ValueObject):
    """Ordering directive.

    Attributes:
        field: Field to order by.
        direction: Ascending or descending.
        nulls_last: Whether rows with a null value sort after all others.
    """

    field: str
    direction: SortDirection
    nulls_last: bool = False

    @property
    def descending(self) -> bool:
        """Whether ordering is descending."""
        return self.direction is SortDirection.DESC

    def render(self) -> str:
        """Render as a compact, stable string."""
        suffix = ".nullslast" if self.nulls_last else ""
        return f"{self.field}.{self.direction.value}{suffix}"


@dataclass(frozen=True)
class RowWindow(ValueObject):
    """Half-open row window ``[offset, offset + limit)``."""

    offset: int
    limit: int

    @property
    def end(self) -> int:
        """Exclusive end row."""
        return self.offset + self.limit


@dataclass(frozen=True)
class QueryDescriptor(ValueObject):
    """Abstract remote query.

    Attributes:
        predicates: Conjunctive filter conditions.
        ordering: Ordering directive.
        window: Row window.
        with_count: Whether the exact total count is requested.
        active_only: Restrict to products flagged active in the store.
    """

    predicates: tuple[Predicate, ...]
    ordering: Ordering
    window: RowWindow
    with_count: bool = True
    active_only: bool = True

    def predicates_for(self, field: str) -> tuple[Predicate, ...]:
        """Get predicates targeting a field.

        Args:
            field: Field name.

        Returns:
            Matching predicates in descriptor order.
        """
        return tuple(p for p in self.predicates if field in p.fields)

    def cache_key(self) -> str:
        """Stable key for request de-duplication and caching.

        Returns:
            String that is equal for equal descriptors.
        """
        parts = [p.render() for p in self.predicates]
        parts.append(f"order={self.ordering.render()}")
        parts.append(f"rows={self.window.offset}-{self.window.end}")
        parts.append(f"count={int(self.with_count)}")
        parts.append(f"active={int(self.active_only)}")
        return "&".join(parts)
