"""In-memory product store.

Evaluates query descriptors against a list of row dictionaries. Used
for demos and tests, and as the reference semantics for the other
stores.
"""

import asyncio
import operator
from collections.abc import Iterable
from typing import Any

from catalog_browser.domain.exceptions import QueryExecutionError
from catalog_browser.domain.products import ProductSummary
from catalog_browser.domain.query import Ordering, Predicate, PredicateOp, QueryDescriptor
from catalog_browser.domain.store import QueryResult

_COMPARATORS = {
    PredicateOp.EQ: operator.eq,
    PredicateOp.GT: operator.gt,
    PredicateOp.GTE: operator.ge,
    PredicateOp.LT: operator.lt,
    PredicateOp.LTE: operator.le,
}


def matches(row: dict[str, Any], predicate: Predicate) -> bool:
    """Evaluate one predicate against a row.

    Null values never satisfy a comparison, as in SQL.
    """
    if predicate.op is PredicateOp.CONTAINS_ANY:
        needle = str(predicate.value).lower()
        return any(needle in str(row.get(f) or "").lower() for f in predicate.fields)

    value = row.get(predicate.field)
    if value is None:
        return False
    if predicate.op is PredicateOp.IN:
        return str(value) in {str(v) for v in predicate.value}
    return _COMPARATORS[predicate.op](value, predicate.value)


def _sort_rows(rows: list[dict[str, Any]], ordering: Ordering) -> list[dict[str, Any]]:
    rows = sorted(rows, key=lambda r: str(r.get("id")))
    present = [r for r in rows if r.get(ordering.field) is not None]
    missing = [r for r in rows if r.get(ordering.field) is None]
    present.sort(key=lambda r: r[ordering.field], reverse=ordering.descending)
    if ordering.nulls_last or not ordering.descending:
        return present + missing
    return missing + present


class InMemoryProductStore:
    """Product store over in-memory rows.

    Attributes:
        rows: Product rows using store column names.
        executed: Descriptors executed so far, in order.
        delay: Artificial latency in seconds per query.
    """

    def __init__(self, rows: Iterable[dict[str, Any]] = (), delay: float = 0.0) -> None:
        self.rows: list[dict[str, Any]] = [dict(r) for r in rows]
        self.executed: list[QueryDescriptor] = []
        self.delay = delay
        self.available = True

    async def execute(self, descriptor: QueryDescriptor) -> QueryResult:
        """Execute a query descriptor.

        Raises:
            QueryExecutionError: When the store is marked unavailable.
        """
        self.executed.append(descriptor)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.available:
            raise QueryExecutionError("memory", "Store unavailable")

        rows = [
            r
            for r in self.rows
            if (not descriptor.active_only or r.get("is_active", True))
            and all(matches(r, p) for p in descriptor.predicates)
        ]
        rows = _sort_rows(rows, descriptor.ordering)
        window = rows[descriptor.window.offset : descriptor.window.end]
        return QueryResult(
            items=[ProductSummary.from_mapping(r) for r in window],
            total_count=len(rows) if descriptor.with_count else None,
        )
