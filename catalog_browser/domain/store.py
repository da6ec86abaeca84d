"""Remote query-execution interface.

The page controller talks to any product store through this protocol.
Concrete stores live in ``catalog_browser.infrastructure``.
"""

from dataclasses import dataclass, field
from typing import Protocol

from catalog_browser.domain.products import ProductSummary
from catalog_browser.domain.query import QueryDescriptor


@dataclass
class QueryResult:
    """Result of executing a query descriptor.

    Attributes:
        items: Rows in the descriptor's order.
        total_count: Exact match count, or None when it was not requested
            or the store could not provide it.
    """

    items: list[ProductSummary] = field(default_factory=list)
    total_count: int | None = None


class ProductStore(Protocol):
    """Anything able to execute a QueryDescriptor.

    Implementations must raise QueryExecutionError for every failure
    to reach or query the underlying data.
    """

    async def execute(self, descriptor: QueryDescriptor) -> QueryResult:
        """Execute a query descriptor.

        Args:
            descriptor: Query to run.

        Returns:
            Matching rows and, if requested, the total count.

        Raises:
            QueryExecutionError: If the query cannot be executed.
        """
        ...
