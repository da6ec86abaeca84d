"""SQL product store.

Executes query descriptors against the products table with SQLAlchemy.
"""

from typing import Any

import structlog
from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_browser.domain.exceptions import QueryExecutionError
from catalog_browser.domain.products import ProductSummary
from catalog_browser.domain.query import Predicate, PredicateOp, QueryDescriptor
from catalog_browser.domain.store import QueryResult
from catalog_browser.infrastructure.models import Product

logger = structlog.get_logger()

# Descriptor fields the store knows how to query
COLUMNS: dict[str, Any] = {
    "name": Product.name,
    "description": Product.description,
    "brand": Product.brand,
    "category_id": Product.category_id,
    "price": Product.price,
    "discount_percentage": Product.discount_percentage,
    "stock_quantity": Product.stock_quantity,
    "rating": Product.rating,
    "created_at": Product.created_at,
}


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column(field: str) -> Any:
    try:
        return COLUMNS[field]
    except KeyError:
        raise QueryExecutionError("sql", f"Unsupported field: {field}") from None


def to_condition(predicate: Predicate) -> ColumnElement[bool]:
    """Translate a predicate into a SQL condition.

    Args:
        predicate: Descriptor predicate.

    Returns:
        SQLAlchemy boolean expression.
    """
    if predicate.op is PredicateOp.CONTAINS_ANY:
        pattern = f"%{_escape_like(predicate.value)}%"
        return or_(*(_column(f).ilike(pattern, escape="\\") for f in predicate.fields))

    column = _column(predicate.field)
    value = predicate.value
    if predicate.op is PredicateOp.EQ:
        return column == value
    if predicate.op is PredicateOp.GT:
        return column > value
    if predicate.op is PredicateOp.GTE:
        return column >= value
    if predicate.op is PredicateOp.LT:
        return column < value
    if predicate.op is PredicateOp.LTE:
        return column <= value
    if predicate.op is PredicateOp.IN:
        return column.in_(list(value))
    raise QueryExecutionError("sql", f"Unsupported operator: {predicate.op}")


class SqlProductStore:
    """Product store over a SQL database.

    Opens one session per query so concurrent fetches from the page
    controller never share a connection.

    Example usage:
        store = SqlProductStore(get_session_factory())
        result = await store.execute(build_query(criteria, 1, 36))
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store with a session factory.

        Args:
            session_factory: Async SQLAlchemy session factory.
        """
        self.session_factory = session_factory

    def _conditions(self, descriptor: QueryDescriptor) -> list[ColumnElement[bool]]:
        conditions = [to_condition(p) for p in descriptor.predicates]
        if descriptor.active_only:
            conditions.append(Product.is_active.is_(True))
        return conditions

    def build_statement(self, descriptor: QueryDescriptor) -> Select:
        """Build the row query for a descriptor.

        Args:
            descriptor: Query descriptor.

        Returns:
            SELECT statement with filters, ordering and window applied.
        """
        query = select(Product)

        conditions = self._conditions(descriptor)
        if conditions:
            query = query.where(*conditions)

        ordering = descriptor.ordering
        column = _column(ordering.field)
        order = column.desc() if ordering.descending else column.asc()
        if ordering.nulls_last:
            order = order.nulls_last()
        # Tie-break on id so pages never overlap
        query = query.order_by(order, Product.id.asc())

        return query.offset(descriptor.window.offset).limit(descriptor.window.limit)

    def build_count_statement(self, descriptor: QueryDescriptor) -> Select:
        """Build the exact-count query for a descriptor.

        Args:
            descriptor: Query descriptor.

        Returns:
            SELECT COUNT statement sharing the row query's filters.
        """
        query = select(func.count(Product.id))
        conditions = self._conditions(descriptor)
        if conditions:
            query = query.where(*conditions)
        return query

    async def execute(self, descriptor: QueryDescriptor) -> QueryResult:
        """Execute a query descriptor.

        Args:
            descriptor: Query descriptor.

        Returns:
            Matching rows and the total count if requested.

        Raises:
            QueryExecutionError: On any database error.
        """
        statement = self.build_statement(descriptor)
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                rows = result.scalars().all()
                total = None
                if descriptor.with_count:
                    count_result = await session.execute(self.build_count_statement(descriptor))
                    total = count_result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Product query failed", error=str(e), query=descriptor.cache_key())
            raise QueryExecutionError("sql", f"Query failed: {e}") from e

        return QueryResult(
            items=[ProductSummary.from_mapping(row.to_dict()) for row in rows],
            total_count=total,
        )
