"""Query builder.

Single pure mapping from a FilterCriteria snapshot and a page cursor to
a QueryDescriptor. Reload, load-more and page-jump all go through
``build_query`` so their predicates can never drift apart.
"""

from catalog_browser.browsing.criteria import DEFAULT_MAX_PRICE, FilterCriteria, SortMode
from catalog_browser.domain.exceptions import InvalidCriteriaError
from catalog_browser.domain.query import (
    Ordering,
    Predicate,
    QueryDescriptor,
    RowWindow,
    SortDirection,
)

# Store field names
NAME = "name"
DESCRIPTION = "description"
CATEGORY_ID = "category_id"
STOCK_QUANTITY = "stock_quantity"
DISCOUNT_PERCENTAGE = "discount_percentage"
PRICE = "price"
RATING = "rating"
CREATED_AT = "created_at"

SEARCH_FIELDS = (NAME, DESCRIPTION)

ORDERINGS: dict[SortMode, Ordering] = {
    SortMode.PRICE_ASC: Ordering(PRICE, SortDirection.ASC),
    SortMode.PRICE_DESC: Ordering(PRICE, SortDirection.DESC),
    SortMode.RATING: Ordering(RATING, SortDirection.DESC, nulls_last=True),
    SortMode.NEWEST: Ordering(CREATED_AT, SortDirection.DESC),
    SortMode.NAME: Ordering(NAME, SortDirection.ASC),
    SortMode.POPULAR: Ordering(STOCK_QUANTITY, SortDirection.DESC),
}


def row_window(page: int, page_size: int) -> RowWindow:
    """Compute the row window for a 1-indexed page.

    Args:
        page: Page number (>= 1).
        page_size: Rows per page (>= 1).

    Returns:
        Window ``[(page-1)*page_size, page*page_size)``.
    """
    if page < 1:
        raise InvalidCriteriaError("page", page, "must be >= 1")
    if page_size < 1:
        raise InvalidCriteriaError("page_size", page_size, "must be >= 1")
    return RowWindow(offset=(page - 1) * page_size, limit=page_size)


def build_predicates(
    criteria: FilterCriteria,
    max_price: float = DEFAULT_MAX_PRICE,
) -> tuple[Predicate, ...]:
    """Build the conjunctive predicate list for a criteria snapshot.

    Args:
        criteria: Filter criteria.
        max_price: Current price ceiling. An upper price bound at or
            above it would match everything and is left out.

    Returns:
        Predicates in a fixed order.
    """
    predicates: list[Predicate] = []

    search = criteria.committed_search_text.strip()
    if search:
        predicates.append(Predicate.contains_text(SEARCH_FIELDS, search))

    if criteria.category_ids:
        predicates.append(Predicate.one_of(CATEGORY_ID, criteria.category_ids))

    if criteria.only_in_stock:
        predicates.append(Predicate.greater_than(STOCK_QUANTITY, 0))

    if criteria.only_on_sale:
        predicates.append(Predicate.greater_than(DISCOUNT_PERCENTAGE, 0))

    low, high = criteria.price_range.minimum, criteria.price_range.maximum
    if low > 0:
        predicates.append(Predicate.at_least(PRICE, low))
    if high < max_price:
        predicates.append(Predicate.at_most(PRICE, high))

    if criteria.rating_floor is not None:
        predicates.append(Predicate.at_least(RATING, criteria.rating_floor))

    return tuple(predicates)


def build_query(
    criteria: FilterCriteria,
    page: int,
    page_size: int,
    *,
    max_price: float = DEFAULT_MAX_PRICE,
    with_count: bool = True,
) -> QueryDescriptor:
    """Map criteria and a page cursor to a query descriptor.

    Equal arguments always produce equal descriptors.

    Args:
        criteria: Filter criteria snapshot.
        page: 1-indexed page number.
        page_size: Rows per page.
        max_price: Current price ceiling.
        with_count: Whether to request the exact total count.

    Returns:
        Query descriptor.
    """
    return QueryDescriptor(
        predicates=build_predicates(criteria, max_price),
        ordering=ORDERINGS[criteria.sort_mode],
        window=row_window(page, page_size),
        with_count=with_count,
    )
