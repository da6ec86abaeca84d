"""Filter criteria store.

FilterCriteria is the closed record of everything that shapes a catalog
query. Every mutation returns a new immutable snapshot; no operation
here performs I/O.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Self

from catalog_browser.domain.base import ValueObject
from catalog_browser.domain.exceptions import InvalidCriteriaError
from catalog_browser.domain.products import ProductSummary

# Ceiling used by price sliders when no loaded item is pricier
DEFAULT_MAX_PRICE = 1000.0

MAX_RATING = 5

# Sentinel category that clears the selection
ALL_CATEGORIES = "all"


class SortMode(str, Enum):
    """Catalog sort modes."""

    POPULAR = "popular"
    NEWEST = "newest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING = "rating"
    NAME = "name"

    @classmethod
    def parse(cls, token: str | None) -> "SortMode | None":
        """Parse a sort token.

        Accepts the enum values and the legacy storefront tokens
        ``price-low`` / ``price-high``.

        Args:
            token: Raw token.

        Returns:
            SortMode if recognised, None otherwise.
        """
        if not token:
            return None
        token = token.strip().lower()
        alias = _SORT_ALIASES.get(token)
        if alias is not None:
            return alias
        try:
            return cls(token)
        except ValueError:
            return None


_SORT_ALIASES: dict[str, SortMode] = {
    "price-low": SortMode.PRICE_ASC,
    "price-high": SortMode.PRICE_DESC,
}


def current_max_price(items: Iterable[ProductSummary]) -> float:
    """Derive the price slider ceiling from the loaded items.

    This looks only at currently loaded items, not the full catalog,
    and never drops below DEFAULT_MAX_PRICE.

    Args:
        items: Visible items.

    Returns:
        Highest loaded price, or DEFAULT_MAX_PRICE if that is higher.
    """
    return max([DEFAULT_MAX_PRICE, *(item.price for item in items)])


@dataclass(frozen=True)
class PriceRange(ValueObject):
    """Inclusive price range in major currency units."""

    minimum: float = 0.0
    maximum: float = DEFAULT_MAX_PRICE

    def __post_init__(self) -> None:
        if self.minimum < 0:
            raise InvalidCriteriaError("price_range", (self.minimum, self.maximum), "minimum must be >= 0")
        if self.maximum < self.minimum:
            raise InvalidCriteriaError(
                "price_range", (self.minimum, self.maximum), "maximum must be >= minimum"
            )

    @classmethod
    def up_to(cls, maximum: float) -> Self:
        return cls(0.0, maximum)


@dataclass(frozen=True)
class AdvancedFilters(ValueObject):
    """Advanced filter block applied in one step from the filter drawer.

    Attributes:
        categories: Selected category IDs.
        price_range: Price range.
        rating_floor: Minimum rating, or None for any.
        in_stock: Only show products in stock.
        on_sale: Only show discounted products.
        brands: Selected brands.
        tags: Selected tags.
    """

    categories: frozenset[str] = frozenset()
    price_range: PriceRange = field(default_factory=PriceRange)
    rating_floor: int | None = None
    in_stock: bool = True
    on_sale: bool = False
    brands: frozenset[str] = frozenset()
    tags: frozenset[str] = frozenset()


@dataclass(frozen=True)
class FilterCriteria(ValueObject):
    """Snapshot of the search, filter and sort state.

    ``committed_search_text`` lags ``search_text`` by the debounce
    window, and only the committed value reaches queries.
    """

    search_text: str = ""
    committed_search_text: str = ""
    category_ids: frozenset[str] = frozenset()
    sort_mode: SortMode = SortMode.POPULAR
    only_in_stock: bool = True
    only_on_sale: bool = False
    price_range: PriceRange = field(default_factory=PriceRange)
    rating_floor: int | None = None
    brands: frozenset[str] = frozenset()
    tags: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if self.rating_floor is not None and not 0 <= self.rating_floor <= MAX_RATING:
            raise InvalidCriteriaError("rating_floor", self.rating_floor, f"must be between 0 and {MAX_RATING}")

    def set_search_text(self, text: str) -> Self:
        return replace(self, search_text=text)

    def commit_search(self) -> Self:
        return replace(self, committed_search_text=self.search_text)

    def toggle_category(self, category_id: str) -> Self:
        """Add or remove a category; ``"all"`` clears the selection."""
        if category_id == ALL_CATEGORIES:
            return replace(self, category_ids=frozenset())
        return replace(self, category_ids=self.category_ids ^ {category_id})

    def set_sort(self, mode: SortMode) -> Self:
        return replace(self, sort_mode=SortMode(mode))

    def toggle_stock_only(self) -> Self:
        return replace(self, only_in_stock=not self.only_in_stock)

    def toggle_sale_only(self) -> Self:
        return replace(self, only_on_sale=not self.only_on_sale)

    def set_advanced(self, block: AdvancedFilters) -> Self:
        """Apply an advanced filter block.

        The block's category, stock and sale settings replace the
        corresponding top-level toggles.
        """
        return replace(
            self,
            category_ids=frozenset(block.categories),
            price_range=block.price_range,
            rating_floor=block.rating_floor,
            only_in_stock=block.in_stock,
            only_on_sale=block.on_sale,
            brands=frozenset(block.brands),
            tags=frozenset(block.tags),
        )

    def clear_all(self, max_price: float = DEFAULT_MAX_PRICE) -> Self:
        """Reset every field to session defaults.

        Args:
            max_price: Current price ceiling used for the reset range.
        """
        return type(self)(price_range=PriceRange.up_to(max_price))

    @property
    def advanced(self) -> AdvancedFilters:
        """Current advanced filter block."""
        return AdvancedFilters(
            categories=self.category_ids,
            price_range=self.price_range,
            rating_floor=self.rating_floor,
            in_stock=self.only_in_stock,
            on_sale=self.only_on_sale,
            brands=self.brands,
            tags=self.tags,
        )

    def query_key(self) -> tuple:
        """Fields that shape a remote query.

        Raw ``search_text`` is excluded: typing alone never changes
        the query until it is committed.
        """
        return (
            self.committed_search_text.strip(),
            self.category_ids,
            self.sort_mode,
            self.only_in_stock,
            self.only_on_sale,
            self.price_range,
            self.rating_floor,
            self.brands,
            self.tags,
        )


class CriteriaStore:
    """Holder of the current FilterCriteria snapshot.

    Each operation replaces the held snapshot and returns it.

    Example usage:
        store = CriteriaStore(max_price=lambda: current_max_price(items))
        store.toggle_category("shoes")
        store.set_sort(SortMode.PRICE_ASC)
    """

    def __init__(
        self,
        criteria: FilterCriteria | None = None,
        max_price: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            criteria: Initial snapshot, e.g. restored from the address.
            max_price: Provider of the current price ceiling.
        """
        self.criteria = criteria or FilterCriteria()
        self._max_price = max_price or (lambda: DEFAULT_MAX_PRICE)

    @property
    def current_max_price(self) -> float:
        """Current price ceiling, derived from loaded items."""
        return self._max_price()

    def _apply(self, criteria: FilterCriteria) -> FilterCriteria:
        self.criteria = criteria
        return criteria

    def set_search_text(self, text: str) -> FilterCriteria:
        return self._apply(self.criteria.set_search_text(text))

    def commit_search(self) -> FilterCriteria:
        return self._apply(self.criteria.commit_search())

    def toggle_category(self, category_id: str) -> FilterCriteria:
        return self._apply(self.criteria.toggle_category(category_id))

    def set_sort(self, mode: SortMode) -> FilterCriteria:
        return self._apply(self.criteria.set_sort(mode))

    def toggle_stock_only(self) -> FilterCriteria:
        return self._apply(self.criteria.toggle_stock_only())

    def toggle_sale_only(self) -> FilterCriteria:
        return self._apply(self.criteria.toggle_sale_only())

    def set_advanced(self, block: AdvancedFilters) -> FilterCriteria:
        return self._apply(self.criteria.set_advanced(block))

    def clear_all(self) -> FilterCriteria:
        return self._apply(self.criteria.clear_all(self.current_max_price))
