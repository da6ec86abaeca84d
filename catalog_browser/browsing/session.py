"""Catalog browsing session.

Wires the criteria store, the search debouncer, the page controller,
address sync and the view preference together:

    user action → criteria change → (search: debounce) → reload page 1
    → list + metadata update → address rewrite

Infinite scroll and pager clicks skip the debounce and page reset and
go straight to the controller.
"""

from collections.abc import Mapping

import structlog

from catalog_browser.browsing.criteria import (
    AdvancedFilters,
    CriteriaStore,
    FilterCriteria,
    SortMode,
)
from catalog_browser.browsing.debouncer import Debouncer
from catalog_browser.browsing.page_controller import (
    DEFAULT_PAGE_SIZE,
    PageController,
    PageState,
    ScrollListener,
    StateListener,
)
from catalog_browser.browsing.preferences import JsonFilePreferenceStore, PreferencePersistence, ViewDensity
from catalog_browser.browsing.url_sync import AddressBar, InMemoryAddressBar, UrlSync
from catalog_browser.domain.store import ProductStore
from catalog_browser.infrastructure.config import Settings

logger = structlog.get_logger()


class CatalogBrowser:
    """One user's browsing session over a product store.

    Example usage:
        browser = CatalogBrowser(store, address="search=lamp&page=2")
        await browser.start()
        await browser.toggle_category("lighting")
        await browser.load_more()
        browser.close()
    """

    def __init__(
        self,
        store: ProductStore,
        *,
        address: str | Mapping[str, str] = "",
        address_bar: AddressBar | None = None,
        preferences: PreferencePersistence | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = 0.4,
        on_change: StateListener | None = None,
        on_scroll_top: ScrollListener | None = None,
    ) -> None:
        """Initialize session, restoring state from the entry address.

        Args:
            store: Product store.
            address: Entry address query.
            address_bar: Address representation to keep in sync.
            preferences: View density persistence; loaded here, once.
            page_size: Rows per page for the whole session.
            debounce_seconds: Search quiescence window.
            on_change: Called with every committed PageState.
            on_scroll_top: Called after a successful page jump.
        """
        self.url_sync = UrlSync(address_bar or InMemoryAddressBar())
        criteria, self._entry_page = self.url_sync.restore(address)

        self.controller = PageController(
            store,
            page_size,
            criteria=criteria,
            on_change=on_change,
            on_scroll_top=on_scroll_top,
        )
        self.criteria_store = CriteriaStore(criteria, max_price=lambda: self.controller.state.max_price)
        self.debouncer = Debouncer(self._commit_search, delay=debounce_seconds)

        self.preferences = preferences or PreferencePersistence()
        self.view_density = self.preferences.load()

    @classmethod
    def from_settings(
        cls,
        store: ProductStore,
        config: Settings,
        *,
        address: str | Mapping[str, str] = "",
        address_bar: AddressBar | None = None,
        on_change: StateListener | None = None,
        on_scroll_top: ScrollListener | None = None,
    ) -> "CatalogBrowser":
        """Create a session using configured page size, debounce and preference file.

        Args:
            store: Product store.
            config: Application settings.
            address: Entry address query.
            address_bar: Address representation to keep in sync.
            on_change: Called with every committed PageState.
            on_scroll_top: Called after a successful page jump.

        Returns:
            CatalogBrowser instance.
        """
        return cls(
            store,
            address=address,
            address_bar=address_bar,
            preferences=PreferencePersistence(JsonFilePreferenceStore(config.preference_file)),
            page_size=config.page_size,
            debounce_seconds=config.search_debounce_ms / 1000,
            on_change=on_change,
            on_scroll_top=on_scroll_top,
        )

    @property
    def criteria(self) -> FilterCriteria:
        """Current criteria snapshot."""
        return self.criteria_store.criteria

    @property
    def state(self) -> PageState:
        """Current page state."""
        return self.controller.state

    @property
    def address(self) -> str:
        """Address for the current committed state."""
        return self.url_sync.render(self.controller.committed_criteria, self.state.page)

    async def start(self) -> PageState:
        """Load the entry page (mount)."""
        if self._entry_page > 1:
            await self.controller.go_to_page(self._entry_page)
        else:
            await self.controller.reload()
        return self._sync()

    # =========================================================================
    # Criteria mutations
    # =========================================================================

    def set_search_text(self, text: str) -> FilterCriteria:
        """Record typed search text; the query waits for the debounce."""
        criteria = self.criteria_store.set_search_text(text)
        self.debouncer.on_input(text)
        return criteria

    async def submit_search(self) -> PageState:
        """Commit typed search text immediately (e.g., enter key)."""
        if self.debouncer.pending:
            await self.debouncer.flush()
            return self.state
        return await self._commit_search(self.criteria.search_text)

    async def _commit_search(self, text: str) -> PageState:
        return await self._apply(self.criteria_store.commit_search())

    async def toggle_category(self, category_id: str) -> PageState:
        criteria = self.criteria_store.toggle_category(category_id)
        logger.info("Category filter changed", category_id=category_id, selected=sorted(criteria.category_ids))
        return await self._apply(criteria)

    async def set_sort(self, mode: SortMode | str) -> PageState:
        criteria = self.criteria_store.set_sort(SortMode(mode))
        logger.info("Sort changed", sort=criteria.sort_mode.value)
        return await self._apply(criteria)

    async def toggle_stock_only(self) -> PageState:
        return await self._apply(self.criteria_store.toggle_stock_only())

    async def toggle_sale_only(self) -> PageState:
        return await self._apply(self.criteria_store.toggle_sale_only())

    async def set_advanced(self, block: AdvancedFilters) -> PageState:
        criteria = self.criteria_store.set_advanced(block)
        logger.info(
            "Filter applied",
            categories=sorted(block.categories),
            price_range=(block.price_range.minimum, block.price_range.maximum),
            rating_floor=block.rating_floor,
            brands=sorted(block.brands),
            tags=sorted(block.tags),
        )
        return await self._apply(criteria)

    async def clear_all(self) -> PageState:
        """Reset every filter, including the search box."""
        self.debouncer.cancel()
        return await self._apply(self.criteria_store.clear_all())

    async def _apply(self, criteria: FilterCriteria) -> PageState:
        if criteria.query_key() == self.controller.criteria.query_key():
            self.controller.criteria = criteria
            if criteria.query_key() == self.controller.committed_criteria.query_key():
                self.controller.committed_criteria = criteria
            return self._sync()
        await self.controller.reload(criteria)
        return self._sync()

    # =========================================================================
    # Pagination
    # =========================================================================

    async def load_more(self) -> PageState:
        """Infinite-scroll trigger."""
        await self.controller.load_more()
        return self._sync()

    async def go_to_page(self, page: int) -> PageState:
        """Pager click."""
        await self.controller.go_to_page(page)
        return self._sync()

    async def retry(self) -> PageState:
        """Retry action after a failed load."""
        await self.controller.retry()
        return self._sync()

    # =========================================================================
    # Preferences and lifecycle
    # =========================================================================

    def set_view_density(self, value: ViewDensity | str) -> ViewDensity:
        """Change and persist the view density."""
        self.view_density = self.preferences.save(value)
        logger.info("View mode changed", view_mode=self.view_density.value)
        return self.view_density

    def close(self) -> None:
        """Unmount: cancel pending input and drop in-flight fetches."""
        self.debouncer.cancel()
        self.controller.close()

    def _sync(self) -> PageState:
        if not self.controller.closed:
            # Only the criteria that produced the list pair with its page
            self.url_sync.sync(self.controller.committed_criteria, self.state.page)
        return self.state
