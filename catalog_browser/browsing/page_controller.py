"""Page controller.

Orchestrates the three ways of moving through results against a
product store and owns the pagination metadata:

- reload: full replace from page 1, used on every criteria change;
- load_more: incremental tail-append for infinite scroll;
- go_to_page: direct jump that replaces the list.

Every fetch captures a generation token at dispatch. A response whose
token is no longer current (a newer reload/jump started, or the
controller was closed) is discarded without touching state.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, replace

import structlog

from catalog_browser.browsing.criteria import DEFAULT_MAX_PRICE, FilterCriteria, current_max_price
from catalog_browser.browsing.query_builder import build_query
from catalog_browser.domain.exceptions import InvalidCriteriaError, QueryExecutionError
from catalog_browser.domain.products import ProductSummary
from catalog_browser.domain.state_machines import LoadStatus, validate_load_transition
from catalog_browser.domain.store import ProductStore, QueryResult

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 36


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages, never less than 1."""
    return max(1, math.ceil(total_count / page_size))


def compute_has_more(page: int, total_count: int, page_size: int) -> bool:
    """Whether pages exist after ``page``.

    Self-correcting: when the total shrinks below the current window
    the result is False rather than a stale True.
    """
    return page < math.ceil(total_count / page_size)


@dataclass(frozen=True)
class PageState:
    """Pagination metadata and the visible list.

    Attributes:
        page: Current page (1-indexed).
        page_size: Rows per page, fixed per session.
        total_count: Total matching rows.
        has_more: Whether more rows can be loaded.
        items: Visible items in fetch order.
        status: Load status.
        error: User-facing error message of the last failed fetch.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    page: int = 1
    total_count: int = 0
    has_more: bool = False
    items: tuple[ProductSummary, ...] = ()
    status: LoadStatus = LoadStatus.IDLE
    error: str | None = None

    @property
    def total_pages(self) -> int:
        """Total pages for the current count."""
        return total_pages(self.total_count, self.page_size)

    @property
    def max_price(self) -> float:
        """Price ceiling derived from the visible items."""
        return current_max_price(self.items)


StateListener = Callable[[PageState], None]
ScrollListener = Callable[[], None]


class PageController:
    """Pagination state machine over a product store.

    Example usage:
        controller = PageController(store, page_size=36)
        await controller.reload(criteria)
        await controller.load_more()      # infinite scroll
        await controller.go_to_page(4)    # pager click
    """

    def __init__(
        self,
        store: ProductStore,
        page_size: int = DEFAULT_PAGE_SIZE,
        *,
        criteria: FilterCriteria | None = None,
        on_change: StateListener | None = None,
        on_scroll_top: ScrollListener | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            store: Product store executing query descriptors.
            page_size: Rows per page.
            criteria: Initial criteria.
            on_change: Called with every committed PageState.
            on_scroll_top: Called after a successful page jump.
        """
        if page_size < 1:
            raise InvalidCriteriaError("page_size", page_size, "must be >= 1")
        self.store = store
        self.criteria = criteria or FilterCriteria()
        # Criteria behind the current list; lags `criteria` while a reload is in flight
        self.committed_criteria = self.criteria
        self.on_change = on_change
        self.on_scroll_top = on_scroll_top
        self._state = PageState(page_size=page_size)
        # Ceiling pinned per result set so every page shares one predicate list
        self._price_ceiling = DEFAULT_MAX_PRICE
        self._generation = 0
        self._loads_in_flight = 0
        self._loading_more = False
        self._closed = False

    @property
    def state(self) -> PageState:
        """Current page state."""
        return self._state

    @property
    def page_size(self) -> int:
        return self._state.page_size

    @property
    def generation(self) -> int:
        """Current request generation."""
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Entry points
    # =========================================================================

    async def reload(self, criteria: FilterCriteria | None = None) -> PageState:
        """Fetch page 1 for the given criteria and replace the list.

        On failure the list is cleared and the error state is set; there
        is no automatic retry.

        Args:
            criteria: New criteria. Keeps the current criteria if None.

        Returns:
            State after the fetch (unchanged if the response was stale).
        """
        if self._closed:
            return self._state
        if criteria is not None:
            self.criteria = criteria
        self._price_ceiling = current_max_price(self._state.items)
        generation = self._advance_generation()
        self._commit(status=LoadStatus.LOADING, error=None)

        self._loads_in_flight += 1
        try:
            result = await self._fetch(1, with_count=True)
        except QueryExecutionError as e:
            if self._is_stale(generation):
                return self._state
            logger.warning("Catalog reload failed", error=e.message, generation=generation)
            self.committed_criteria = self.criteria
            self._commit(
                status=LoadStatus.FAILED,
                page=1,
                items=(),
                total_count=0,
                has_more=False,
                error="Could not load products. Check your connection.",
            )
            return self._state
        finally:
            self._loads_in_flight -= 1

        if self._is_stale(generation):
            logger.debug("Discarding stale reload response", generation=generation, current=self._generation)
            return self._state

        self.committed_criteria = self.criteria
        total = self._resolve_total(result)
        self._commit(
            status=LoadStatus.READY,
            page=1,
            items=tuple(result.items),
            total_count=total,
            has_more=compute_has_more(1, total, self.page_size),
            error=None,
        )
        search = self.criteria.committed_search_text.strip()
        if search:
            logger.info("Search performed", search=search, result_count=len(result.items), total_count=total)
        logger.info("Products reloaded", total_count=total, item_count=len(result.items))
        return self._state

    async def load_more(self) -> PageState:
        """Append the next page for infinite scroll.

        No-op when nothing is left or any load is in flight. Does not
        request a fresh total count. On failure items and page are left
        intact so the user can retry by scrolling.

        Returns:
            State after the fetch.
        """
        state = self._state
        if self._closed or not state.has_more or self._loading_more or self._loads_in_flight:
            return state

        generation = self._generation
        next_page = state.page + 1
        self._loading_more = True
        self._commit(status=LoadStatus.LOADING_MORE)
        try:
            result = await self._fetch(next_page, with_count=False)
        except QueryExecutionError as e:
            if not self._is_stale(generation):
                logger.warning("Loading more products failed", error=e.message, page=next_page)
                self._commit(status=LoadStatus.FAILED, error="Could not load more products.")
            return self._state
        finally:
            self._loading_more = False

        if self._is_stale(generation):
            logger.debug("Discarding stale load-more response", generation=generation)
            return self._state

        if not result.items:
            # Remote shrank under us; stop asking instead of looping on empty pages
            self._commit(status=LoadStatus.READY, has_more=False, error=None)
            return self._state

        items = self._state.items + tuple(result.items)
        total = self._state.total_count
        self._commit(
            status=LoadStatus.READY,
            page=next_page,
            items=items,
            # A list that started with a jump holds fewer rows than its page implies
            has_more=len(items) < total and compute_has_more(next_page, total, self.page_size),
            error=None,
        )
        logger.info("Loaded more products", page=next_page, loaded=len(result.items), item_count=len(items))
        return self._state

    async def go_to_page(self, target: int) -> PageState:
        """Jump to a page and replace the list.

        The target is clamped to >= 1. Jumping to the current page is a
        no-op. A target past the last page lands on the last page.

        Args:
            target: Requested page.

        Returns:
            State after the fetch.
        """
        clamped = max(1, int(target))
        if self._closed or clamped == self._state.page:
            return self._state

        generation = self._advance_generation()
        self._commit(status=LoadStatus.LOADING, error=None)

        self._loads_in_flight += 1
        try:
            result = await self._fetch(clamped, with_count=True)
            total = self._resolve_total(result)
            landed = min(clamped, total_pages(total, self.page_size))
            if landed != clamped and not self._is_stale(generation):
                # Requested window was past the end; fetch the last real page
                result = await self._fetch(landed, with_count=True)
                total = self._resolve_total(result)
                landed = min(landed, total_pages(total, self.page_size))
        except QueryExecutionError as e:
            if not self._is_stale(generation):
                logger.warning("Page jump failed", error=e.message, target=clamped)
                self._commit(status=LoadStatus.FAILED, error="Could not load products. Check your connection.")
            return self._state
        finally:
            self._loads_in_flight -= 1

        if self._is_stale(generation):
            logger.debug("Discarding stale page jump response", generation=generation)
            return self._state

        self.committed_criteria = self.criteria
        self._commit(
            status=LoadStatus.READY,
            page=landed,
            items=tuple(result.items),
            total_count=total,
            has_more=compute_has_more(landed, total, self.page_size),
            error=None,
        )
        logger.info("Jumped to page", page=landed, requested=target, total_count=total)
        if self.on_scroll_top is not None:
            self.on_scroll_top()
        return self._state

    async def retry(self) -> PageState:
        """Retry action shown after a failed load."""
        return await self.reload()

    def close(self) -> None:
        """Tear down: drop the effect of every in-flight fetch."""
        self._closed = True
        self._advance_generation()
        logger.debug("Page controller closed")

    # =========================================================================
    # Internals
    # =========================================================================

    async def _fetch(self, page: int, *, with_count: bool) -> QueryResult:
        descriptor = build_query(
            self.criteria,
            page,
            self.page_size,
            max_price=self._price_ceiling,
            with_count=with_count,
        )
        logger.debug("Executing catalog query", page=page, query=descriptor.cache_key())
        return await self.store.execute(descriptor)

    def _advance_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    @staticmethod
    def _resolve_total(result: QueryResult) -> int:
        # Stores that cannot count fall back to the page they returned
        if result.total_count is None:
            return len(result.items)
        return max(0, result.total_count)

    def _commit(self, **changes: object) -> None:
        status = changes.get("status")
        if isinstance(status, LoadStatus):
            validate_load_transition(self._state.status, status)
        self._state = replace(self._state, **changes)
        if self.on_change is not None:
            self.on_change(self._state)
