"""Address synchronization.

Maps FilterCriteria plus the page number to a flat query string and
back. The address is the validation boundary for criteria: anything
malformed falls back to defaults instead of failing.

Keys:
    search    committed search text
    category  the selected category, only when exactly one is selected
    sort      sort mode, omitted for ``popular``
    onSale    ``"true"`` or omitted
    page      page number, omitted for 1
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Protocol
from urllib.parse import parse_qsl, urlencode

import structlog

from catalog_browser.browsing.criteria import FilterCriteria, SortMode

logger = structlog.get_logger()

SEARCH_KEY = "search"
CATEGORY_KEY = "category"
SORT_KEY = "sort"
ON_SALE_KEY = "onSale"
PAGE_KEY = "page"

DEFAULT_PATH = "/catalog"


def _parse_page(raw: str | None) -> int:
    if raw is None:
        return 1
    try:
        page = int(raw.strip())
    except ValueError:
        return 1
    return page if page > 0 else 1


def _as_mapping(query: str | Mapping[str, str]) -> dict[str, str]:
    if isinstance(query, Mapping):
        return {str(k): str(v) for k, v in query.items()}
    query = query.split("?", 1)[1] if "?" in query else query
    # First occurrence wins for repeated keys
    params: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        params.setdefault(key, value)
    return params


def parse(
    query: str | Mapping[str, str],
    base: FilterCriteria | None = None,
) -> tuple[FilterCriteria, int]:
    """Parse an address into criteria and a page number.

    Absent keys keep the base value (session defaults when no base is
    given). Invalid values fall back to defaults: a non-numeric or
    non-positive page becomes 1, an unknown sort becomes ``popular``.
    Unknown keys are ignored.

    Args:
        query: Query string (with or without a leading path) or mapping.
        base: Criteria to overlay the address onto. The raw search box
            text is kept from the base when one is given.

    Returns:
        Tuple of (criteria, page).
    """
    params = _as_mapping(query)
    criteria = base or FilterCriteria()

    if SEARCH_KEY in params:
        search = params[SEARCH_KEY]
        criteria = replace(
            criteria,
            committed_search_text=search,
            search_text=criteria.search_text if base is not None else search,
        )

    if CATEGORY_KEY in params:
        category = params[CATEGORY_KEY]
        criteria = replace(criteria, category_ids=frozenset({category}) if category else frozenset())

    if SORT_KEY in params:
        sort_mode = SortMode.parse(params[SORT_KEY])
        if sort_mode is None:
            logger.debug("Ignoring unknown sort token", sort=params[SORT_KEY])
            sort_mode = SortMode.POPULAR
        criteria = replace(criteria, sort_mode=sort_mode)

    if ON_SALE_KEY in params:
        criteria = replace(criteria, only_on_sale=params[ON_SALE_KEY].strip().lower() == "true")

    return criteria, _parse_page(params.get(PAGE_KEY))


def to_params(criteria: FilterCriteria, page: int) -> dict[str, str]:
    """Render criteria and page as address parameters, omitting defaults."""
    params: dict[str, str] = {}
    if criteria.committed_search_text:
        params[SEARCH_KEY] = criteria.committed_search_text
    if len(criteria.category_ids) == 1:
        (category,) = criteria.category_ids
        params[CATEGORY_KEY] = category
    if criteria.sort_mode is not SortMode.POPULAR:
        params[SORT_KEY] = criteria.sort_mode.value
    if criteria.only_on_sale:
        params[ON_SALE_KEY] = "true"
    if page > 1:
        params[PAGE_KEY] = str(page)
    return params


def serialize(criteria: FilterCriteria, page: int) -> str:
    """Serialize criteria and page to a minimal query string.

    Args:
        criteria: Criteria snapshot.
        page: Current page.

    Returns:
        Query string without leading ``?``; empty when all defaults.
    """
    return urlencode(to_params(criteria, page))


class AddressBar(Protocol):
    """External address representation (e.g., the browser location)."""

    def replace(self, address: str) -> None:
        """Replace the current address without navigating."""
        ...


class InMemoryAddressBar:
    """Address bar that records every replacement."""

    def __init__(self, address: str = DEFAULT_PATH) -> None:
        self.address = address
        self.history: list[str] = []

    def replace(self, address: str) -> None:
        self.address = address
        self.history.append(address)

    @property
    def query(self) -> str:
        """Query part of the current address."""
        return self.address.split("?", 1)[1] if "?" in self.address else ""


class UrlSync:
    """Keeps the address bar in step with committed browsing state.

    Example usage:
        sync = UrlSync(address_bar)
        criteria, page = sync.restore(address_bar.query)
        ...
        sync.sync(criteria, page)   # after every committed change
    """

    def __init__(self, address_bar: AddressBar, path: str = DEFAULT_PATH) -> None:
        """Initialize sync.

        Args:
            address_bar: Address representation to rewrite.
            path: Path the query string is attached to.
        """
        self.address_bar = address_bar
        self.path = path
        self._last_address: str | None = None

    def restore(self, query: str | Mapping[str, str]) -> tuple[FilterCriteria, int]:
        """Parse the entry address into initial criteria and page."""
        criteria, page = parse(query)
        # Forget the entry address so the first sync writes the canonical form
        self._last_address = None
        logger.info("Restored browsing state from address", address=self.render(criteria, page), page=page)
        return criteria, page

    def render(self, criteria: FilterCriteria, page: int) -> str:
        """Full address for a state."""
        query = serialize(criteria, page)
        return f"{self.path}?{query}" if query else self.path

    def sync(self, criteria: FilterCriteria, page: int) -> str:
        """Rewrite the address if the state changed.

        Args:
            criteria: Committed criteria.
            page: Current page.

        Returns:
            The current address.
        """
        address = self.render(criteria, page)
        if address != self._last_address:
            self.address_bar.replace(address)
            self._last_address = address
            logger.debug("Address updated", address=address)
        return address
