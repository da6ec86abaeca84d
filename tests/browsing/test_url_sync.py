"""Tests for address parsing, serialization and sync."""

import pytest

from catalog_browser.browsing.criteria import FilterCriteria, PriceRange, SortMode
from catalog_browser.browsing.url_sync import (
    InMemoryAddressBar,
    UrlSync,
    parse,
    serialize,
    to_params,
)


class TestParse:
    """Tests for address parsing."""

    def test_empty_address_gives_defaults(self) -> None:
        """An empty address restores session defaults."""
        assert parse("") == (FilterCriteria(), 1)

    def test_full_address(self) -> None:
        """Every known key is restored."""
        criteria, page = parse("?search=desk+lamp&category=lighting&sort=price_desc&onSale=true&page=3")

        assert criteria.search_text == "desk lamp"
        assert criteria.committed_search_text == "desk lamp"
        assert criteria.category_ids == {"lighting"}
        assert criteria.sort_mode is SortMode.PRICE_DESC
        assert criteria.only_on_sale
        assert page == 3

    def test_path_prefix_is_ignored(self) -> None:
        """Addresses with a path parse the same as bare queries."""
        assert parse("/catalog?sort=rating") == parse("sort=rating")

    @pytest.mark.parametrize("raw", ["abc", "0", "-2", "", "1.5"])
    def test_invalid_page_falls_back_to_one(self, raw: str) -> None:
        """Non-numeric or non-positive pages become 1."""
        assert parse(f"page={raw}")[1] == 1

    def test_unknown_sort_falls_back_to_popular(self) -> None:
        """Unknown sort tokens become popular."""
        criteria, _ = parse("sort=cheapest")
        assert criteria.sort_mode is SortMode.POPULAR

    def test_sort_aliases(self) -> None:
        """Storefront sort aliases are accepted."""
        assert parse("sort=price-low")[0].sort_mode is SortMode.PRICE_ASC
        assert parse("sort=price-high")[0].sort_mode is SortMode.PRICE_DESC

    def test_on_sale_requires_true(self) -> None:
        """Only "true" turns the sale filter on."""
        assert parse("onSale=true")[0].only_on_sale
        assert parse("onSale=TRUE")[0].only_on_sale
        assert not parse("onSale=1")[0].only_on_sale
        assert not parse("onSale=false")[0].only_on_sale

    def test_unknown_keys_ignored(self) -> None:
        """Unrecognised keys have no effect."""
        assert parse("utm_source=mail&view=list") == (FilterCriteria(), 1)

    def test_first_repeated_key_wins(self) -> None:
        """Repeated keys use their first value."""
        criteria, page = parse("category=garden&category=kitchen&page=2&page=5")
        assert criteria.category_ids == {"garden"}
        assert page == 2

    def test_empty_category_selects_nothing(self) -> None:
        """An empty category value clears the selection."""
        assert parse("category=")[0].category_ids == frozenset()

    def test_mapping_input(self) -> None:
        """Parsed query mappings are accepted."""
        criteria, page = parse({"search": "chair", "page": "4"})
        assert criteria.committed_search_text == "chair"
        assert page == 4

    def test_base_keeps_fields_outside_the_address(self) -> None:
        """Overlaying onto a base keeps what the address cannot express."""
        base = FilterCriteria(
            search_text="typing...",
            price_range=PriceRange(10, 90),
            rating_floor=4,
            only_in_stock=False,
        )
        criteria, _ = parse("search=lamp", base=base)

        assert criteria.committed_search_text == "lamp"
        assert criteria.search_text == "typing..."
        assert criteria.price_range == PriceRange(10, 90)
        assert criteria.rating_floor == 4
        assert not criteria.only_in_stock


class TestSerialize:
    """Tests for address serialization."""

    def test_defaults_serialize_to_empty(self) -> None:
        """Default state has an empty address."""
        assert serialize(FilterCriteria(), 1) == ""

    def test_defaults_are_omitted(self) -> None:
        """Only non-default keys are written."""
        criteria = FilterCriteria(sort_mode=SortMode.NAME)
        assert to_params(criteria, 1) == {"sort": "name"}
        assert serialize(criteria, 2) == "sort=name&page=2"

    def test_uncommitted_search_not_written(self) -> None:
        """Raw search box text never reaches the address."""
        assert serialize(FilterCriteria(search_text="lam"), 1) == ""

    def test_multiple_categories_omitted(self) -> None:
        """The category key is written only for a single selection."""
        criteria = FilterCriteria(category_ids=frozenset({"garden", "kitchen"}))
        assert "category" not in to_params(criteria, 1)

    def test_values_are_encoded(self) -> None:
        """Search text is form encoded."""
        assert serialize(FilterCriteria(committed_search_text="desk lamp & shade"), 1) == (
            "search=desk+lamp+%26+shade"
        )


class TestRoundTrip:
    """Tests for parse/serialize agreement."""

    def test_round_trip_onto_self(self) -> None:
        """Parsing an address back onto its state reproduces the state."""
        criteria = FilterCriteria(
            search_text="desk la",
            committed_search_text="desk lamp",
            category_ids=frozenset({"lighting"}),
            sort_mode=SortMode.RATING,
            only_on_sale=True,
            price_range=PriceRange(5, 300),
        )
        assert parse(serialize(criteria, 4), base=criteria) == (criteria, 4)

    def test_round_trip_of_addressable_state(self) -> None:
        """State expressible by the address round-trips without a base."""
        criteria = FilterCriteria(
            search_text="desk lamp",
            committed_search_text="desk lamp",
            category_ids=frozenset({"lighting"}),
            sort_mode=SortMode.PRICE_ASC,
            only_on_sale=True,
        )
        assert parse(serialize(criteria, 2)) == (criteria, 2)


class TestUrlSync:
    """Tests for address bar synchronization."""

    def test_restore_then_sync_writes_canonical_address(self) -> None:
        """The first sync normalises the entry address."""
        bar = InMemoryAddressBar("/catalog?page=1&sort=popular&utm_source=mail")
        sync = UrlSync(bar)

        criteria, page = sync.restore(bar.query)
        sync.sync(criteria, page)

        assert bar.address == "/catalog"
        assert bar.history == ["/catalog"]

    def test_unchanged_state_is_not_rewritten(self) -> None:
        """Syncing the same state twice writes once."""
        bar = InMemoryAddressBar()
        sync = UrlSync(bar)
        criteria = FilterCriteria(only_on_sale=True)

        sync.sync(criteria, 1)
        sync.sync(criteria, 1)

        assert bar.history == ["/catalog?onSale=true"]

    def test_changes_are_written(self) -> None:
        """Each committed change rewrites the address."""
        bar = InMemoryAddressBar()
        sync = UrlSync(bar)
        criteria = FilterCriteria(only_on_sale=True)

        sync.sync(criteria, 1)
        sync.sync(criteria, 2)

        assert bar.history == ["/catalog?onSale=true", "/catalog?onSale=true&page=2"]
        assert bar.query == "onSale=true&page=2"

    def test_custom_path(self) -> None:
        """Addresses are attached to the configured path."""
        sync = UrlSync(InMemoryAddressBar("/shop"), path="/shop")
        assert sync.render(FilterCriteria(sort_mode=SortMode.NEWEST), 1) == "/shop?sort=newest"
