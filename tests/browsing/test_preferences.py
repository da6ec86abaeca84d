"""Tests for view density persistence."""

import json
from pathlib import Path

import pytest

from catalog_browser.browsing.preferences import (
    VIEW_MODE_KEY,
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferencePersistence,
    ViewDensity,
)


class UnavailableStore:
    """Store that fails like disabled browser storage."""

    def get(self, key: str) -> str | None:
        raise OSError("storage disabled")

    def set(self, key: str, value: str) -> None:
        raise OSError("storage disabled")


class TestPreferencePersistence:
    """Tests for PreferencePersistence."""

    def test_loads_stored_value(self) -> None:
        """A valid stored value is restored."""
        prefs = PreferencePersistence(InMemoryPreferenceStore({VIEW_MODE_KEY: "list"}))
        assert prefs.load() is ViewDensity.LIST

    def test_defaults_without_stored_value(self) -> None:
        """Nothing stored gives the default."""
        prefs = PreferencePersistence(InMemoryPreferenceStore())
        assert prefs.load() is ViewDensity.GRID

    def test_invalid_stored_value_ignored(self) -> None:
        """Unknown stored values fall back to the default."""
        prefs = PreferencePersistence(InMemoryPreferenceStore({VIEW_MODE_KEY: "huge"}))
        assert prefs.load() is ViewDensity.GRID

    def test_loads_only_once(self) -> None:
        """Later loads do not re-read the store."""
        store = InMemoryPreferenceStore({VIEW_MODE_KEY: "compact"})
        prefs = PreferencePersistence(store)
        assert prefs.load() is ViewDensity.COMPACT

        store.values[VIEW_MODE_KEY] = "list"
        assert prefs.load() is ViewDensity.COMPACT

    def test_save_writes_through(self) -> None:
        """Saving persists the value."""
        store = InMemoryPreferenceStore()
        prefs = PreferencePersistence(store)

        assert prefs.save("compact") is ViewDensity.COMPACT
        assert store.values[VIEW_MODE_KEY] == "compact"

    def test_save_rejects_unknown_value(self) -> None:
        """Unknown densities are rejected."""
        prefs = PreferencePersistence(InMemoryPreferenceStore())
        with pytest.raises(ValueError):
            prefs.save("huge")

    def test_unavailable_store_degrades_to_session(self) -> None:
        """Storage errors never escape."""
        prefs = PreferencePersistence(UnavailableStore())

        assert prefs.load() is ViewDensity.GRID
        assert prefs.save(ViewDensity.LIST) is ViewDensity.LIST
        assert prefs.load() is ViewDensity.LIST

    def test_session_only_without_store(self) -> None:
        """No store keeps the value in memory."""
        prefs = PreferencePersistence(default=ViewDensity.COMPACT)
        assert prefs.load() is ViewDensity.COMPACT
        assert prefs.save(ViewDensity.GRID) is ViewDensity.GRID


class TestJsonFilePreferenceStore:
    """Tests for the JSON file store."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file has no values."""
        store = JsonFilePreferenceStore(tmp_path / "prefs.json")
        assert store.get(VIEW_MODE_KEY) is None

    def test_set_and_get(self, tmp_path: Path) -> None:
        """Values survive a new store instance."""
        path = tmp_path / "nested" / "prefs.json"
        JsonFilePreferenceStore(path).set(VIEW_MODE_KEY, "list")

        assert JsonFilePreferenceStore(path).get(VIEW_MODE_KEY) == "list"
        assert json.loads(path.read_text()) == {VIEW_MODE_KEY: "list"}

    def test_corrupt_file_raises_on_read(self, tmp_path: Path) -> None:
        """Corrupt content is reported to the caller."""
        path = tmp_path / "prefs.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            JsonFilePreferenceStore(path).get(VIEW_MODE_KEY)

    def test_non_object_file_raises_on_read(self, tmp_path: Path) -> None:
        """Files not holding an object are rejected."""
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            JsonFilePreferenceStore(path).get(VIEW_MODE_KEY)

    def test_set_replaces_corrupt_file(self, tmp_path: Path) -> None:
        """Writing over a corrupt file succeeds."""
        path = tmp_path / "prefs.json"
        path.write_text("{not json")

        JsonFilePreferenceStore(path).set(VIEW_MODE_KEY, "grid")

        assert json.loads(path.read_text()) == {VIEW_MODE_KEY: "grid"}

    def test_persistence_over_corrupt_file(self, tmp_path: Path) -> None:
        """Corrupt storage loads the default."""
        path = tmp_path / "prefs.json"
        path.write_text("garbage")

        prefs = PreferencePersistence(JsonFilePreferenceStore(path), default=ViewDensity.LIST)
        assert prefs.load() is ViewDensity.LIST
