"""View density preference persistence.

The preference is loaded once when a browsing session starts and saved
on every change. Storage is best-effort: when it is unavailable or
holds garbage the preference silently degrades to session-only.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

VIEW_MODE_KEY = "catalog.viewMode"


class ViewDensity(str, Enum):
    """Catalog grid density."""

    GRID = "grid"
    LIST = "list"
    COMPACT = "compact"


class PreferenceStore(Protocol):
    """Durable string key-value store."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryPreferenceStore:
    """Preference store kept in process memory."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFilePreferenceStore:
    """Preference store backed by a JSON object in a file.

    Raises OSError / ValueError on unreadable or corrupt files;
    PreferencePersistence is responsible for swallowing them.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Preference file {self.path} does not hold an object")
        return data

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            # Corrupt file is replaced rather than blocking the write
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp.replace(self.path)


class PreferencePersistence:
    """Scoped view-density preference.

    Example usage:
        prefs = PreferencePersistence(JsonFilePreferenceStore(path))
        density = prefs.load()          # once, at session start
        prefs.save(ViewDensity.LIST)    # on every change
    """

    def __init__(
        self,
        store: PreferenceStore | None = None,
        default: ViewDensity = ViewDensity.GRID,
        key: str = VIEW_MODE_KEY,
    ) -> None:
        """Initialize persistence.

        Args:
            store: Durable store; None keeps the preference session-only.
            default: Value used when nothing valid is stored.
            key: Storage key.
        """
        self.store = store
        self.key = key
        self.value = default
        self._loaded = False

    def load(self) -> ViewDensity:
        """Read the stored preference once.

        Later calls return the value held in memory.

        Returns:
            Stored density if valid, otherwise the current value.
        """
        if self._loaded:
            return self.value
        self._loaded = True
        if self.store is None:
            return self.value

        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.warning("Preference store unavailable", key=self.key, error=str(e))
            return self.value

        if raw is None:
            return self.value
        try:
            self.value = ViewDensity(raw)
        except ValueError:
            logger.debug("Discarding invalid stored preference", key=self.key, value=raw)
        return self.value

    def save(self, value: ViewDensity | str) -> ViewDensity:
        """Update the preference and write it through.

        Args:
            value: New density.

        Returns:
            The validated density.

        Raises:
            ValueError: If value is not a known density.
        """
        self.value = ViewDensity(value)
        self._loaded = True
        if self.store is None:
            return self.value
        try:
            self.store.set(self.key, self.value.value)
        except Exception as e:
            logger.warning("Could not persist preference", key=self.key, error=str(e))
        return self.value
