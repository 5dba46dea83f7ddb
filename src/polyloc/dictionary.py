"""Thread-safe per-language translation store."""

from __future__ import annotations

import threading
from typing import Iterator, Mapping, MutableMapping

from polyloc.events import EventHook, TranslationsChangedEvent
from polyloc.types import StringComparison


class LanguageDictionary(MutableMapping[str, str]):
    """Flat ``path -> translated string`` mapping for one language.

    All reads and writes are serialized through a re-entrant lock, so a
    writer updating a key never exposes a torn value to concurrent readers.
    Iteration walks a snapshot of the keys taken under the lock.

    Change observers attached to ``changed`` are called after the map update
    completes, outside of the lock.

    Example:
        >>> d = LanguageDictionary({"A.B": "Hello"})
        >>> d.lookup("a.b", StringComparison.ORDINAL_IGNORE_CASE)
        'Hello'
    """

    def __init__(self, translations: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.RLock()
        self.changed: EventHook[TranslationsChangedEvent] = EventHook("changed")
        if translations:
            self.merge(translations)

    # -------------------------------------------------------------------------
    # Mapping protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, key: str) -> str:
        with self._lock:
            return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
        self._notify((key,))

    def __delitem__(self, key: str) -> None:
        with self._lock:
            del self._data[key]
        self._notify((key,), removed=True)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            keys = list(self._data)
        return iter(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __repr__(self) -> str:
        return f"LanguageDictionary({len(self)} keys)"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        with self._lock:
            return self._data.get(key, default)

    def clear(self) -> None:
        with self._lock:
            keys = tuple(self._data)
            self._data.clear()
        if keys:
            self._notify(keys, removed=True)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def lookup(
        self,
        key: str,
        comparison: StringComparison = StringComparison.ORDINAL,
    ) -> str | None:
        """Find a translation using the given comparison.

        ORDINAL is a hash lookup. Any other comparison scans all keys and
        returns the first match in insertion order.

        Args:
            key: Path to find
            comparison: Key comparison mode

        Returns:
            The translated string, or None if no key matches
        """
        with self._lock:
            if comparison is StringComparison.ORDINAL:
                return self._data.get(key)
            for existing, value in self._data.items():
                if comparison.equals(existing, key):
                    return value
        return None

    # -------------------------------------------------------------------------
    # Bulk operations
    # -------------------------------------------------------------------------

    def try_add(self, key: str, value: str) -> bool:
        """Add a key only if it is not present yet."""
        with self._lock:
            if key in self._data:
                return False
            self._data[key] = value
        self._notify((key,))
        return True

    def merge(
        self,
        other: Mapping[str, str],
        overwrite_existing: bool = True,
    ) -> int:
        """Merge translations key by key.

        Args:
            other: Translations to merge in
            overwrite_existing: Replace values of keys that already exist

        Returns:
            Number of keys added or updated
        """
        items = list(other.items())
        touched: list[str] = []
        with self._lock:
            for key, value in items:
                if key in self._data and not overwrite_existing:
                    continue
                self._data[key] = value
                touched.append(key)
        if touched:
            self._notify(tuple(touched))
        return len(touched)

    def to_dict(self) -> dict[str, str]:
        """Return a plain-dict snapshot."""
        with self._lock:
            return dict(self._data)

    def _notify(self, keys: tuple[str, ...], removed: bool = False) -> None:
        if self.changed:
            self.changed.emit(TranslationsChangedEvent(keys=keys, removed=removed))
