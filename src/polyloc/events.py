"""Event payloads and observer lists.

Registry notifications are plain ordered lists of synchronous callbacks.
Language pointer changes are two-phase: every ``changing`` observer runs
with a cancellable event before the mutation, and every ``changed``
observer runs after it.

Example:
    loc = Loc()

    @loc.current_language_changing.connect
    def veto_klingon(event: LanguageChangeEvent) -> None:
        if event.new_language_name == "Klingon":
            event.cancel = True

    loc.current_language_changed.connect(
        lambda event: print(f"{event.old_language_name} -> {event.new_language_name}")
    )
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, TypeVar


E = TypeVar("E")


# =============================================================================
# Event Payloads
# =============================================================================


@dataclass
class LanguageChangeEvent:
    """Pre-change notification for the current or fallback language.

    Any observer may set ``cancel`` to veto the change.

    Attributes:
        old_language_name: Name before the change
        new_language_name: Requested name
        cancel: Set to True to veto the change
    """

    old_language_name: str | None
    new_language_name: str | None
    cancel: bool = False


@dataclass(frozen=True)
class LanguageChangedEvent:
    """Post-change notification for the current or fallback language."""

    old_language_name: str | None
    new_language_name: str | None


@dataclass(frozen=True)
class MissingTranslationEvent:
    """A lookup missed in the dictionary it was resolved against.

    Attributes:
        language_name: Language that was searched
        keys: Requested key(s), in priority order
    """

    language_name: str | None
    keys: tuple[str, ...]

    @property
    def key(self) -> str:
        """First (highest priority) requested key."""
        return self.keys[0]


@dataclass(frozen=True)
class LanguageEvent:
    """A language was added to or removed from a registry."""

    language_name: str


@dataclass(frozen=True)
class TranslationsChangedEvent:
    """Keys of a language dictionary were added, updated or removed."""

    keys: tuple[str, ...]
    removed: bool = False


# =============================================================================
# Observer List
# =============================================================================


class EventHook(Generic[E]):
    """Ordered list of synchronous observers.

    Observers run in registration order on the emitting thread. Exceptions
    raised by an observer propagate to the code that triggered the event.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._observers: list[Callable[[E], None]] = []
        self._lock = threading.Lock()

    def connect(self, observer: Callable[[E], None]) -> Callable[[E], None]:
        """Register an observer.

        Returns the observer unchanged so the method can be used as a
        decorator. Registering the same observer twice is a no-op.
        """
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)
        return observer

    def disconnect(self, observer: Callable[[E], None]) -> bool:
        """Remove an observer. Returns False if it was not registered."""
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                return False
            return True

    def clear(self) -> None:
        with self._lock:
            self._observers.clear()

    def emit(self, event: E) -> E:
        """Call every observer with ``event`` and return it."""
        for observer in self._snapshot():
            observer(event)
        return event

    def _snapshot(self) -> tuple[Callable[[E], None], ...]:
        with self._lock:
            return tuple(self._observers)

    def __len__(self) -> int:
        return len(self._observers)

    def __bool__(self) -> bool:
        return bool(self._observers)

    def __iter__(self) -> Iterator[Callable[[E], None]]:
        return iter(self._snapshot())

    def __repr__(self) -> str:
        return f"EventHook({self.name!r}, observers={len(self._observers)})"
