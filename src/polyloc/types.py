"""Core value types for polyloc.

This module holds the small immutable types shared by the codec, the
loaders and the registry:

- StringComparison: how a key is matched against a language dictionary
- TranslationSource: which fallback step produced a resolved string
- TranslationContext: a resolved string together with its provenance
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


PATH_SEPARATOR = "."
"""Separator between path segments (``MainWindow.Settings.Header``)."""

EXTENSION_PREFIX = ".loc"
"""Base suffix preceding a loader extension in translation file names."""

LANGUAGE_NAME_MARKER = "$LanguageName"
"""Reserved root key naming the language in single-language documents."""

LanguageMap = Mapping[str, Mapping[str, str]]
"""Language name -> (path -> translated string)."""


# =============================================================================
# Enums
# =============================================================================


class StringComparison(str, Enum):
    """Key comparison mode used by lookups.

    ORDINAL uses the dictionary's hash lookup. ORDINAL_IGNORE_CASE has to
    scan every key and is therefore slower on large dictionaries.
    """

    ORDINAL = "ordinal"
    ORDINAL_IGNORE_CASE = "ordinal_ignore_case"

    def equals(self, a: str, b: str) -> bool:
        """Compare two keys according to this mode.

        Ignoring case maps each character to upper case on its own. Mappings
        that would change the string length (``"ß"`` -> ``"SS"``) are not
        applied, so ``"straße"`` does not match ``"STRASSE"``.
        """
        if self is StringComparison.ORDINAL_IGNORE_CASE:
            return len(a) == len(b) and all(
                _upper_char(x) == _upper_char(y) for x, y in zip(a, b)
            )
        return a == b


def _upper_char(char: str) -> str:
    upper = char.upper()
    return upper if len(upper) == 1 else char


class TranslationSource(str, Enum):
    """Fallback step that produced a translation."""

    EXPLICIT_LANGUAGE = "explicit_language"
    CURRENT_LANGUAGE = "current_language"
    FALLBACK_LANGUAGE = "fallback_language"
    DEFAULT_TEXT = "default_text"
    KEY = "key"
    EMPTY = "empty"

    @property
    def is_language(self) -> bool:
        """True when the text came out of a language dictionary."""
        return self in _LANGUAGE_SOURCES


_LANGUAGE_SOURCES = frozenset(
    {
        TranslationSource.EXPLICIT_LANGUAGE,
        TranslationSource.CURRENT_LANGUAGE,
        TranslationSource.FALLBACK_LANGUAGE,
    }
)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class TranslationContext:
    """Resolved translation with provenance.

    Callers that cache translations (live UI bindings, for instance) use
    ``source`` and ``language_name`` to decide whether a cached value goes
    stale when the current or fallback language changes.

    Attributes:
        key: Key that produced the text, or the joined candidate keys when
            no language dictionary had any of them
        text: Resolved string
        language_name: Language the text came from, ``None`` otherwise
        source: Fallback step that produced ``text``
    """

    key: str
    text: str
    language_name: str | None
    source: TranslationSource

    def __post_init__(self) -> None:
        if self.source.is_language and self.language_name is None:
            raise ValueError(
                f"Translation source '{self.source.value}' requires a language name"
            )
        if not self.source.is_language and self.language_name is not None:
            raise ValueError(
                f"Translation source '{self.source.value}' cannot carry a language name"
            )

    def __str__(self) -> str:
        return self.text

    @property
    def depends_on_current_language(self) -> bool:
        """True when changing the current language may change this result."""
        return self.source is not TranslationSource.EXPLICIT_LANGUAGE

    @classmethod
    def from_language(
        cls,
        key: str,
        text: str,
        language_name: str,
        source: TranslationSource,
    ) -> "TranslationContext":
        """Create a context for text found in a language dictionary."""
        return cls(key=key, text=text, language_name=language_name, source=source)

    @classmethod
    def from_fallback(
        cls,
        key: str,
        text: str,
        source: TranslationSource,
    ) -> "TranslationContext":
        """Create a context for default text, key-as-text or empty results."""
        return cls(key=key, text=text, language_name=None, source=source)


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments."""
    return path.split(PATH_SEPARATOR)


def join_path(segments: list[str] | tuple[str, ...]) -> str:
    """Join path segments with the path separator."""
    return PATH_SEPARATOR.join(segments)
