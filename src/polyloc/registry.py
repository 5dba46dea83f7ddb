"""Translation registry and resolution engine.

The registry (``Loc``) owns one LanguageDictionary per language, a current
and a fallback language pointer, and an ordered list of translation loaders
used to read and write files.

Resolution order for ``translate(path)``:

1. The requested language (``language_name``), or the current language
2. ``default_text``, when given
3. With ``language_name`` and ``allow_fallback``: the current language,
   then the fallback language. Without ``language_name``: the fallback
   language.
4. The key itself, when ``use_key_as_fallback`` is set
5. An empty string

Example:
    loc = Loc(loaders=[JsonTranslationLoader()])
    loc.load_from_directory("lang")
    loc.current_language_name = "English"
    loc.fallback_language_name = "English"

    title = loc.translate("MainWindow.Title", default_text="Main Window")
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, TypeVar

from polyloc._io import atomic_write_text, iter_translation_files
from polyloc.dictionary import LanguageDictionary
from polyloc.events import (
    EventHook,
    LanguageChangeEvent,
    LanguageChangedEvent,
    LanguageEvent,
    MissingTranslationEvent,
)
from polyloc.exceptions import (
    LoaderNotFoundError,
    MissingTranslationError,
    NoTranslationLoadersError,
)
from polyloc.loaders import default_loaders
from polyloc.loaders.base import TranslationLoader, normalize_extension
from polyloc.types import (
    EXTENSION_PREFIX,
    LanguageMap,
    StringComparison,
    TranslationContext,
    TranslationSource,
)


logger = logging.getLogger(__name__)

L = TypeVar("L", bound=TranslationLoader)


@dataclass
class LoadResult:
    """Outcome of a directory load.

    Attributes:
        loaded: Files whose translations were merged, in merge order
        failed: Files that raised while loading, with the exception
        skipped: Files no registered loader could read
    """

    loaded: list[Path] = field(default_factory=list)
    failed: dict[Path, Exception] = field(default_factory=dict)
    skipped: list[Path] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class Loc:
    """Translation registry.

    All state is guarded by one re-entrant lock. Observers are called outside
    of it, on the thread that triggered the event.

    Args:
        loaders: Translation loaders, in dispatch priority order
        current_language_name: Initial current language
        fallback_language_name: Initial fallback language
        use_key_as_fallback: Return the key when nothing else resolves
        throw_on_missing_translation: Raise MissingTranslationError on a miss
        notify_missing_translations: Emit ``missing_translation_requested``
        max_workers: Thread count for directory loads and saves
    """

    def __init__(
        self,
        loaders: Iterable[TranslationLoader] | None = None,
        current_language_name: str = "",
        fallback_language_name: str | None = None,
        use_key_as_fallback: bool = True,
        throw_on_missing_translation: bool = False,
        notify_missing_translations: bool = True,
        max_workers: int | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._languages: dict[str, LanguageDictionary] = {}
        self._loaders: list[TranslationLoader] = []

        self._current_name = current_language_name
        self._current: LanguageDictionary | None = None
        self._fallback_name = fallback_language_name
        self._fallback: LanguageDictionary | None = None

        self.use_key_as_fallback = use_key_as_fallback
        self.throw_on_missing_translation = throw_on_missing_translation
        self.notify_missing_translations = notify_missing_translations
        self.max_workers = max_workers

        self.current_language_changing: EventHook[LanguageChangeEvent] = EventHook(
            "current_language_changing"
        )
        self.current_language_changed: EventHook[LanguageChangedEvent] = EventHook(
            "current_language_changed"
        )
        self.fallback_language_changing: EventHook[LanguageChangeEvent] = EventHook(
            "fallback_language_changing"
        )
        self.fallback_language_changed: EventHook[LanguageChangedEvent] = EventHook(
            "fallback_language_changed"
        )
        self.missing_translation_requested: EventHook[MissingTranslationEvent] = EventHook(
            "missing_translation_requested"
        )
        self.language_added: EventHook[LanguageEvent] = EventHook("language_added")
        self.language_removed: EventHook[LanguageEvent] = EventHook("language_removed")

        for loader in loaders or ():
            self.add_translation_loader(loader)

    def __repr__(self) -> str:
        return (
            f"Loc(languages={list(self.available_language_names)}, "
            f"current={self._current_name!r}, fallback={self._fallback_name!r})"
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def languages(self) -> dict[str, LanguageDictionary]:
        """Snapshot of the language name -> dictionary mapping."""
        with self._lock:
            return dict(self._languages)

    @property
    def available_language_names(self) -> tuple[str, ...]:
        """Names of all loaded languages, in insertion order."""
        with self._lock:
            return tuple(self._languages)

    @property
    def translation_loaders(self) -> tuple[TranslationLoader, ...]:
        with self._lock:
            return tuple(self._loaders)

    @property
    def current_language_name(self) -> str:
        with self._lock:
            return self._current_name

    @current_language_name.setter
    def current_language_name(self, name: str) -> None:
        self.set_current_language(name)

    @property
    def fallback_language_name(self) -> str | None:
        with self._lock:
            return self._fallback_name

    @fallback_language_name.setter
    def fallback_language_name(self, name: str | None) -> None:
        self.set_fallback_language(name)

    @property
    def current_language_dictionary(self) -> LanguageDictionary | None:
        """Dictionary of the current language, None when it is not loaded."""
        with self._lock:
            return self._current

    @property
    def fallback_language_dictionary(self) -> LanguageDictionary | None:
        with self._lock:
            return self._fallback

    def has_language(self, language_name: str) -> bool:
        with self._lock:
            return language_name in self._languages

    def get_language(self, language_name: str) -> LanguageDictionary | None:
        with self._lock:
            return self._languages.get(language_name)

    def __contains__(self, language_name: object) -> bool:
        with self._lock:
            return language_name in self._languages

    # =========================================================================
    # Language Pointers
    # =========================================================================

    def set_current_language(self, name: str) -> bool:
        """Change the current language.

        ``current_language_changing`` observers may veto the change.

        Returns:
            False if an observer cancelled the change
        """
        with self._lock:
            old = self._current_name
        if old == name:
            return True

        event = self.current_language_changing.emit(LanguageChangeEvent(old, name))
        if event.cancel:
            logger.warning(f"Change of current language from {old!r} to {name!r} was cancelled")
            return False

        with self._lock:
            self._current_name = name
            self._current = self._languages.get(name)
        logger.debug(f"Current language changed from {old!r} to {name!r}")
        self.current_language_changed.emit(LanguageChangedEvent(old, name))
        return True

    def set_fallback_language(self, name: str | None) -> bool:
        """Change the fallback language. Returns False if an observer cancelled."""
        with self._lock:
            old = self._fallback_name
        if old == name:
            return True

        event = self.fallback_language_changing.emit(LanguageChangeEvent(old, name))
        if event.cancel:
            logger.warning(f"Change of fallback language from {old!r} to {name!r} was cancelled")
            return False

        with self._lock:
            self._fallback_name = name
            self._fallback = self._languages.get(name) if name is not None else None
        logger.debug(f"Fallback language changed from {old!r} to {name!r}")
        self.fallback_language_changed.emit(LanguageChangedEvent(old, name))
        return True

    def _refresh_pointer_cache(self) -> None:
        # Caller holds self._lock.
        self._current = self._languages.get(self._current_name)
        self._fallback = (
            self._languages.get(self._fallback_name)
            if self._fallback_name is not None
            else None
        )

    # =========================================================================
    # Translation
    # =========================================================================

    def translate(
        self,
        path: str,
        comparison: StringComparison = StringComparison.ORDINAL,
        default_text: str | None = None,
        language_name: str | None = None,
        allow_fallback: bool = False,
    ) -> str:
        """Resolve a translated string.

        Args:
            path: Dotted key path
            comparison: Key comparison mode
            default_text: Returned on a miss before any fallback language
            language_name: Language to search instead of the current one
            allow_fallback: With ``language_name``, search the current and
                then the fallback language on a miss

        Returns:
            The resolved string

        Raises:
            MissingTranslationError: On a miss when
                ``throw_on_missing_translation`` is set
        """
        return self._resolve([path], comparison, default_text, language_name, allow_fallback).text

    def translate_any(
        self,
        paths: Sequence[str],
        comparison: StringComparison = StringComparison.ORDINAL,
        default_text: str | None = None,
        language_name: str | None = None,
        allow_fallback: bool = False,
    ) -> str:
        """Resolve the first of several candidate paths.

        Every fallback step tries all candidates in order before moving on.
        When falling back to the key, the candidates are joined with ``", "``.
        """
        return self._resolve(paths, comparison, default_text, language_name, allow_fallback).text

    def translate_all(
        self,
        paths: Sequence[str],
        comparison: StringComparison = StringComparison.ORDINAL,
        default_text: str | None = None,
        language_name: str | None = None,
        allow_fallback: bool = False,
    ) -> list[str]:
        """Resolve each path independently, keeping order."""
        return [
            self.translate(path, comparison, default_text, language_name, allow_fallback)
            for path in paths
        ]

    def translate_with_context(
        self,
        path: str,
        comparison: StringComparison = StringComparison.ORDINAL,
        default_text: str | None = None,
        language_name: str | None = None,
        allow_fallback: bool = False,
    ) -> TranslationContext:
        """Like ``translate`` but also report where the string came from."""
        return self._resolve([path], comparison, default_text, language_name, allow_fallback)

    def translate_any_with_context(
        self,
        paths: Sequence[str],
        comparison: StringComparison = StringComparison.ORDINAL,
        default_text: str | None = None,
        language_name: str | None = None,
        allow_fallback: bool = False,
    ) -> TranslationContext:
        return self._resolve(paths, comparison, default_text, language_name, allow_fallback)

    def _resolve(
        self,
        paths: Sequence[str],
        comparison: StringComparison,
        default_text: str | None,
        language_name: str | None,
        allow_fallback: bool,
    ) -> TranslationContext:
        keys = list(paths)
        if not keys:
            raise ValueError("At least one path is required")
        joined = ", ".join(keys)

        with self._lock:
            current_name, current = self._current_name, self._current
            fallback_name, fallback = self._fallback_name, self._fallback
            if language_name is None:
                target_name, target = current_name, current
                source = TranslationSource.CURRENT_LANGUAGE
            else:
                target_name, target = language_name, self._languages.get(language_name)
                source = TranslationSource.EXPLICIT_LANGUAGE

        hit = _find(target, keys, comparison)
        if hit is not None:
            return TranslationContext.from_language(hit[0], hit[1], target_name, source)

        if self.throw_on_missing_translation:
            raise MissingTranslationError(target_name, keys)
        if self.notify_missing_translations:
            self.missing_translation_requested.emit(
                MissingTranslationEvent(target_name, tuple(keys))
            )

        if default_text is not None:
            return TranslationContext.from_fallback(
                joined, default_text, TranslationSource.DEFAULT_TEXT
            )

        if language_name is not None:
            if allow_fallback:
                steps = [
                    (current_name, current, TranslationSource.CURRENT_LANGUAGE),
                    (fallback_name, fallback, TranslationSource.FALLBACK_LANGUAGE),
                ]
                for name, dictionary, step_source in steps:
                    hit = _find(dictionary, keys, comparison)
                    if hit is not None and name is not None:
                        return TranslationContext.from_language(hit[0], hit[1], name, step_source)
        else:
            hit = _find(fallback, keys, comparison)
            if hit is not None and fallback_name is not None:
                return TranslationContext.from_language(
                    hit[0], hit[1], fallback_name, TranslationSource.FALLBACK_LANGUAGE
                )

        if self.use_key_as_fallback:
            return TranslationContext.from_fallback(joined, joined, TranslationSource.KEY)
        return TranslationContext.from_fallback(joined, "", TranslationSource.EMPTY)

    # =========================================================================
    # Language Management
    # =========================================================================

    def add_language(
        self,
        language_name: str,
        translations: Mapping[str, str],
        overwrite_existing: bool = True,
    ) -> LanguageDictionary:
        """Merge translations into a language, creating it if needed.

        Args:
            language_name: Case-sensitive language name
            translations: Path -> translated string
            overwrite_existing: Replace values of paths that already exist

        Returns:
            The language's dictionary
        """
        with self._lock:
            dictionary = self._languages.get(language_name)
            created = dictionary is None
            if created:
                dictionary = LanguageDictionary(translations)
                self._languages[language_name] = dictionary
                self._refresh_pointer_cache()
        if not created:
            dictionary.merge(translations, overwrite_existing=overwrite_existing)
            return dictionary

        logger.debug(f"Added language {language_name!r} with {len(dictionary)} translations")
        self.language_added.emit(LanguageEvent(language_name))
        return dictionary

    def add_languages(
        self,
        languages: LanguageMap,
        overwrite_existing: bool = True,
    ) -> None:
        """Merge a whole language map."""
        for language_name, translations in languages.items():
            self.add_language(language_name, translations, overwrite_existing)

    def replace_language(
        self,
        language_name: str,
        translations: Mapping[str, str],
    ) -> LanguageDictionary:
        """Replace a language's dictionary with a new one."""
        dictionary = LanguageDictionary(translations)
        with self._lock:
            created = language_name not in self._languages
            self._languages[language_name] = dictionary
            self._refresh_pointer_cache()
        if created:
            self.language_added.emit(LanguageEvent(language_name))
        return dictionary

    def remove_language(self, language_name: str) -> bool:
        """Remove a language. Returns False if it was not loaded."""
        return self.take_language(language_name) is not None

    def take_language(self, language_name: str) -> dict[str, str] | None:
        """Remove a language and return its translations."""
        with self._lock:
            dictionary = self._languages.pop(language_name, None)
            if dictionary is None:
                return None
            self._refresh_pointer_cache()
        logger.debug(f"Removed language {language_name!r}")
        self.language_removed.emit(LanguageEvent(language_name))
        return dictionary.to_dict()

    def rename_language(self, language_name: str, new_name: str) -> bool:
        """Move a language's translations to a new name.

        If ``new_name`` already exists the translations are merged into it.

        Returns:
            False if ``language_name`` was not loaded
        """
        if language_name == new_name:
            return self.has_language(language_name)
        translations = self.take_language(language_name)
        if translations is None:
            return False
        self.add_language(new_name, translations)
        return True

    def clear_languages(
        self,
        clear_current: bool = False,
        clear_fallback: bool = False,
    ) -> None:
        """Remove every language, optionally resetting the pointers."""
        with self._lock:
            removed = list(self._languages)
            self._languages.clear()
            self._refresh_pointer_cache()
        for language_name in removed:
            self.language_removed.emit(LanguageEvent(language_name))
        if clear_current:
            self.set_current_language("")
        if clear_fallback:
            self.set_fallback_language(None)

    def to_language_map(
        self,
        language_names: Iterable[str] | None = None,
    ) -> dict[str, dict[str, str]]:
        """Snapshot languages as plain dicts.

        Names that are not loaded are skipped.
        """
        with self._lock:
            if language_names is None:
                selected = list(self._languages.items())
            else:
                selected = []
                for name in language_names:
                    dictionary = self._languages.get(name)
                    if dictionary is None:
                        logger.warning(f"Language {name!r} is not loaded and was skipped")
                        continue
                    selected.append((name, dictionary))
        return {name: dictionary.to_dict() for name, dictionary in selected}

    # =========================================================================
    # Loader Management
    # =========================================================================

    def add_translation_loader(self, loader: TranslationLoader) -> bool:
        """Register a loader. Registering the same instance twice is a no-op."""
        with self._lock:
            if any(existing is loader for existing in self._loaders):
                return True
            conflicts = self.find_conflicting_loaders(loader)
            self._loaders.append(loader)
        if conflicts:
            logger.debug(f"{loader!r} shares file extensions with {conflicts!r}")
        logger.debug(f"Registered translation loader {loader!r}")
        return True

    def add_translation_loader_type(self, loader_type: type[L], *args: Any, **kwargs: Any) -> L:
        """Return the registered instance of ``loader_type``, creating one if needed."""
        with self._lock:
            for existing in self._loaders:
                if type(existing) is loader_type:
                    return existing  # type: ignore[return-value]
            loader = loader_type(*args, **kwargs)
            self.add_translation_loader(loader)
            return loader

    def get_translation_loader(self, loader_type: type[L]) -> L | None:
        """First registered loader that is an instance of ``loader_type``."""
        with self._lock:
            for loader in self._loaders:
                if isinstance(loader, loader_type):
                    return loader
        return None

    def remove_translation_loader(self, loader: TranslationLoader) -> bool:
        with self._lock:
            for index, existing in enumerate(self._loaders):
                if existing is loader:
                    del self._loaders[index]
                    return True
        return False

    def get_translation_loader_for_file(self, file_path: str | Path) -> TranslationLoader | None:
        """First registered loader that can read ``file_path``.

        Raises:
            NoTranslationLoadersError: No loaders are registered
        """
        loaders = self._loaders_for_file(file_path, "get_translation_loader_for_file")
        return loaders[0] if loaders else None

    def find_conflicting_loaders(
        self,
        loader: TranslationLoader,
        allow_partial_conflicts: bool = True,
    ) -> list[TranslationLoader]:
        """Registered loaders that ``loader`` conflicts with."""
        with self._lock:
            return [
                existing
                for existing in self._loaders
                if existing is not loader
                and loader.conflicts_with(existing, allow_partial_conflicts)
            ]

    def _loaders_for_file(self, file_path: str | Path, operation: str) -> list[TranslationLoader]:
        with self._lock:
            loaders = list(self._loaders)
        if not loaders:
            raise NoTranslationLoadersError(operation)
        return [loader for loader in loaders if loader.can_load_file(file_path)]

    # =========================================================================
    # Loading
    # =========================================================================

    def load_from_string(self, loader: TranslationLoader, text: str) -> bool:
        """Deserialize ``text`` and merge it.

        Returns:
            False if the text is not in the loader's syntax

        Raises:
            CodecError: The document has an unsupported structure
        """
        languages = loader.deserialize(text)
        if languages is None:
            return False
        self.add_languages(languages)
        return True

    def load_from_file(self, file_path: str | Path) -> bool:
        """Load one translation file.

        Every loader that accepts the file name is tried in registration
        order until one of them reads it.

        Returns:
            False for a missing file, or when no loader could read it

        Raises:
            NoTranslationLoadersError: No loaders are registered
        """
        for loader in self._loaders_for_file(file_path, "load_from_file"):
            languages = loader.try_load_from_file(file_path)
            if languages is not None:
                self.add_languages(languages)
                return True
        return False

    def load_from_directory(
        self,
        directory: str | Path,
        recurse: bool = False,
    ) -> LoadResult | None:
        """Load every translation file in a directory.

        Files are read in parallel and merged afterwards in sorted path
        order, so the outcome does not depend on thread scheduling.

        Returns:
            The load result, or None if the directory does not exist

        Raises:
            NoTranslationLoadersError: Translation files were found but no
                loaders are registered
        """
        root = Path(directory)
        if not root.is_dir():
            return None

        files = list(iter_translation_files(root, recurse=recurse))
        result = LoadResult()
        if not files:
            return result

        with self._lock:
            loaders = list(self._loaders)
        if not loaders:
            raise NoTranslationLoadersError("load_from_directory")

        outcomes: dict[Path, dict[str, dict[str, str]] | None] = {}
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="polyloc-load"
        ) as executor:
            futures = {executor.submit(_read_file, path, loaders): path for path in files}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    outcomes[path] = future.result()
                except Exception as e:
                    logger.warning(f"Failed to load translations from '{path}': {e}")
                    result.failed[path] = e

        for path in sorted(outcomes):
            languages = outcomes[path]
            if languages is None:
                result.skipped.append(path)
                continue
            self.add_languages(languages)
            result.loaded.append(path)

        logger.debug(
            f"Loaded {len(result.loaded)} of {len(files)} translation files from '{root}'"
        )
        return result

    # =========================================================================
    # Saving
    # =========================================================================

    def save_to_string(
        self,
        loader: TranslationLoader,
        language_names: Iterable[str] | None = None,
    ) -> str:
        """Serialize languages (all by default) with ``loader``."""
        return loader.serialize(self.to_language_map(language_names))

    def save_to_file(
        self,
        file_path: str | Path,
        language_names: Iterable[str] | None = None,
        loader: TranslationLoader | None = None,
    ) -> Path:
        """Serialize languages and write them atomically.

        Args:
            file_path: Target file, e.g. ``lang/all.loc.json``
            language_names: Languages to write, all by default
            loader: Loader to use instead of dispatching on the file name

        Returns:
            The written path

        Raises:
            NoTranslationLoadersError: No loader given and none registered
            LoaderNotFoundError: No registered loader accepts the file name
        """
        if loader is None:
            loader = self.get_translation_loader_for_file(file_path)
            if loader is None:
                raise LoaderNotFoundError(file_path)
        return atomic_write_text(file_path, self.save_to_string(loader, language_names))

    def save_to_directory(
        self,
        directory: str | Path,
        extension: str = ".json",
        loader: TranslationLoader | None = None,
        file_name_template: str = "{language}",
    ) -> list[Path]:
        """Write one ``<name>.loc<extension>`` file per language, in parallel.

        Returns:
            Written paths, in language order
        """
        extension = f".{normalize_extension(extension)}" if extension else ""
        root = Path(directory)
        if loader is None:
            sample_name = f"sample{EXTENSION_PREFIX}{extension}"
            loader = self.get_translation_loader_for_file(sample_name)
            if loader is None:
                raise LoaderNotFoundError(root / sample_name)

        languages = self.to_language_map()
        targets = [
            (
                root / f"{file_name_template.format(language=name)}{EXTENSION_PREFIX}{extension}",
                {name: translations},
            )
            for name, translations in languages.items()
        ]

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="polyloc-save"
        ) as executor:
            futures = [
                executor.submit(atomic_write_text, path, loader.serialize(language_map))
                for path, language_map in targets
            ]
            written = [future.result() for future in futures]

        logger.debug(f"Saved {len(written)} languages to '{root}'")
        return written


# =============================================================================
# Helpers
# =============================================================================


def _find(
    dictionary: LanguageDictionary | None,
    keys: Sequence[str],
    comparison: StringComparison,
) -> tuple[str, str] | None:
    if dictionary is None:
        return None
    for key in keys:
        value = dictionary.lookup(key, comparison)
        if value is not None:
            return key, value
    return None


def _read_file(
    path: Path,
    loaders: Sequence[TranslationLoader],
) -> dict[str, dict[str, str]] | None:
    error: Exception | None = None
    for loader in loaders:
        if not loader.can_load_file(path):
            continue
        try:
            languages = loader.load_from_file(path)
        except Exception as e:
            if error is None:
                error = e
            continue
        if languages is not None:
            return languages
    if error is not None:
        raise error
    return None


# =============================================================================
# Default Instance
# =============================================================================


_default_loc: Loc | None = None
_default_lock = threading.Lock()


def get_default_loc() -> Loc:
    """Process-wide registry, created with the multi-language loaders on first use."""
    global _default_loc
    with _default_lock:
        if _default_loc is None:
            _default_loc = Loc(loaders=default_loaders())
        return _default_loc


def set_default_loc(loc: Loc | None) -> None:
    """Replace the process-wide registry. None resets it."""
    global _default_loc
    with _default_lock:
        _default_loc = loc


def tr(
    path: str,
    default_text: str | None = None,
    language_name: str | None = None,
    allow_fallback: bool = False,
    comparison: StringComparison = StringComparison.ORDINAL,
) -> str:
    """Translate with the default registry."""
    return get_default_loc().translate(
        path,
        comparison=comparison,
        default_text=default_text,
        language_name=language_name,
        allow_fallback=allow_fallback,
    )


def context_tr(
    path: str,
    default_text: str | None = None,
    language_name: str | None = None,
    allow_fallback: bool = False,
    comparison: StringComparison = StringComparison.ORDINAL,
) -> TranslationContext:
    """Translate with the default registry and report provenance."""
    return get_default_loc().translate_with_context(
        path,
        comparison=comparison,
        default_text=default_text,
        language_name=language_name,
        allow_fallback=allow_fallback,
    )
