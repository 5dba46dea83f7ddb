"""Exception hierarchy for polyloc.

Format syntax errors raised by the underlying parsers (``json``, ``yaml``,
``xml.etree``) are not wrapped: they propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Sequence


class LocalizationError(Exception):
    """Base class for all polyloc errors."""

    pass


# =============================================================================
# Codec Errors
# =============================================================================


class CodecError(LocalizationError):
    """Base class for document tree <-> flat dictionary conversion errors."""

    pass


class UnsupportedElementError(CodecError):
    """A document contains an element kind the codec cannot represent."""

    def __init__(self, element: object, path: Sequence[str] = ()) -> None:
        self.element = element
        self.path = tuple(path)
        location = ".".join(self.path) or "<root>"
        super().__init__(
            f"Unsupported element of type '{type(element).__name__}' at '{location}'"
        )


class TreeStructureError(CodecError):
    """A path cannot be placed in, or read from, the document tree.

    Raised when one path is both a leaf and a prefix of another path, or
    when a name is not representable in the target format.
    """

    pass


class LanguageCountError(CodecError):
    """A single-language loader was asked to serialize several languages."""

    def __init__(self, loader_name: str, language_names: Sequence[str]) -> None:
        self.loader_name = loader_name
        self.language_names = tuple(language_names)
        super().__init__(
            f"{loader_name} can only serialize one language, "
            f"got {len(self.language_names)}: {', '.join(self.language_names)}"
        )


# =============================================================================
# Registry Errors
# =============================================================================


class MissingTranslationError(LocalizationError, KeyError):
    """A translation was missing and the registry is set to raise."""

    def __init__(self, language_name: str | None, keys: Sequence[str]) -> None:
        self.language_name = language_name
        self.keys = tuple(keys)
        joined = ", ".join(self.keys)
        super().__init__(f"Language '{language_name}' is missing translation '{joined}'")

    def __str__(self) -> str:
        return str(self.args[0])


class NoTranslationLoadersError(LocalizationError):
    """Loader dispatch was requested but no loaders are registered."""

    def __init__(self, operation: str = "load") -> None:
        self.operation = operation
        super().__init__(
            f"No translation loaders were registered before calling '{operation}'"
        )


class LoaderNotFoundError(LocalizationError):
    """No registered loader accepts a file name."""

    def __init__(self, file_path: object) -> None:
        self.file_path = file_path
        super().__init__(f"No translation loader can handle '{file_path}'")


class ConfigError(LocalizationError):
    """Invalid polyloc configuration."""

    pass
