"""Translation loader abstraction.

A translation loader converts between the text of one file format and the
flat ``language -> (path -> value)`` map the registry stores. Loaders are
stateless and may be shared between registries and threads.

File names carry the loader's extension after the ``.loc`` marker, for
example ``English.loc.json`` or ``menus.loc.yaml``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from polyloc.types import EXTENSION_PREFIX, LanguageMap


logger = logging.getLogger(__name__)


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and drop its leading dot."""
    if extension.startswith("."):
        extension = extension[1:]
    return extension.lower()


class TranslationLoader(ABC):
    """Abstract base class for format adapters.

    Subclasses set ``supported_file_extensions`` and implement
    ``deserialize`` and ``serialize``.
    """

    supported_file_extensions: ClassVar[tuple[str, ...]] = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def deserialize(self, text: str) -> dict[str, dict[str, str]] | None:
        """Parse ``text`` into a language map.

        Returns:
            The translations, or None when the text is not in this loader's
            syntax

        Raises:
            CodecError: The document has an unsupported structure
        """
        pass

    @abstractmethod
    def serialize(self, languages: LanguageMap) -> str:
        """Render a language map in this loader's syntax."""
        pass

    # -------------------------------------------------------------------------
    # Capability checks
    # -------------------------------------------------------------------------

    def can_load_file(self, file_path: str | Path) -> bool:
        """Check whether a file name carries one of this loader's extensions.

        The part of the file name after ``.loc`` is compared with every
        supported extension, ignoring case and the leading dot. A name that
        ends in ``.loc`` only matches a loader that declares ``""``.
        """
        file_name = Path(file_path).name.lower()
        position = file_name.rfind(EXTENSION_PREFIX)
        if position == -1:
            return False

        remainder = file_name[position + len(EXTENSION_PREFIX):]
        if remainder and not remainder.startswith("."):
            return False
        remainder = normalize_extension(remainder)
        return any(
            normalize_extension(extension) == remainder
            for extension in self.supported_file_extensions
        )

    def conflicts_with(
        self,
        other: "TranslationLoader",
        allow_partial_conflicts: bool = True,
    ) -> bool:
        """Check whether two loaders claim the same file extensions.

        Args:
            other: Loader to compare with
            allow_partial_conflicts: When True, a loader whose extensions
                are a strict subset of ``other``'s does not conflict with
                it. When False, any shared extension is a conflict.
        """
        mine = {normalize_extension(e) for e in self.supported_file_extensions}
        theirs = {normalize_extension(e) for e in other.supported_file_extensions}
        if not mine & theirs:
            return False
        if allow_partial_conflicts and mine < theirs:
            return False
        return True

    # -------------------------------------------------------------------------
    # File helpers
    # -------------------------------------------------------------------------

    def load_from_file(
        self,
        file_path: str | Path,
        encoding: str = "utf-8",
    ) -> dict[str, dict[str, str]] | None:
        """Read and deserialize a file.

        Returns:
            The translations, or None when the file does not exist or is not
            in this loader's syntax
        """
        path = Path(file_path)
        if not path.is_file():
            return None
        return self.deserialize(path.read_text(encoding=encoding))

    def try_load_from_file(
        self,
        file_path: str | Path,
        encoding: str = "utf-8",
    ) -> dict[str, dict[str, str]] | None:
        """Like ``load_from_file`` but logs and returns None on any failure."""
        try:
            return self.load_from_file(file_path, encoding=encoding)
        except Exception:
            logger.error(f"{self.name} failed to load '{file_path}'", exc_info=True)
            return None

    def __repr__(self) -> str:
        extensions = ", ".join(self.supported_file_extensions)
        return f"{self.name}({extensions})"
