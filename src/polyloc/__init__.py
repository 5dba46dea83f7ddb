"""polyloc - Runtime string localization with JSON, YAML and XML translation files."""

from polyloc.codec import (
    Branch,
    LanguageGroup,
    Scalar,
    decode_multi,
    decode_single,
    encode_multi,
    encode_single,
    find_language_name,
)
from polyloc.config import LocConfig, create_loc
from polyloc.dictionary import LanguageDictionary
from polyloc.events import (
    EventHook,
    LanguageChangeEvent,
    LanguageChangedEvent,
    LanguageEvent,
    MissingTranslationEvent,
    TranslationsChangedEvent,
)
from polyloc.exceptions import (
    CodecError,
    ConfigError,
    LanguageCountError,
    LoaderNotFoundError,
    LocalizationError,
    MissingTranslationError,
    NoTranslationLoadersError,
    TreeStructureError,
    UnsupportedElementError,
)
from polyloc.loaders import (
    JsonSingleTranslationLoader,
    JsonTranslationLoader,
    TranslationLoader,
    XmlTranslationLoader,
    YamlSingleTranslationLoader,
    YamlTranslationLoader,
)
from polyloc.registry import (
    LoadResult,
    Loc,
    context_tr,
    get_default_loc,
    set_default_loc,
    tr,
)
from polyloc.types import (
    EXTENSION_PREFIX,
    LANGUAGE_NAME_MARKER,
    PATH_SEPARATOR,
    StringComparison,
    TranslationContext,
    TranslationSource,
)

__version__ = "0.1.0"

__all__ = [
    # Registry
    "Loc",
    "LoadResult",
    "get_default_loc",
    "set_default_loc",
    "tr",
    "context_tr",
    # Configuration
    "LocConfig",
    "create_loc",
    # Loaders
    "TranslationLoader",
    "JsonTranslationLoader",
    "JsonSingleTranslationLoader",
    "YamlTranslationLoader",
    "YamlSingleTranslationLoader",
    "XmlTranslationLoader",
    # Codec
    "Branch",
    "LanguageGroup",
    "Scalar",
    "decode_multi",
    "decode_single",
    "encode_multi",
    "encode_single",
    "find_language_name",
    # Types
    "LanguageDictionary",
    "StringComparison",
    "TranslationContext",
    "TranslationSource",
    "PATH_SEPARATOR",
    "EXTENSION_PREFIX",
    "LANGUAGE_NAME_MARKER",
    # Events
    "EventHook",
    "LanguageChangeEvent",
    "LanguageChangedEvent",
    "LanguageEvent",
    "MissingTranslationEvent",
    "TranslationsChangedEvent",
    # Exceptions
    "LocalizationError",
    "CodecError",
    "UnsupportedElementError",
    "TreeStructureError",
    "LanguageCountError",
    "MissingTranslationError",
    "NoTranslationLoadersError",
    "LoaderNotFoundError",
    "ConfigError",
]
