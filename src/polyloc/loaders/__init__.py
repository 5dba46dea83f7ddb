"""Format adapters between translation files and language maps.

Loaders:
    - JsonTranslationLoader: multi-language JSON (``.json``)
    - JsonSingleTranslationLoader: single-language JSON (``.json``)
    - YamlTranslationLoader: multi-language YAML (``.yml``, ``.yaml``)
    - YamlSingleTranslationLoader: single-language YAML (``.yml``, ``.yaml``)
    - XmlTranslationLoader: multi-language XML (``.xml``)
"""

from polyloc.loaders.base import TranslationLoader, normalize_extension
from polyloc.loaders.json_loader import JsonSingleTranslationLoader, JsonTranslationLoader
from polyloc.loaders.xml_loader import XmlTranslationLoader
from polyloc.loaders.yaml_loader import YamlSingleTranslationLoader, YamlTranslationLoader


LOADER_TYPES: dict[str, type[TranslationLoader]] = {
    "json": JsonTranslationLoader,
    "json-single": JsonSingleTranslationLoader,
    "yaml": YamlTranslationLoader,
    "yaml-single": YamlSingleTranslationLoader,
    "xml": XmlTranslationLoader,
}
"""Loader classes by configuration name."""


def default_loaders() -> list[TranslationLoader]:
    """One instance of each multi-language loader."""
    return [JsonTranslationLoader(), YamlTranslationLoader(), XmlTranslationLoader()]


__all__ = [
    "TranslationLoader",
    "normalize_extension",
    "JsonTranslationLoader",
    "JsonSingleTranslationLoader",
    "YamlTranslationLoader",
    "YamlSingleTranslationLoader",
    "XmlTranslationLoader",
    "LOADER_TYPES",
    "default_loaders",
]
