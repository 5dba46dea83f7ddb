"""Registry configuration.

Configuration is layered, lowest priority first:

1. Defaults of ``LocConfig``
2. A YAML or JSON file (``LocConfig.from_file``)
3. Environment variables prefixed with ``POLYLOC_`` (``LocConfig.from_env``)

Example file::

    current_language: English
    fallback_language: English
    loaders: [json, yaml-single]
    directories: [lang]
    recurse: true

Example environment::

    POLYLOC_CURRENT_LANGUAGE=German
    POLYLOC_LOADERS=json,xml
    POLYLOC_THROW_ON_MISSING_TRANSLATION=yes
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from polyloc.exceptions import ConfigError
from polyloc.loaders import LOADER_TYPES
from polyloc.registry import Loc


logger = logging.getLogger(__name__)

ENV_PREFIX = "POLYLOC_"
CONFIG_FILE_ENV = f"{ENV_PREFIX}CONFIG"

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


@dataclass
class LocConfig:
    """Settings used by ``create_loc`` to build a registry.

    Attributes:
        current_language: Initial current language
        fallback_language: Initial fallback language, None for none
        use_key_as_fallback: Return the key when nothing else resolves
        throw_on_missing_translation: Raise on a missing translation
        notify_missing_translations: Emit missing-translation events
        loaders: Loader names, see ``polyloc.loaders.LOADER_TYPES``
        directories: Directories loaded at startup
        recurse: Scan directories recursively
        log_level: Level name for the ``polyloc`` logger, None to leave it
        max_workers: Thread count for directory loads and saves
    """

    current_language: str = ""
    fallback_language: str | None = None
    use_key_as_fallback: bool = True
    throw_on_missing_translation: bool = False
    notify_missing_translations: bool = True
    loaders: list[str] = field(default_factory=lambda: ["json", "yaml", "xml"])
    directories: list[str] = field(default_factory=list)
    recurse: bool = False
    log_level: str | None = None
    max_workers: int | None = None

    def __post_init__(self) -> None:
        unknown = [name for name in self.loaders if name not in LOADER_TYPES]
        if unknown:
            raise ConfigError(
                f"Unknown loader(s): {', '.join(unknown)}. "
                f"Available: {', '.join(LOADER_TYPES)}"
            )
        if self.log_level is not None:
            level = logging.getLevelName(self.log_level.upper())
            if not isinstance(level, int):
                raise ConfigError(f"Unknown log level: {self.log_level}")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocConfig":
        """Build a config from a mapping, coercing string values.

        Raises:
            ConfigError: Unknown key or invalid value
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
        return cls(**{key: _coerce(key, value) for key, value in data.items()})

    @classmethod
    def from_file(cls, path: str | Path) -> "LocConfig":
        """Load a YAML (``.yaml``/``.yml``) or JSON (``.json``) config file."""
        return cls.from_dict(_read_config_file(Path(path)))

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        base: "LocConfig | None" = None,
    ) -> "LocConfig":
        """Overlay ``POLYLOC_*`` environment variables on ``base``."""
        return (base or cls()).merged(_env_overrides(environ))

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "LocConfig":
        """Resolve the full configuration.

        The file is ``path`` if given, otherwise ``$POLYLOC_CONFIG`` if set.
        Environment variables override file values.
        """
        env = os.environ if environ is None else environ
        if path is None:
            path = env.get(CONFIG_FILE_ENV) or None
        base = cls.from_file(path) if path is not None else cls()
        return cls.from_env(env, base=base)

    def merged(self, overrides: Mapping[str, Any]) -> "LocConfig":
        """Return a copy with ``overrides`` applied."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
        return replace(self, **{key: _coerce(key, value) for key, value in overrides.items()})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# =============================================================================
# Registry Factory
# =============================================================================


def create_loc(config: LocConfig | None = None) -> Loc:
    """Build a registry from a config.

    Loaders are registered first, then directories are loaded, and the
    language pointers are set last so that they resolve against the loaded
    dictionaries.
    """
    config = config or LocConfig()
    if config.log_level is not None:
        logging.getLogger("polyloc").setLevel(config.log_level.upper())

    loc = Loc(
        use_key_as_fallback=config.use_key_as_fallback,
        throw_on_missing_translation=config.throw_on_missing_translation,
        notify_missing_translations=config.notify_missing_translations,
        max_workers=config.max_workers,
    )
    for name in config.loaders:
        loc.add_translation_loader_type(LOADER_TYPES[name])

    for directory in config.directories:
        result = loc.load_from_directory(directory, recurse=config.recurse)
        if result is None:
            logger.warning(f"Translation directory not found: {directory}")

    loc.current_language_name = config.current_language
    loc.fallback_language_name = config.fallback_language
    return loc


# =============================================================================
# Helpers
# =============================================================================


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ConfigError(f"Unsupported configuration file format: {suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


def _env_overrides(environ: Mapping[str, str] | None) -> dict[str, str]:
    env = os.environ if environ is None else environ
    known = {f.name for f in fields(LocConfig)}
    overrides: dict[str, str] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in known:
            overrides[name] = value
    return overrides


_BOOL_FIELDS = {
    "use_key_as_fallback",
    "throw_on_missing_translation",
    "notify_missing_translations",
    "recurse",
}
_LIST_FIELDS = {"loaders", "directories"}
_OPTIONAL_FIELDS = {"fallback_language", "log_level", "max_workers"}


def _coerce(key: str, value: Any) -> Any:
    if key in _BOOL_FIELDS:
        return _parse_bool(key, value)
    if key in _LIST_FIELDS:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        raise ConfigError(f"'{key}' must be a list or a comma-separated string")
    if key in _OPTIONAL_FIELDS and (
        value is None or (isinstance(value, str) and value.lower() in ("", "null", "none"))
    ):
        return None
    if key == "max_workers":
        try:
            workers = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'max_workers' must be an integer, got {value!r}") from e
        if workers < 1:
            raise ConfigError("'max_workers' must be at least 1")
        return workers
    return "" if value is None else str(value)


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}")
