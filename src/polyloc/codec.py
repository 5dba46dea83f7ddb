"""Conversion between document trees and flat per-language dictionaries.

Every format adapter parses its text into the same small tree model and hands
it to this module. The tree is a closed variant with three node kinds:

- Branch: ordered ``(key, node)`` children. A Scalar child of a branch is a
  language entry: its key is the language name.
- LanguageGroup: ordered ``(language, Scalar)`` entries that all sit at the
  same path.
- Scalar: a string value.

Multi-language syntax::

    MainWindow:
      Title:
        English: Main Window
        German: Hauptfenster

Single-language syntax::

    $LanguageName: English
    MainWindow:
      Title: Main Window

Paths are always built from the chain of parent keys, never from a format's
own path notation, so keys containing spaces or brackets are safe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from polyloc.exceptions import (
    LanguageCountError,
    TreeStructureError,
    UnsupportedElementError,
)
from polyloc.types import (
    LANGUAGE_NAME_MARKER,
    LanguageMap,
    StringComparison,
    join_path,
    split_path,
)


# =============================================================================
# Tree Model
# =============================================================================


@dataclass
class Scalar:
    """Leaf string value."""

    value: str


@dataclass
class LanguageGroup:
    """Language entries sharing one path."""

    entries: list[tuple[str, Scalar]] = field(default_factory=list)


@dataclass
class Branch:
    """Ordered keyed container.

    Children keep document order and may repeat a key. ``get`` returns the
    first child with a given key.
    """

    children: list[tuple[str, "Node"]] = field(default_factory=list)
    _index: dict[str, "Node"] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for key, node in self.children:
            self._index.setdefault(key, node)

    def add(self, key: str, node: "Node") -> "Node":
        """Append a child and return it."""
        self.children.append((key, node))
        self._index.setdefault(key, node)
        return node

    def get(self, key: str) -> "Node | None":
        return self._index.get(key)


Node = Union[Branch, LanguageGroup, Scalar]


# =============================================================================
# Decoding
# =============================================================================


def decode_multi(tree: Any) -> dict[str, dict[str, str]]:
    """Flatten a multi-language tree.

    Args:
        tree: Root node (normally a Branch)

    Returns:
        Language name -> (path -> value). When the same language and path
        occur more than once, the first occurrence is kept.

    Raises:
        UnsupportedElementError: A node is not part of the tree model
        TreeStructureError: A scalar sits directly under the root
    """
    result: dict[str, dict[str, str]] = {}
    if isinstance(tree, (Scalar, LanguageGroup)):
        raise TreeStructureError("A language value at the document root has no path")
    if not isinstance(tree, Branch):
        raise UnsupportedElementError(tree)

    for key, child in tree.children:
        if isinstance(child, Scalar):
            raise TreeStructureError(
                f"Language entry '{key}' at the document root has no path"
            )
        _decode_multi_node(child, [key], result)
    return result


def _decode_multi_node(
    node: Any,
    segments: list[str],
    result: dict[str, dict[str, str]],
) -> None:
    if isinstance(node, Branch):
        for key, child in node.children:
            if isinstance(child, Scalar):
                _store(result, key, segments, child.value)
            else:
                _decode_multi_node(child, segments + [key], result)
    elif isinstance(node, LanguageGroup):
        for language_name, scalar in node.entries:
            _store(result, language_name, segments, scalar.value)
    else:
        raise UnsupportedElementError(node, segments)


def _store(
    result: dict[str, dict[str, str]],
    language_name: str,
    segments: list[str],
    value: str,
) -> None:
    result.setdefault(language_name, {}).setdefault(join_path(segments), value)


def decode_single(tree: Any) -> dict[str, dict[str, str]] | None:
    """Flatten a single-language tree.

    The root must carry a ``$LanguageName`` key (matched case-insensitively)
    whose value is a scalar. That key names the language and is not part of
    the translations.

    Returns:
        A one-language map, or None when the tree is not in single-language
        syntax.
    """
    language_name = find_language_name(tree)
    if language_name is None:
        return None

    translations: dict[str, str] = {}
    for key, child in tree.children:
        if _is_language_marker(key, child):
            continue
        _decode_single_node(key, child, [], translations)
    return {language_name: translations}


def find_language_name(tree: Any) -> str | None:
    """Return the value of the root ``$LanguageName`` entry, if there is one.

    Only the first matching entry names the language. Later entries whose
    key matches the marker in any case are ignored.
    """
    if not isinstance(tree, Branch):
        return None
    for key, child in tree.children:
        if _is_language_marker(key, child):
            return child.value  # type: ignore[union-attr]
    return None


def _is_language_marker(key: str, node: Any) -> bool:
    return isinstance(node, Scalar) and StringComparison.ORDINAL_IGNORE_CASE.equals(
        key, LANGUAGE_NAME_MARKER
    )


def _decode_single_node(
    key: str,
    node: Any,
    parents: list[str],
    translations: dict[str, str],
) -> None:
    segments = parents + [key]
    if isinstance(node, Scalar):
        translations.setdefault(join_path(segments), node.value)
    elif isinstance(node, Branch):
        for child_key, child in node.children:
            _decode_single_node(child_key, child, segments, translations)
    elif isinstance(node, LanguageGroup):
        for child_key, scalar in node.entries:
            translations.setdefault(join_path(segments + [child_key]), scalar.value)
    else:
        raise UnsupportedElementError(node, segments)


# =============================================================================
# Encoding
# =============================================================================


def encode_multi(languages: LanguageMap) -> Branch:
    """Build a multi-language tree.

    Each path becomes a chain of branches, and the language value is added
    to the last branch as a ``language -> Scalar`` entry.

    Raises:
        TreeStructureError: A path segment collides with a language entry
    """
    root = Branch()
    for language_name, translations in languages.items():
        for path, value in translations.items():
            node = root
            for segment in split_path(path):
                node = _child_branch(node, segment, path)
            existing = node.get(language_name)
            if existing is not None:
                raise TreeStructureError(
                    f"Language '{language_name}' collides with a path segment at '{path}'"
                )
            node.add(language_name, Scalar(value))
    return root


def encode_single(
    languages: LanguageMap,
    loader_name: str = "single-language syntax",
) -> Branch | None:
    """Build a single-language tree.

    Returns:
        The tree, or None when ``languages`` is empty

    Raises:
        LanguageCountError: More than one language was given
        TreeStructureError: A path is both a value and a prefix of another path
    """
    if len(languages) > 1:
        raise LanguageCountError(loader_name, list(languages))
    if not languages:
        return None

    language_name, translations = next(iter(languages.items()))
    root = Branch()
    root.add(LANGUAGE_NAME_MARKER, Scalar(language_name))
    for path, value in translations.items():
        segments = split_path(path)
        node = root
        for segment in segments[:-1]:
            node = _child_branch(node, segment, path)
        leaf = segments[-1]
        if node.get(leaf) is not None:
            raise TreeStructureError(f"'{path}' is both a value and a parent path")
        node.add(leaf, Scalar(value))
    return root


def _child_branch(node: Branch, segment: str, path: str) -> Branch:
    existing = node.get(segment)
    if existing is None:
        return node.add(segment, Branch())  # type: ignore[return-value]
    if not isinstance(existing, Branch):
        raise TreeStructureError(
            f"Path segment '{segment}' of '{path}' is already a value"
        )
    return existing


# =============================================================================
# Native Conversion
# =============================================================================


def to_plain(node: Node) -> Any:
    """Convert a tree to nested dicts and strings for JSON/YAML emitters."""
    if isinstance(node, Scalar):
        return node.value
    if isinstance(node, LanguageGroup):
        return {name: scalar.value for name, scalar in node.entries}
    if isinstance(node, Branch):
        plain: dict[str, Any] = {}
        for key, child in node.children:
            plain.setdefault(key, to_plain(child))
        return plain
    raise UnsupportedElementError(node)


def count_paths(languages: Mapping[str, Mapping[str, str]]) -> int:
    """Total number of translated strings across all languages."""
    return sum(len(translations) for translations in languages.values())
