"""JSON translation loaders.

Multi-language syntax::

    {
      "MainWindow": {
        "Title": {
          "English": "Main Window",
          "German": "Hauptfenster"
        }
      }
    }

Single-language syntax::

    {
      "$LanguageName": "English",
      "MainWindow": {
        "Title": "Main Window"
      }
    }
"""

from __future__ import annotations

import json
from typing import Any

from polyloc.codec import (
    Branch,
    Node,
    Scalar,
    decode_multi,
    decode_single,
    encode_multi,
    encode_single,
    find_language_name,
    to_plain,
)
from polyloc.exceptions import UnsupportedElementError
from polyloc.loaders.base import TranslationLoader
from polyloc.types import LanguageMap


class _JsonObject(list):
    """Key/value pairs of a JSON object, duplicates included."""

    pass


def parse_json_tree(text: str) -> Node | None:
    """Parse JSON text into a document tree.

    Returns None for empty text or a literal ``null`` document.

    Raises:
        json.JSONDecodeError: The text is not valid JSON
        UnsupportedElementError: The document contains an array
    """
    if not text.strip():
        return None
    data = json.loads(text, object_pairs_hook=_JsonObject)
    if data is None:
        return None
    return _to_node(data, [])


def _to_node(value: Any, path: list[str]) -> Node:
    if isinstance(value, _JsonObject):
        branch = Branch()
        for key, child in value:
            branch.add(key, _to_node(child, path + [key]))
        return branch
    if isinstance(value, list):
        raise UnsupportedElementError(value, path)
    if value is None:
        return Scalar("")
    if isinstance(value, bool):
        return Scalar("true" if value else "false")
    if isinstance(value, (int, float)):
        return Scalar(str(value))
    if isinstance(value, str):
        return Scalar(value)
    raise UnsupportedElementError(value, path)


class JsonTranslationLoader(TranslationLoader):
    """Loader for multi-language JSON documents.

    Documents carrying a root ``$LanguageName`` string are single-language
    documents and deserialize to None.
    """

    supported_file_extensions = (".json",)

    def __init__(self, indent: int | None = 2, ensure_ascii: bool = False) -> None:
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def deserialize(self, text: str) -> dict[str, dict[str, str]] | None:
        tree = parse_json_tree(text)
        if tree is None:
            return None
        if find_language_name(tree) is not None:
            return None
        return decode_multi(tree)

    def serialize(self, languages: LanguageMap) -> str:
        return self._dump(to_plain(encode_multi(languages)))

    def _dump(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, ensure_ascii=self.ensure_ascii)


class JsonSingleTranslationLoader(JsonTranslationLoader):
    """Loader for single-language JSON documents.

    Documents without a ``$LanguageName`` string at the root are not in this
    syntax and deserialize to None.
    """

    def deserialize(self, text: str) -> dict[str, dict[str, str]] | None:
        tree = parse_json_tree(text)
        if tree is None:
            return None
        return decode_single(tree)

    def serialize(self, languages: LanguageMap) -> str:
        tree = encode_single(languages, loader_name=self.name)
        if tree is None:
            return self._dump({})
        return self._dump(to_plain(tree))
