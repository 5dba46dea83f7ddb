"""YAML translation loaders.

Documents are read through PyYAML's node graph rather than ``safe_load`` so
that key order and duplicate keys reach the codec unchanged.

Multi-language syntax::

    MainWindow:
      Title:
        English: Main Window
        German: Hauptfenster

Single-language syntax::

    $LanguageName: English
    MainWindow:
      Title: Main Window
"""

from __future__ import annotations

from typing import Any

import yaml

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


_NULL_TAG = "tag:yaml.org,2002:null"


def parse_yaml_tree(text: str) -> Node | None:
    """Parse YAML text into a document tree.

    Returns None for an empty document.

    Raises:
        yaml.YAMLError: The text is not valid YAML
        UnsupportedElementError: The document contains a sequence or a
            non-scalar key
    """
    root = yaml.compose(text, Loader=yaml.SafeLoader)
    if root is None:
        return None
    return _to_node(root, [])


def _to_node(node: yaml.Node, path: list[str]) -> Node:
    if isinstance(node, yaml.MappingNode):
        branch = Branch()
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise UnsupportedElementError(key_node, path)
            key = key_node.value
            branch.add(key, _to_node(value_node, path + [key]))
        return branch
    if isinstance(node, yaml.ScalarNode):
        if node.tag == _NULL_TAG:
            return Scalar("")
        return Scalar(node.value)
    raise UnsupportedElementError(node, path)


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


class YamlTranslationLoader(TranslationLoader):
    """Loader for multi-language YAML documents.

    Single-language documents deserialize to None.
    """

    supported_file_extensions = (".yml", ".yaml")

    def deserialize(self, text: str) -> dict[str, dict[str, str]] | None:
        tree = parse_yaml_tree(text)
        if tree is None:
            return None
        if find_language_name(tree) is not None:
            return None
        return decode_multi(tree)

    def serialize(self, languages: LanguageMap) -> str:
        return dump_yaml(to_plain(encode_multi(languages)))


class YamlSingleTranslationLoader(YamlTranslationLoader):
    """Loader for single-language YAML documents."""

    def deserialize(self, text: str) -> dict[str, dict[str, str]] | None:
        tree = parse_yaml_tree(text)
        if tree is None:
            return None
        return decode_single(tree)

    def serialize(self, languages: LanguageMap) -> str:
        tree = encode_single(languages, loader_name=self.name)
        if tree is None:
            return ""
        return dump_yaml(to_plain(tree))
