"""XML translation loader.

The document element is a wrapper and is not part of any path. Below it,
element nesting mirrors the path segments, and an element without child
elements is a language element whose tag names the language::

    <Localization>
      <MainWindow>
        <Title>
          <English>Main Window</English>
          <German>Hauptfenster</German>
        </Title>
      </MainWindow>
    </Localization>

Attributes and comments are ignored.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from polyloc.codec import Branch, LanguageGroup, Node, Scalar, decode_multi, encode_multi
from polyloc.exceptions import TreeStructureError, UnsupportedElementError
from polyloc.loaders.base import TranslationLoader
from polyloc.types import LanguageMap


_XML_NAME = re.compile(r"^[^\W\d][\w.\-]*$")


def is_xml_name(name: str) -> bool:
    """Check whether ``name`` can be used as an element tag."""
    return bool(_XML_NAME.match(name))


class XmlTranslationLoader(TranslationLoader):
    """Loader for multi-language XML documents.

    Args:
        root_tag: Tag of the wrapper element written by ``serialize``. Any
            wrapper tag is accepted when reading.
        indent: Indentation used when writing, or None for compact output
    """

    supported_file_extensions = (".xml",)

    def __init__(self, root_tag: str = "Localization", indent: str | None = "  ") -> None:
        if not is_xml_name(root_tag):
            raise ValueError(f"Invalid XML root tag: {root_tag!r}")
        self.root_tag = root_tag
        self.indent = indent

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def deserialize(self, text: str) -> dict[str, dict[str, str]] | None:
        if not text.strip():
            return None
        root = ET.fromstring(text)
        tree = Branch()
        for child in root:
            tree.add(child.tag, self._to_node(child))
        return decode_multi(tree)

    def _to_node(self, element: ET.Element) -> Node:
        children = list(element)
        if not children:
            return Scalar(element.text or "")
        if all(len(child) == 0 for child in children):
            return LanguageGroup(
                entries=[(child.tag, Scalar(child.text or "")) for child in children]
            )
        branch = Branch()
        for child in children:
            branch.add(child.tag, self._to_node(child))
        return branch

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def serialize(self, languages: LanguageMap) -> str:
        root = ET.Element(self.root_tag)
        self._append_children(root, encode_multi(languages))
        if self.indent is not None:
            ET.indent(root, space=self.indent)
        return ET.tostring(root, encoding="unicode")

    def _append_children(self, parent: ET.Element, branch: Branch) -> None:
        for key, node in branch.children:
            if not is_xml_name(key):
                raise TreeStructureError(f"'{key}' is not a valid XML element name")
            element = ET.SubElement(parent, key)
            if isinstance(node, Scalar):
                element.text = node.value
            elif isinstance(node, Branch):
                self._append_children(element, node)
            else:
                raise UnsupportedElementError(node, [key])
