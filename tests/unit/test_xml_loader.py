"""Tests for the XML translation loader."""

import xml.etree.ElementTree as ET

import pytest

from polyloc.exceptions import TreeStructureError
from polyloc.loaders import XmlTranslationLoader
from polyloc.loaders.xml_loader import is_xml_name


class TestXmlTranslationLoader:
    """Test multi-language XML."""

    def test_deserialize(self, multi_xml):
        """Test the wrapper element is not part of the paths."""
        assert XmlTranslationLoader().deserialize(multi_xml) == {
            "English": {"MainWindow.Title": "Main Window", "Greeting": "Hello"},
            "German": {"MainWindow.Title": "Hauptfenster", "Greeting": "Hallo"},
        }

    def test_round_trip(self, sample_languages):
        """Test serialize then deserialize preserves the map."""
        loader = XmlTranslationLoader()
        assert loader.deserialize(loader.serialize(sample_languages)) == sample_languages

    def test_round_trip_compact(self, sample_languages):
        """Test output without indentation reads back the same."""
        loader = XmlTranslationLoader(indent=None)
        assert loader.deserialize(loader.serialize(sample_languages)) == sample_languages

    def test_round_trip_special_text(self):
        """Test markup characters and empty values survive."""
        languages = {"English": {"A": "<b>&amp;</b>", "B": "", "C": "  padded  "}}
        loader = XmlTranslationLoader()
        assert loader.deserialize(loader.serialize(languages)) == languages

    def test_value_and_children_on_same_element(self):
        """Test an element can hold a language value and nested paths."""
        languages = {"English": {"Menu": "Menu", "Menu.File": "File"}}
        loader = XmlTranslationLoader()
        assert loader.deserialize(loader.serialize(languages)) == languages

    def test_serialize_uses_root_tag(self):
        """Test the wrapper element tag is configurable."""
        text = XmlTranslationLoader(root_tag="Strings").serialize({"English": {"A": "x"}})
        root = ET.fromstring(text)
        assert root.tag == "Strings"
        assert root.find("A/English").text == "x"

    def test_any_wrapper_tag_is_read(self):
        """Test reading does not depend on the wrapper tag."""
        text = "<Anything><A><English>x</English></A></Anything>"
        assert XmlTranslationLoader().deserialize(text) == {"English": {"A": "x"}}

    def test_attributes_and_comments_ignored(self):
        """Test attributes and comments do not affect the result."""
        text = '<L><!-- note --><A id="1"><English lang="en">x</English></A></L>'
        assert XmlTranslationLoader().deserialize(text) == {"English": {"A": "x"}}

    def test_empty_element_is_empty_string(self):
        """Test a self-closing language element yields an empty string."""
        assert XmlTranslationLoader().deserialize("<L><A><English/></A></L>") == {"English": {"A": ""}}

    def test_leaf_under_wrapper_rejected(self):
        """Test a language element directly under the wrapper has no path."""
        with pytest.raises(TreeStructureError):
            XmlTranslationLoader().deserialize("<L><English>x</English></L>")

    def test_invalid_name_rejected(self):
        """Test segments that are not XML names cannot be written."""
        with pytest.raises(TreeStructureError):
            XmlTranslationLoader().serialize({"English": {"Main Window.Title": "x"}})
        with pytest.raises(TreeStructureError):
            XmlTranslationLoader().serialize({"en US": {"A": "x"}})

    def test_syntax_error_propagates(self):
        """Test parser errors are not wrapped."""
        with pytest.raises(ET.ParseError):
            XmlTranslationLoader().deserialize("<L><A></L>")

    def test_empty_document(self):
        """Test empty text deserializes to None."""
        assert XmlTranslationLoader().deserialize("  ") is None

    def test_invalid_root_tag(self):
        """Test the wrapper tag must be a valid name."""
        with pytest.raises(ValueError):
            XmlTranslationLoader(root_tag="1bad")


class TestXmlNames:
    """Test XML name validation."""

    @pytest.mark.parametrize("name", ["English", "_x", "a-b", "a.b", "Grüße", "A1"])
    def test_valid(self, name):
        assert is_xml_name(name)

    @pytest.mark.parametrize("name", ["", "1a", "a b", "-a", "a:b", "[x]"])
    def test_invalid(self, name):
        assert not is_xml_name(name)
