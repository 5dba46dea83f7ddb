"""Tests for the YAML translation loaders."""

import pytest
import yaml

from polyloc.exceptions import LanguageCountError, UnsupportedElementError
from polyloc.loaders import YamlSingleTranslationLoader, YamlTranslationLoader


class TestYamlTranslationLoader:
    """Test multi-language YAML."""

    def test_deserialize(self, multi_yaml):
        """Test the sample document flattens per language."""
        assert YamlTranslationLoader().deserialize(multi_yaml) == {
            "English": {"MainWindow.Title": "Main Window", "Greeting": "Hello"},
            "German": {"MainWindow.Title": "Hauptfenster", "Greeting": "Hallo"},
        }

    def test_round_trip(self, sample_languages):
        """Test serialize then deserialize preserves the map."""
        loader = YamlTranslationLoader()
        assert loader.deserialize(loader.serialize(sample_languages)) == sample_languages

    def test_round_trip_string_like_values(self):
        """Test values that look like other YAML types stay strings."""
        languages = {"English": {"A": "true", "B": "3", "C": "", "D": "null", "E": "a: b"}}
        loader = YamlTranslationLoader()
        assert loader.deserialize(loader.serialize(languages)) == languages

    def test_serialize_keeps_order(self):
        """Test keys are written in insertion order."""
        text = YamlTranslationLoader().serialize({"English": {"Z": "z", "A": "a"}})
        assert text.index("Z:") < text.index("A:")

    def test_duplicate_keys_first_wins(self):
        """Test duplicate mapping keys keep the first value."""
        text = "A:\n  English: first\nA:\n  English: second\n"
        assert YamlTranslationLoader().deserialize(text) == {"English": {"A": "first"}}

    def test_scalars_use_source_text(self):
        """Test scalars keep their text and nulls become empty strings."""
        text = "A:\n  English: yes\n  German: 1.50\n  French:\n"
        assert YamlTranslationLoader().deserialize(text) == {
            "English": {"A": "yes"},
            "German": {"A": "1.50"},
            "French": {"A": ""},
        }

    def test_sequence_rejected(self):
        """Test sequences raise an unsupported element error."""
        with pytest.raises(UnsupportedElementError):
            YamlTranslationLoader().deserialize("A:\n  English:\n    - x\n")

    def test_syntax_error_propagates(self):
        """Test parser errors are not wrapped."""
        with pytest.raises(yaml.YAMLError):
            YamlTranslationLoader().deserialize("A: [unclosed\n")

    def test_empty_document(self):
        """Test an empty document deserializes to None."""
        assert YamlTranslationLoader().deserialize("") is None

    def test_single_language_document_returns_none(self, single_yaml):
        """Test single-language documents are left to the single loader."""
        assert YamlTranslationLoader().deserialize(single_yaml) is None


class TestYamlSingleTranslationLoader:
    """Test single-language YAML."""

    def test_deserialize(self, single_yaml):
        """Test the sample document yields one language."""
        assert YamlSingleTranslationLoader().deserialize(single_yaml) == {
            "Spanish": {"MainWindow.Title": "Ventana principal", "Greeting": "Hola"}
        }

    def test_multi_document_is_not_single(self, multi_yaml):
        """Test documents without the marker deserialize to None."""
        assert YamlSingleTranslationLoader().deserialize(multi_yaml) is None

    def test_round_trip(self, sample_languages):
        """Test one language survives serialize then deserialize."""
        loader = YamlSingleTranslationLoader()
        english = {"English": sample_languages["English"]}
        assert loader.deserialize(loader.serialize(english)) == english

    def test_serialize_starts_with_marker(self):
        """Test the language name is written first."""
        text = YamlSingleTranslationLoader().serialize({"English": {"A.B": "x"}})
        assert text.startswith("$LanguageName: English\n")

    def test_serialize_rejects_multiple_languages(self, sample_languages):
        """Test more than one language cannot be written."""
        with pytest.raises(LanguageCountError):
            YamlSingleTranslationLoader().serialize(sample_languages)

    def test_serialize_zero_languages(self):
        """Test an empty map writes nothing."""
        assert YamlSingleTranslationLoader().serialize({}) == ""
