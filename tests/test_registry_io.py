"""Tests for loading and saving translations through the registry."""

import json
import logging

import pytest

from polyloc import (
    JsonSingleTranslationLoader,
    JsonTranslationLoader,
    LoaderNotFoundError,
    Loc,
    NoTranslationLoadersError,
    TreeStructureError,
    XmlTranslationLoader,
    YamlSingleTranslationLoader,
    YamlTranslationLoader,
)


class TestLoadFromString:
    """Test load_from_string."""

    def test_loads_and_merges(self, multi_json):
        loc = Loc()
        assert loc.load_from_string(JsonTranslationLoader(), multi_json)
        assert loc.available_language_names == ("English", "German")
        assert loc.translate("Greeting", language_name="German") == "Hallo"

    def test_wrong_syntax_returns_false(self, multi_json):
        """Test a document in another syntax is not loaded."""
        loc = Loc()
        assert not loc.load_from_string(JsonSingleTranslationLoader(), multi_json)
        assert loc.available_language_names == ()

    def test_structure_errors_propagate(self):
        with pytest.raises(TreeStructureError):
            Loc().load_from_string(JsonTranslationLoader(), '{"English": "x"}')


class TestLoadFromFile:
    """Test load_from_file."""

    def test_load(self, tmp_path, multi_yaml):
        path = tmp_path / "strings.loc.yml"
        path.write_text(multi_yaml, encoding="utf-8")
        loc = Loc(loaders=[YamlTranslationLoader()])
        assert loc.load_from_file(path)
        assert loc.translate("MainWindow.Title", language_name="English") == "Main Window"

    def test_missing_file(self, tmp_path):
        loc = Loc(loaders=[JsonTranslationLoader()])
        assert not loc.load_from_file(tmp_path / "missing.loc.json")

    def test_no_matching_loader(self, tmp_path):
        path = tmp_path / "strings.loc.txt"
        path.write_text("x", encoding="utf-8")
        assert not Loc(loaders=[JsonTranslationLoader()]).load_from_file(path)

    def test_no_loaders(self, tmp_path):
        with pytest.raises(NoTranslationLoadersError):
            Loc().load_from_file(tmp_path / "a.loc.json")

    def test_broken_file_returns_false(self, tmp_path):
        path = tmp_path / "broken.loc.json"
        path.write_text("{broken", encoding="utf-8")
        assert not Loc(loaders=[JsonTranslationLoader()]).load_from_file(path)

    def test_tries_every_matching_loader(self, tmp_path, single_json, caplog):
        """Test a later loader may read a file an earlier one rejects."""
        path = tmp_path / "french.loc.json"
        path.write_text(single_json, encoding="utf-8")
        loc = Loc(loaders=[JsonTranslationLoader(), JsonSingleTranslationLoader()])
        with caplog.at_level(logging.DEBUG, logger="polyloc"):
            assert loc.load_from_file(path)
        assert loc.translate("Greeting", language_name="French") == "Bonjour"
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_broken_file_is_logged(self, tmp_path, caplog):
        """Test files no loader can parse are still reported."""
        path = tmp_path / "broken.loc.json"
        path.write_text("{broken", encoding="utf-8")
        loc = Loc(loaders=[JsonTranslationLoader(), JsonSingleTranslationLoader()])
        with caplog.at_level(logging.ERROR, logger="polyloc"):
            assert not loc.load_from_file(path)
        assert "broken.loc.json" in caplog.text

    def test_single_language_file_loads_without_errors(self, tmp_path, single_yaml, caplog):
        """Test a multi loader passes over a single-language file quietly."""
        path = tmp_path / "spanish.loc.yaml"
        path.write_text(single_yaml, encoding="utf-8")
        loc = Loc(loaders=[YamlTranslationLoader(), YamlSingleTranslationLoader()])
        with caplog.at_level(logging.DEBUG, logger="polyloc"):
            assert loc.load_from_file(path)
        assert loc.available_language_names == ("Spanish",)
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestLoadFromDirectory:
    """Test load_from_directory."""

    @pytest.fixture
    def dir_loc(self):
        return Loc(
            loaders=[
                JsonTranslationLoader(),
                YamlSingleTranslationLoader(),
                XmlTranslationLoader(),
            ]
        )

    def test_load(self, dir_loc, lang_dir):
        """Test only .loc files directly in the directory are loaded."""
        result = dir_loc.load_from_directory(lang_dir)
        assert [p.name for p in result.loaded] == ["common.loc.json", "spanish.loc.yaml"]
        assert result.success
        assert dir_loc.available_language_names == ("English", "German", "Spanish")

    def test_recurse(self, dir_loc, lang_dir):
        result = dir_loc.load_from_directory(lang_dir, recurse=True)
        assert [p.name for p in result.loaded] == [
            "common.loc.json",
            "extra.loc.xml",
            "spanish.loc.yaml",
        ]
        assert dir_loc.translate("Extra", language_name="English") == "Extra"

    def test_missing_directory(self, dir_loc, tmp_path):
        assert dir_loc.load_from_directory(tmp_path / "missing") is None

    def test_failures_are_collected(self, dir_loc, lang_dir):
        """Test a broken file does not stop the others from loading."""
        (lang_dir / "broken.loc.json").write_text("{broken", encoding="utf-8")
        result = dir_loc.load_from_directory(lang_dir)
        assert not result.success
        assert [p.name for p in result.failed] == ["broken.loc.json"]
        assert isinstance(result.failed[lang_dir / "broken.loc.json"], json.JSONDecodeError)
        assert len(result.loaded) == 2

    def test_unreadable_files_are_skipped(self, dir_loc, lang_dir):
        (lang_dir / "readme.loc.txt").write_text("text", encoding="utf-8")
        result = dir_loc.load_from_directory(lang_dir)
        assert [p.name for p in result.skipped] == ["readme.loc.txt"]

    def test_wrong_syntax_is_skipped_without_alternative(self, lang_dir):
        """Test a single-language file is skipped when only the multi loader is registered."""
        loc = Loc(loaders=[JsonTranslationLoader(), YamlTranslationLoader()])
        result = loc.load_from_directory(lang_dir)
        assert result.success
        assert [p.name for p in result.skipped] == ["spanish.loc.yaml"]
        assert "Spanish" not in loc

    def test_no_loaders(self, lang_dir):
        with pytest.raises(NoTranslationLoadersError):
            Loc().load_from_directory(lang_dir)

    def test_empty_directory_without_loaders(self, tmp_path):
        result = Loc().load_from_directory(tmp_path)
        assert result.loaded == []

    def test_merge_order_is_sorted(self, tmp_path):
        """Test later files in sorted order overwrite earlier ones."""
        (tmp_path / "b.loc.json").write_text('{"Greeting": {"English": "from b"}}', encoding="utf-8")
        (tmp_path / "a.loc.json").write_text('{"Greeting": {"English": "from a"}}', encoding="utf-8")
        loc = Loc(loaders=[JsonTranslationLoader()], max_workers=4)
        loc.load_from_directory(tmp_path)
        assert loc.translate("Greeting", language_name="English") == "from b"


class TestSave:
    """Test save_to_string, save_to_file and save_to_directory."""

    def test_save_to_string(self, loc, sample_languages):
        text = loc.save_to_string(JsonTranslationLoader())
        assert JsonTranslationLoader().deserialize(text) == sample_languages

    def test_save_to_string_selected_languages(self, loc, sample_languages):
        text = loc.save_to_string(JsonSingleTranslationLoader(), ["German"])
        assert JsonSingleTranslationLoader().deserialize(text) == {"German": sample_languages["German"]}

    def test_save_to_string_skips_unknown_languages(self, loc):
        text = loc.save_to_string(JsonTranslationLoader(), ["German", "Klingon"])
        assert list(JsonTranslationLoader().deserialize(text)) == ["German"]

    def test_save_to_file(self, loc, tmp_path, sample_languages):
        """Test the loader is chosen from the file name."""
        path = tmp_path / "out" / "all.loc.yaml"
        assert loc.save_to_file(path) == path
        assert YamlTranslationLoader().load_from_file(path) == sample_languages
        assert [p.name for p in path.parent.iterdir()] == ["all.loc.yaml"]

    def test_save_to_file_overwrites(self, loc, tmp_path):
        path = tmp_path / "all.loc.json"
        path.write_text("old", encoding="utf-8")
        loc.save_to_file(path, language_names=["English"])
        assert list(JsonTranslationLoader().load_from_file(path)) == ["English"]

    def test_save_to_file_with_explicit_loader(self, loc, tmp_path):
        path = tmp_path / "german.txt"
        loc.save_to_file(path, ["German"], loader=YamlSingleTranslationLoader())
        assert path.read_text(encoding="utf-8").startswith("$LanguageName: German")

    def test_save_to_file_no_matching_loader(self, loc, tmp_path):
        with pytest.raises(LoaderNotFoundError):
            loc.save_to_file(tmp_path / "all.loc.txt")

    def test_save_to_file_no_loaders(self, tmp_path, sample_languages):
        loc = Loc()
        loc.add_languages(sample_languages)
        with pytest.raises(NoTranslationLoadersError):
            loc.save_to_file(tmp_path / "all.loc.json")

    def test_save_to_directory(self, loc, tmp_path, sample_languages):
        """Test one file is written per language and reads back."""
        written = loc.save_to_directory(tmp_path)
        assert [p.name for p in written] == ["English.loc.json", "German.loc.json"]

        reloaded = Loc(loaders=[JsonTranslationLoader()])
        reloaded.load_from_directory(tmp_path)
        assert {name: d.to_dict() for name, d in reloaded.languages.items()} == sample_languages

    def test_save_to_directory_options(self, loc, tmp_path):
        written = loc.save_to_directory(
            tmp_path,
            extension="yaml",
            loader=YamlSingleTranslationLoader(),
            file_name_template="strings_{language}",
        )
        assert sorted(p.name for p in written) == ["strings_English.loc.yaml", "strings_German.loc.yaml"]
        assert YamlSingleTranslationLoader().load_from_file(written[0]) is not None

    def test_save_to_directory_no_matching_loader(self, loc, tmp_path):
        with pytest.raises(LoaderNotFoundError):
            loc.save_to_directory(tmp_path, extension=".txt")
