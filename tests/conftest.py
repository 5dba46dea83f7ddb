"""Shared fixtures and sample translation documents."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from polyloc import (
    JsonSingleTranslationLoader,
    JsonTranslationLoader,
    Loc,
    XmlTranslationLoader,
    YamlSingleTranslationLoader,
    YamlTranslationLoader,
    set_default_loc,
)


MULTI_JSON = """\
{
  "MainWindow": {
    "Title": {
      "English": "Main Window",
      "German": "Hauptfenster"
    },
    "Settings": {
      "Header": {
        "English": "Settings",
        "German": "Einstellungen"
      }
    }
  },
  "Greeting": {
    "English": "Hello",
    "German": "Hallo"
  }
}
"""

SINGLE_JSON = """\
{
  "$LanguageName": "French",
  "MainWindow": {
    "Title": "Fenetre principale",
    "Settings": {
      "Header": "Parametres"
    }
  },
  "Greeting": "Bonjour"
}
"""

MULTI_YAML = """\
MainWindow:
  Title:
    English: Main Window
    German: Hauptfenster
Greeting:
  English: Hello
  German: Hallo
"""

SINGLE_YAML = """\
$LanguageName: Spanish
MainWindow:
  Title: Ventana principal
Greeting: Hola
"""

MULTI_XML = """\
<Localization>
  <MainWindow>
    <Title>
      <English>Main Window</English>
      <German>Hauptfenster</German>
    </Title>
  </MainWindow>
  <Greeting>
    <English>Hello</English>
    <German>Hallo</German>
  </Greeting>
</Localization>
"""

SAMPLE_LANGUAGES = {
    "English": {
        "MainWindow.Title": "Main Window",
        "MainWindow.Settings.Header": "Settings",
        "Greeting": "Hello",
    },
    "German": {
        "MainWindow.Title": "Hauptfenster",
        "MainWindow.Settings.Header": "Einstellungen",
        "Greeting": "Hallo",
    },
}


@pytest.fixture(autouse=True)
def reset_default_loc():
    """Keep the process-wide registry isolated between tests."""
    set_default_loc(None)
    yield
    set_default_loc(None)


@pytest.fixture
def sample_languages():
    return {name: dict(translations) for name, translations in SAMPLE_LANGUAGES.items()}


@pytest.fixture
def loc(sample_languages):
    """Registry with English and German loaded, English current."""
    registry = Loc(loaders=[JsonTranslationLoader(), YamlTranslationLoader(), XmlTranslationLoader()])
    registry.add_languages(sample_languages)
    registry.current_language_name = "English"
    return registry


@pytest.fixture
def all_loaders():
    return [
        JsonTranslationLoader(),
        JsonSingleTranslationLoader(),
        YamlTranslationLoader(),
        YamlSingleTranslationLoader(),
        XmlTranslationLoader(),
    ]


@pytest.fixture
def lang_dir(tmp_path: Path) -> Path:
    """Directory with one file per supported format plus noise."""
    directory = tmp_path / "lang"
    directory.mkdir()
    (directory / "common.loc.json").write_text(MULTI_JSON, encoding="utf-8")
    (directory / "spanish.loc.yaml").write_text(SINGLE_YAML, encoding="utf-8")
    (directory / "notes.txt").write_text("not a translation file", encoding="utf-8")
    (directory / "plain.json").write_text(json.dumps({"ignored": {"English": "x"}}), encoding="utf-8")
    nested = directory / "nested"
    nested.mkdir()
    (nested / "extra.loc.xml").write_text(
        "<Localization><Extra><English>Extra</English></Extra></Localization>",
        encoding="utf-8",
    )
    return directory


@pytest.fixture
def multi_json():
    return MULTI_JSON


@pytest.fixture
def single_json():
    return SINGLE_JSON


@pytest.fixture
def multi_yaml():
    return MULTI_YAML


@pytest.fixture
def single_yaml():
    return SINGLE_YAML


@pytest.fixture
def multi_xml():
    return MULTI_XML
