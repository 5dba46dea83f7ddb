"""Command-line interface for polyloc."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Optional

import typer

from polyloc.codec import count_paths
from polyloc.config import LocConfig, create_loc
from polyloc.exceptions import LocalizationError
from polyloc.loaders import LOADER_TYPES
from polyloc.registry import Loc
from polyloc.types import StringComparison

app = typer.Typer(
    name="polyloc",
    help="Inspect, convert and query translation files",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML or JSON configuration file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Translation file tools."""
    try:
        config = LocConfig.load(config_file)
    except LocalizationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    level = "DEBUG" if verbose else (config.log_level or "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = config


def _open(ctx: typer.Context, path: Path, recurse: bool = False) -> Loc:
    """Build a registry from the active config and load ``path`` into it."""
    config: LocConfig = ctx.obj or LocConfig()
    loc = create_loc(replace(config, directories=[]))

    if path.is_dir():
        result = loc.load_from_directory(path, recurse=recurse)
        if result is not None:
            for failed_path, error in result.failed.items():
                typer.echo(f"Warning: {failed_path}: {error}", err=True)
    elif path.is_file():
        if not loc.load_from_file(path):
            typer.echo(f"Error: Could not load translations from {path}", err=True)
            raise typer.Exit(1)
    else:
        typer.echo(f"Error: File not found: {path}", err=True)
        raise typer.Exit(1)

    if not loc.available_language_names:
        typer.echo(f"Error: No translations found in {path}", err=True)
        raise typer.Exit(1)
    return loc


@app.command(name="convert")
def convert_cmd(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="Translation file to read")],
    dest: Annotated[Path, typer.Argument(help="Output file, e.g. all.loc.yaml")],
    languages: Annotated[
        Optional[list[str]],
        typer.Option("--language", "-l", help="Language to include (repeatable)"),
    ] = None,
    loader_name: Annotated[
        Optional[str],
        typer.Option("--loader", "-L", help=f"Output loader ({', '.join(LOADER_TYPES)})"),
    ] = None,
) -> None:
    """Convert a translation file to the format implied by DEST."""
    loc = _open(ctx, source)

    loader = None
    if loader_name is not None:
        if loader_name not in LOADER_TYPES:
            typer.echo(f"Error: Unknown loader: {loader_name}", err=True)
            raise typer.Exit(1)
        loader = LOADER_TYPES[loader_name]()

    try:
        written = loc.save_to_file(dest, language_names=languages or None, loader=loader)
    except LocalizationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    count = count_paths(loc.to_language_map(languages or None))
    typer.echo(f"{count} translations written to {written}")


@app.command(name="lookup")
def lookup_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Translation file or directory")],
    key: Annotated[str, typer.Argument(help="Dotted key path")],
    language: Annotated[
        Optional[str],
        typer.Option("--language", "-l", help="Language to translate into"),
    ] = None,
    fallback: Annotated[
        Optional[str],
        typer.Option("--fallback", "-f", help="Fallback language"),
    ] = None,
    default: Annotated[
        Optional[str],
        typer.Option("--default", "-d", help="Text returned when the key is missing"),
    ] = None,
    ignore_case: Annotated[
        bool,
        typer.Option("--ignore-case", "-i", help="Match keys case-insensitively"),
    ] = False,
    context: Annotated[
        bool,
        typer.Option("--context", help="Also print where the text came from"),
    ] = False,
) -> None:
    """Resolve a key the way an application would."""
    loc = _open(ctx, path)
    if language is not None:
        loc.current_language_name = language
    if fallback is not None:
        loc.fallback_language_name = fallback

    comparison = (
        StringComparison.ORDINAL_IGNORE_CASE if ignore_case else StringComparison.ORDINAL
    )
    try:
        result = loc.translate_with_context(key, comparison=comparison, default_text=default)
    except LocalizationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(result.text)
    if context:
        typer.echo(f"  source: {result.source.value}")
        typer.echo(f"  language: {result.language_name or '-'}")


@app.command(name="languages")
def languages_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Translation file or directory")],
    recurse: Annotated[
        bool,
        typer.Option("--recurse", "-r", help="Scan subdirectories"),
    ] = False,
) -> None:
    """List languages and their key counts."""
    loc = _open(ctx, path, recurse=recurse)
    for name, dictionary in loc.languages.items():
        typer.echo(f"{name}\t{len(dictionary)} keys")


@app.command(name="check")
def check_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Translation file or directory")],
    reference: Annotated[
        Optional[str],
        typer.Option("--reference", "-r", help="Reference language (default: first loaded)"),
    ] = None,
    recurse: Annotated[
        bool,
        typer.Option("--recurse", help="Scan subdirectories"),
    ] = False,
) -> None:
    """Report keys missing from each language relative to a reference."""
    loc = _open(ctx, path, recurse=recurse)
    languages = loc.languages

    reference = reference or next(iter(languages))
    if reference not in languages:
        typer.echo(f"Error: Reference language not loaded: {reference}", err=True)
        raise typer.Exit(1)

    expected = set(languages[reference])
    incomplete = False
    for name, dictionary in languages.items():
        if name == reference:
            continue
        missing = sorted(expected - set(dictionary))
        if not missing:
            typer.echo(f"{name}: complete")
            continue
        incomplete = True
        typer.echo(f"{name}: {len(missing)} missing")
        for key in missing:
            typer.echo(f"  - {key}")

    if incomplete:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
