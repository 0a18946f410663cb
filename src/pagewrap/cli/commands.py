"""CLI command implementations"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer

from pagewrap.config import Settings, load_config
from pagewrap.core.build import build_options, run_build
from pagewrap.core.pipeline import PagePipeline
from pagewrap.logs import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def build_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to process")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    layout: Annotated[Optional[str], typer.Option("--layout", help="Layout component import path")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Wrap every markdown / page / layout source and write components + frontmatter JSON."""
    settings = _settings(overrides={"output_dir": out, "layout": layout, "parser_config": parser})
    if not Path(path).exists():
        _fail(f"Path not found: {path}")
    output_dir = Path(settings.output_dir)

    try:
        results = run_build(path, settings, output_dir, settings.layout)
    except RuntimeError as e:
        _fail(str(e))
    if not results:
        typer.echo("No .md / page.svelte / layout.svelte files found.")
        raise typer.Exit(0)
    for src, component_path in results:
        typer.echo(f"  {src} -> {component_path}")
    typer.echo(f"Built {len(results)} page(s) to {output_dir}/")


def wrap_cmd(
    path: Annotated[str, typer.Argument(help="Source file to wrap")],
    layout: Annotated[Optional[str], typer.Option("--layout", help="Layout component import path")] = None,
    ):
    """Print the assembled component for a single source file."""
    settings = _settings(overrides={"layout": layout})
    src = Path(path)
    if not src.is_file():
        _fail(f"File not found: {path}")

    pipeline = PagePipeline.from_settings(settings)
    try:
        page = asyncio.run(pipeline.wrap(
            str(src), src.read_text(encoding="utf-8"), settings.site, settings.layout, build_options(settings),
        ))
    except ValueError as e:
        _fail("Wrap failed", e)
    typer.echo(page.code, nl=False)
