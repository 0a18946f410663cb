"""Batch build: wrap every discovered source and write component + sidecar JSON"""

import asyncio
import json
from pathlib import Path
from typing import Optional

from pagewrap.config import Settings
from pagewrap.core.convert import highlight_code
from pagewrap.core.discover import discover_files, output_paths
from pagewrap.core.models import ConvertOptions, WrappedPage
from pagewrap.core.pipeline import PagePipeline


def build_options(settings: Settings) -> ConvertOptions:
    """Conversion options for CLI builds: Pygments highlighting, configured parser preset."""
    return ConvertOptions(highlighter=highlight_code, parser_config=settings.parser_config)


def write_page(page: WrappedPage, component_path: Path, json_path: Path) -> None:
    component_path.parent.mkdir(parents=True, exist_ok=True)
    component_path.write_text(page.code, encoding='utf-8')
    json_path.write_text(json.dumps(page.fm, indent=2, ensure_ascii=False), encoding='utf-8')


async def build_pages(
    path: Path,
    settings: Settings,
    output_dir: Path,
    layout: Optional[str] = None,
    pipeline: Optional[PagePipeline] = None,
    ) -> list[tuple[Path, Path]]:
    """Wrap all sources under path concurrently. Returns (source_path, component_path) pairs."""
    pipeline = pipeline or PagePipeline.from_settings(settings)
    options = build_options(settings)
    files = discover_files(path)

    async def _one(src: Path) -> tuple[Path, Path]:
        try:
            page = await pipeline.wrap(
                str(src), src.read_text(encoding='utf-8'), settings.site, layout, options,
            )
            component_path, json_path = output_paths(src, path, output_dir)
            write_page(page, component_path, json_path)
        except Exception as e:
            raise RuntimeError(f"Failed to build {src}: {e}") from e
        return src, component_path

    return list(await asyncio.gather(*(_one(f) for f in files)))


def run_build(
    path: str,
    settings: Settings,
    output_dir: Path,
    layout: Optional[str] = None,
    ) -> list[tuple[Path, Path]]:
    """Synchronous entry point for build_pages."""
    return asyncio.run(build_pages(Path(path), settings, output_dir, layout))
