"""Source file discovery for batch builds"""

from pathlib import Path

from pagewrap.core.models import LayoutKind, layout_kind


def is_page_source(path: Path) -> bool:
    return layout_kind(path.name) is not LayoutKind.other


def discover_files(path: Path) -> list[Path]:
    """Return sorted markdown / page / layout sources under path, or [path] if a single file."""
    if path.is_file():
        return [path] if is_page_source(path) else []
    return sorted(p for p in path.rglob('*') if p.is_file() and is_page_source(p))


def output_paths(src: Path, root: Path, output_dir: Path) -> tuple[Path, Path]:
    """Return (component_path, json_path) mirroring src's location relative to root."""
    rel = src.relative_to(root) if root.is_dir() else Path(src.name)
    stem = rel.name[:-len(".svelte")] if rel.name.endswith(".svelte") else rel.stem
    dest_dir = output_dir / rel.parent
    return dest_dir / f"{stem}.svelte", dest_dir / f"{stem}.json"
