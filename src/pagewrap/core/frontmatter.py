"""Frontmatter extraction for markdown sources and component templates"""

import re
from datetime import date
from typing import Any

import structlog
import yaml


log = structlog.get_logger()

FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)', re.DOTALL)
COMMENT_HEADER_RE = re.compile(r'^\s*<!--(.*?)-->', re.DOTALL)


def _normalize(value: Any) -> Any:
    """Convert YAML date/datetime values to ISO strings, recursively."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    return value


def _load_mapping(header: str, source: str) -> dict[str, Any]:
    """Parse a YAML header into a dict; malformed or non-mapping headers become {}."""
    try:
        fm = yaml.safe_load(header)
    except yaml.YAMLError:
        log.warning("frontmatter_invalid", source=source, exc_info=True)
        return {}
    if fm is None:
        return {}
    if not isinstance(fm, dict):
        log.warning("frontmatter_not_mapping", source=source, got=type(fm).__name__)
        return {}
    return _normalize(fm)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with a leading `---` YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        return _load_mapping(m.group(1), "markdown"), text[m.end():]
    return {}, text


def parse_svelte_frontmatter(svelte_code: str) -> dict[str, Any]:
    """Read page metadata from the header of a component template.

    The header is either a leading `---` fenced YAML block or a leading
    HTML comment whose body is YAML, optionally `---` fenced itself:

        <!--
        ---
        title: Hello
        ---
        -->

    Returns {} when no header is present or it cannot be parsed.
    """
    m = FRONTMATTER_RE.match(svelte_code)
    if m:
        return _load_mapping(m.group(1), "svelte")

    m = COMMENT_HEADER_RE.match(svelte_code)
    if not m:
        return {}
    inner = m.group(1).strip()
    fenced = FRONTMATTER_RE.match(inner + "\n")
    return _load_mapping(fenced.group(1) if fenced else inner, "svelte")
