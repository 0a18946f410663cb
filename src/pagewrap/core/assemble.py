"""Page assembly: wrap component markup in a layout and re-emit hoisted top-level blocks"""

import json
from typing import Any

from pagewrap.core.hoist import BUILTIN_TAG_RES, SCRIPT_OPEN_RE, SCRIPT_RE, STYLE_RE, hoist, hoist_tag


def to_js_literal(value: Any, name: str) -> str:
    """Serialize value as a compact JSON literal safe to embed inside a <script> block."""
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} is not JSON-serializable: {e}") from e
    return text.replace("</", "<\\/")


def build_imports(page_layout: str, fm: dict[str, Any], site_config: Any) -> str:
    """Return the declarations injected into the page script: layout import, fm, siteConfig."""
    return "\n".join([
        f"import PageLayout from '{page_layout}'",
        f"const fm = {to_js_literal(fm, 'fm')}",
        f"const siteConfig = {to_js_literal(site_config, 'siteConfig')}",
    ])


def wrap_svelte_code(
    svelte_code: str,
    fm: dict[str, Any],
    site_config: Any,
    page_layout: str,
    ) -> str:
    """Wrap svelte_code in <PageLayout>, hoisting blocks that must stay top-level.

    Output order: script block(s) with the injected declarations, then the
    svelte:head / svelte:body / svelte:window blocks, then the layout-wrapped
    body, then the first <style> block. Later <style> blocks are dropped.
    """
    imports = build_imports(page_layout, fm, site_config)

    builtin_tags: list[str] = []
    for tag_re in BUILTIN_TAG_RES:
        tags, svelte_code = hoist(tag_re, svelte_code)
        builtin_tags.extend(tags)

    scripts = hoist_tag(SCRIPT_RE, svelte_code)
    if scripts:
        scripts[0] = SCRIPT_OPEN_RE.sub(lambda m: f"{m.group(0)}\n{imports}", scripts[0], count=1)
    else:
        scripts = ["<script>", imports, "</script>"]

    style_code = ""
    style_match = STYLE_RE.search(svelte_code)
    if style_match:
        style_code = style_match.group(0)
        svelte_code = STYLE_RE.sub("", svelte_code)

    svelte_code = SCRIPT_RE.sub("", svelte_code)
    return (
        "\n".join(scripts) + "\n"
        + "\n".join(builtin_tags) + "\n"
        + f"<PageLayout {{fm}} {{siteConfig}}>{svelte_code}</PageLayout>\n"
        + f"{style_code}\n"
    )
