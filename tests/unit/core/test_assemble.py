"""Unit tests for core/assemble.py"""

import pytest

from pagewrap.core.assemble import build_imports, to_js_literal, wrap_svelte_code
from pagewrap.core.hoist import SCRIPT_RE, STYLE_RE, hoist_tag


LAYOUT = "./Layout.svelte"
FM = {"title": "T"}
SITE = {"name": "S"}

IMPORT_LINE = "import PageLayout from './Layout.svelte'"
FM_LINE = 'const fm = {"title":"T"}'
SITE_LINE = 'const siteConfig = {"name":"S"}'


def test_build_imports_lines():
    """Injected declarations are the layout import, fm, and siteConfig, one per line."""
    assert build_imports(LAYOUT, FM, SITE).split("\n") == [IMPORT_LINE, FM_LINE, SITE_LINE]


def test_wrap_synthesizes_script_when_none():
    """Markup without a script gets exactly one synthesized script with the declarations."""
    out = wrap_svelte_code("<h1>Hi</h1>", FM, SITE, LAYOUT)
    assert out == (
        "<script>\n"
        f"{IMPORT_LINE}\n{FM_LINE}\n{SITE_LINE}\n"
        "</script>\n"
        "\n"
        "<PageLayout {fm} {siteConfig}><h1>Hi</h1></PageLayout>\n"
        "\n"
    )
    assert len(hoist_tag(SCRIPT_RE, out)) == 1


def test_wrap_merges_into_existing_script():
    """Declarations go right after the opening tag of the first script; its content is kept."""
    out = wrap_svelte_code('<script lang="ts">\nlet x = 1\n</script>\n<p>{x}</p>', FM, SITE, LAYOUT)
    scripts = hoist_tag(SCRIPT_RE, out)
    assert len(scripts) == 1
    assert scripts[0] == (
        f'<script lang="ts">\n{IMPORT_LINE}\n{FM_LINE}\n{SITE_LINE}\n'
        "let x = 1\n</script>"
    )


def test_wrap_injects_only_into_first_script():
    """With two scripts, only the first receives the declarations; both are emitted in order."""
    markup = '<script context="module">export const a = 1</script><script>let b</script><p>x</p>'
    out = wrap_svelte_code(markup, FM, SITE, LAYOUT)
    scripts = hoist_tag(SCRIPT_RE, out)
    assert len(scripts) == 2
    assert IMPORT_LINE in scripts[0]
    assert IMPORT_LINE not in scripts[1]
    assert scripts[1] == "<script>let b</script>"


def test_wrap_body_has_no_scripts():
    """The layout-wrapped body contains no leftover script text."""
    out = wrap_svelte_code("<p>a</p><script>let x</script><p>b</p>", FM, SITE, LAYOUT)
    assert "<PageLayout {fm} {siteConfig}><p>a</p><p>b</p></PageLayout>" in out


def test_wrap_keeps_only_first_style():
    """Of two style blocks only the first survives, placed after the layout."""
    markup = "<style>h1 { color: red }</style><h1>x</h1><style>h1 { color: blue }</style>"
    out = wrap_svelte_code(markup, FM, SITE, LAYOUT)
    assert hoist_tag(STYLE_RE, out) == ["<style>h1 { color: red }</style>"]
    assert out.endswith("</PageLayout>\n<style>h1 { color: red }</style>\n")
    assert "blue" not in out


def test_wrap_hoists_builtin_tags_in_category_order():
    """head, body, then window blocks are emitted after the script and before the layout."""
    markup = (
        "<svelte:window on:resize={r} />"
        "<p>content</p>"
        "<svelte:body on:click={c} />"
        "<svelte:head><title>T</title></svelte:head>"
    )
    out = wrap_svelte_code(markup, FM, SITE, LAYOUT)
    after_script = out.split("</script>\n", 1)[1]
    assert after_script == (
        "<svelte:head><title>T</title></svelte:head>\n"
        "<svelte:body on:click={c} />\n"
        "<svelte:window on:resize={r} />\n"
        "<PageLayout {fm} {siteConfig}><p>content</p></PageLayout>\n"
        "\n"
    )


def test_wrap_output_order():
    """Final order is script, builtin blocks, layout-wrapped body, style."""
    markup = "<style>p{}</style><p>x</p><svelte:head><title>T</title></svelte:head><script>let y</script>"
    out = wrap_svelte_code(markup, FM, SITE, LAYOUT)
    positions = [out.index(s) for s in ("<script>", "<svelte:head>", "<PageLayout", "<style>")]
    assert positions == sorted(positions)


def test_wrap_rejects_non_serializable_frontmatter():
    """Non-JSON-serializable frontmatter is a hard failure."""
    with pytest.raises(ValueError, match="fm is not JSON-serializable"):
        wrap_svelte_code("<p>x</p>", {"bad": object()}, SITE, LAYOUT)


def test_wrap_rejects_non_serializable_site_config():
    """Non-JSON-serializable site configuration is a hard failure."""
    with pytest.raises(ValueError, match="siteConfig is not JSON-serializable"):
        wrap_svelte_code("<p>x</p>", FM, {"nums": {1, 2}}, LAYOUT)


def test_to_js_literal_escapes_closing_tags():
    """Serialized values cannot terminate the surrounding script block."""
    literal = to_js_literal({"html": "</script>"}, "fm")
    assert "</script>" not in literal
    assert literal == '{"html":"<\\/script>"}'


def test_to_js_literal_keeps_unicode():
    """Non-ASCII text is embedded as-is."""
    assert to_js_literal({"title": "Grüße"}, "fm") == '{"title":"Grüße"}'
