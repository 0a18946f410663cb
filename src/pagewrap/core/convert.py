"""Markdown to component markup conversion (markdown-it + Pygments highlighting)"""

import asyncio
import html
import re
from bisect import bisect_right
from typing import Any, Optional

from markdown_it import MarkdownIt
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from pagewrap.core.frontmatter import split_frontmatter
from pagewrap.core.hoist import BUILTIN_TAG_RES, SCRIPT_RE, STYLE_RE
from pagewrap.core.models import ConvertOptions, ConvertResult


HL_LINES_RE = re.compile(r'\{([\d,\s-]+)\}')
CODE_RULES = ('fence', 'code_block', 'code_inline')
NEWLINE_RE = re.compile(r"\n")


def _parse_hl_lines(attrs: str) -> list[int]:
    """Parse a `{1,3-5}` line selector from fence attributes into line numbers."""
    m = HL_LINES_RE.search(attrs or '')
    if not m:
        return []
    lines: list[int] = []
    for part in m.group(1).split(','):
        part = part.strip()
        if '-' in part:
            start, _, end = part.partition('-')
            if start.strip().isdigit() and end.strip().isdigit():
                lines.extend(range(int(start), int(end) + 1))
        elif part.isdigit():
            lines.append(int(part))
    return lines


def highlight_code(code: str, lang: str, attrs: str = '') -> str:
    """Highlight code with Pygments; returns '' for unknown languages (plain escaped block)."""
    if not lang:
        return ''
    try:
        lexer = get_lexer_by_name(lang.strip())
    except ClassNotFound:
        return ''
    formatter = HtmlFormatter(nowrap=True, hl_lines=_parse_hl_lines(attrs))
    body = highlight(code, lexer, formatter)
    return f'<pre class="highlight"><code class="language-{html.escape(lang)}">{body}</code></pre>\n'


def escape_curlies(markup: str) -> str:
    """Escape braces so code is not evaluated as template expressions."""
    return markup.replace('{', '&#123;').replace('}', '&#125;')


def _escaping(rule):
    def render(tokens, idx, options, env):
        return escape_curlies(rule(tokens, idx, options, env))
    return render


def _make_parser(options: ConvertOptions) -> MarkdownIt:
    """Build a MarkdownIt instance with the highlighter and markdown plugins applied."""
    md = MarkdownIt(options.parser_config, options_update={
        "linkify": False,
        "highlight": options.highlighter,
    })
    for plugin in options.remark_plugins:
        if isinstance(plugin, tuple):
            plugin, kwargs = plugin
            md.use(plugin, **kwargs)
        else:
            md.use(plugin)
    for name in CODE_RULES:
        md.renderer.rules[name] = _escaping(md.renderer.rules[name])
    return md


def _code_lines(md: MarkdownIt, body: str, env: dict) -> set[int]:
    """Line numbers covered by fenced or indented code blocks."""
    lines: set[int] = set()
    for token in md.parse(body, dict(env)):
        if token.type in ('fence', 'code_block') and token.map:
            lines.update(range(*token.map))
    return lines


def lift_blocks(md: MarkdownIt, body: str, env: dict) -> tuple[dict[re.Pattern, list[str]], str]:
    """Split block-level script, style and svelte:* tags out of a markdown body.

    A tag is lifted only when it opens a line (at most three spaces of indent)
    outside any code block, so tags shown in code fences, indented code or
    inline code spans stay part of the rendered markup. Builtin blocks are
    matched before scripts, so a script inside <svelte:head> stays there.
    Returns matches per pattern in document order and the remaining body.
    """
    code_lines = _code_lines(md, body, env)
    line_starts = [0, *(m.end() for m in NEWLINE_RE.finditer(body))]
    spans: list[tuple[int, int]] = []
    lifted: dict[re.Pattern, list[str]] = {}

    for tag_re in (*BUILTIN_TAG_RES, SCRIPT_RE, STYLE_RE):
        lifted[tag_re] = []
        for m in tag_re.finditer(body):
            start, end = m.span()
            line = bisect_right(line_starts, start) - 1
            indent = body[line_starts[line]:start]
            if line in code_lines or indent.strip(' ') or len(indent) > 3:
                continue
            if any(start < e and s < end for s, e in spans):
                continue
            spans.append((start, end))
            lifted[tag_re].append(m.group(0))

    remainder, pos = [], 0
    for start, end in sorted(spans):
        remainder.append(body[pos:start])
        pos = end
    remainder.append(body[pos:])
    return lifted, ''.join(remainder)


def render_markdown(md_content: str, filename: str, options: ConvertOptions) -> ConvertResult:
    """Render markdown into component markup.

    The YAML header becomes data["fm"]. Line-leading <script>, <style> and
    svelte:head/body/window blocks bypass the markdown renderer: scripts and
    builtin blocks are emitted before the rendered markup, styles after it.
    Rehype plugins then rewrite the markup and may add keys to data.
    """
    fm, body = split_frontmatter(md_content)
    md = _make_parser(options)
    env = {"filename": filename}

    lifted, body = lift_blocks(md, body, env)
    head_blocks = [*lifted[SCRIPT_RE], *(b for tag_re in BUILTIN_TAG_RES for b in lifted[tag_re])]
    styles = lifted[STYLE_RE]

    rendered = md.render(body, env)

    data: dict[str, Any] = {"fm": fm}
    for plugin in options.rehype_plugins:
        rendered = plugin(rendered, data)

    code = "\n".join([*head_blocks, rendered, *styles])
    return ConvertResult(code=code, data=data)


async def md_to_component(
    md_content: str,
    filename: str,
    options: Optional[ConvertOptions] = None,
    ) -> Optional[ConvertResult]:
    """Convert markdown to component markup off the event loop."""
    return await asyncio.to_thread(render_markdown, md_content, filename, options or ConvertOptions())
