"""Top-level tag patterns and hoisting (regex extraction, no markup parser)

Blocks are recognized purely by pattern. Nested blocks of the same kind are
not distinguished: a match ends at the first closing tag after its opener.
"""

import re


SCRIPT_RE = re.compile(r'<script\b[^>]*>[\s\S]*?</script\b[^>]*>')
SCRIPT_OPEN_RE = re.compile(r'<script\b[^>]*>')
STYLE_RE = re.compile(r'<style\b[^>]*>[\s\S]*?</style\b[^>]*>')
SVELTE_HEAD_RE = re.compile(r'<svelte:head\b[^>]*>[\s\S]*?</svelte:head>')
SVELTE_BODY_RE = re.compile(
    r'(<svelte:body\b[^>]*(?<!/)>[\s\S]*?</svelte:body>)|(<svelte:body\b[^>]*/>)'
)
SVELTE_WINDOW_RE = re.compile(
    r'(<svelte:window\b[^>]*(?<!/)>[\s\S]*?</svelte:window>)|(<svelte:window\b[^>]*/>)'
)

# hoisting order for builtin declaration blocks
BUILTIN_TAG_RES = (SVELTE_HEAD_RE, SVELTE_BODY_RE, SVELTE_WINDOW_RE)


def hoist_tag(tag_re: re.Pattern, code: str) -> list[str]:
    """Return every non-overlapping match of tag_re in code, in document order."""
    tags = []
    for m in tag_re.finditer(code):
        if not m.group(0):
            raise ValueError(f"Tag pattern {tag_re.pattern!r} matched an empty string")
        tags.append(m.group(0))
    return tags


def hoist(tag_re: re.Pattern, code: str) -> tuple[list[str], str]:
    """Return (matches, remainder): the matched blocks and code with all of them removed."""
    tags = hoist_tag(tag_re, code)
    if not tags:
        return tags, code
    return tags, tag_re.sub('', code)
