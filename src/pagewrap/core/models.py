"""Data models shared by the conversion and wrapping pipeline"""

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence


Highlighter = Callable[[str, str, str], str]   # (code, lang, attrs) -> markup


class LayoutKind(str, Enum):
    """Document kind, derived from the document id suffix."""
    markdown = "markdown"
    page_template = "page_template"
    layout_template = "layout_template"
    other = "other"


def layout_kind(file_id: str) -> LayoutKind:
    """Classify a document id by suffix."""
    if file_id.endswith(".md"):
        return LayoutKind.markdown
    if file_id.endswith("page.svelte"):
        return LayoutKind.page_template
    if file_id.endswith("layout.svelte"):
        return LayoutKind.layout_template
    return LayoutKind.other


@dataclass(frozen=True)
class ConvertOptions:
    """Markdown conversion options: code highlighter plus markup plugin chains."""
    highlighter:    Optional[Highlighter] = None
    remark_plugins: Sequence[Any] = ()      # markdown-it plugins, or (plugin, kwargs) pairs
    rehype_plugins: Sequence[Callable[[str, dict], str]] = ()
    parser_config:  str = "commonmark"


@dataclass(frozen=True)
class ConvertResult:
    """Converter output: component markup and metadata (frontmatter under "fm")."""
    code: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WrappedPage:
    """Final pipeline result: assembled component code and merged page frontmatter."""
    code: str
    fm:   dict[str, Any]

    def copy(self) -> "WrappedPage":
        """Return a page holding its own copy of the frontmatter."""
        return WrappedPage(code=self.code, fm=deepcopy(self.fm))

    def to_dict(self) -> dict[str, Any]:
        return {"wrappedCode": self.code, "fm": self.fm}
