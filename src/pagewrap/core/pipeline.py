"""Page pipeline: convert or read a document, merge frontmatter, wrap in a layout, cache

A document id routes the work: `.md` files go through the markdown
converter, `page.svelte` templates keep their code and contribute header
frontmatter, `layout.svelte` templates pass through untouched, anything
else yields an empty page. Results are cached by (id, content).
"""

import asyncio
from functools import partial
from typing import Any, Awaitable, Callable, Optional, Sequence

import structlog

from pagewrap.config import Settings
from pagewrap.core.assemble import wrap_svelte_code
from pagewrap.core.cache import PageCache, cache_key, get_default_cache
from pagewrap.core.convert import md_to_component
from pagewrap.core.frontmatter import parse_svelte_frontmatter
from pagewrap.core.models import ConvertOptions, ConvertResult, Highlighter, LayoutKind, WrappedPage, layout_kind
from pagewrap.core.utils.lastupdate import get_file_last_update


log = structlog.get_logger()

Converter = Callable[[str, str, ConvertOptions], Awaitable[Optional[ConvertResult]]]
LastUpdateLookup = Callable[[str], Awaitable[Optional[int]]]


def merge_md_frontmatter(data: Optional[dict[str, Any]], last_update: Optional[int]) -> dict[str, Any]:
    """Build markdown page frontmatter; converter values override the derived keys."""
    data = dict(data or {})
    data_fm = data.pop("fm", None) or {}
    return {"pageType": "md", "lastUpdate": last_update, **data_fm, **data}


def merge_svelte_frontmatter(extracted: dict[str, Any], last_update: Optional[int]) -> dict[str, Any]:
    """Build template page frontmatter; derived keys override the header values."""
    return {**extracted, "pageType": "svelte", "lastUpdate": last_update}


class PagePipeline:
    """Wraps documents into layout components, memoizing results in a PageCache.

    Concurrent calls for the same (id, content) share a single in-flight
    computation instead of converting twice. Every caller gets its own copy
    of the page frontmatter, so the cached entry cannot be mutated.
    """

    def __init__(
        self,
        cache: Optional[PageCache] = None,
        converter: Converter = md_to_component,
        last_update: LastUpdateLookup = get_file_last_update,
        timeout: Optional[float] = None,
        ) -> None:
        self.cache = cache if cache is not None else PageCache()
        self.converter = converter
        self.last_update = last_update
        self.timeout = timeout or None
        self._inflight: dict[str, asyncio.Future] = {}

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "PagePipeline":
        """Build a pipeline using the cache capacity and timeout from settings."""
        kwargs.setdefault("cache", PageCache(settings.cache_max_entries))
        kwargs.setdefault("timeout", settings.convert_timeout)
        return cls(**kwargs)

    async def wrap(
        self,
        file_id: str,
        md_or_svelte_code: str,
        site_config: Any,
        layout: Optional[str] = None,
        options: Optional[ConvertOptions] = None,
        ) -> WrappedPage:
        """Return the wrapped page for a document, from cache when (id, content) was seen."""
        key = cache_key(file_id, md_or_svelte_code)
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("cache_hit", id=file_id)
            return cached.copy()

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(
                self._compute(key, file_id, md_or_svelte_code, site_config, layout, options or ConvertOptions())
            )
            self._inflight[key] = task
            task.add_done_callback(partial(self._settle, key))
        else:
            log.debug("inflight_join", id=file_id)
        page = await asyncio.shield(task)
        return page.copy()

    def _settle(self, key: str, task: asyncio.Future) -> None:
        """Drop the finished in-flight entry and mark its failure as retrieved."""
        self._inflight.pop(key, None)
        # waiters re-raise through shield; a cancelled waiter no longer observes the task
        if not task.cancelled():
            task.exception()

    async def _compute(
        self,
        key: str,
        file_id: str,
        code: str,
        site_config: Any,
        layout: Optional[str],
        options: ConvertOptions,
        ) -> WrappedPage:
        page = await self._build(file_id, code, site_config, layout, options)
        self.cache.set(key, page)
        return page

    async def _convert(self, file_id: str, code: str, options: ConvertOptions) -> Optional[ConvertResult]:
        """Run the converter; failures and timeouts are logged and return None."""
        try:
            if self.timeout:
                return await asyncio.wait_for(self.converter(code, file_id, options), self.timeout)
            return await self.converter(code, file_id, options)
        except asyncio.TimeoutError:
            log.warning("convert_timeout", id=file_id, timeout=self.timeout)
        except Exception:
            log.warning("convert_failed", id=file_id, exc_info=True)
        return None

    async def _lookup_last_update(self, file_id: str) -> Optional[int]:
        try:
            return await self.last_update(file_id)
        except Exception:
            log.warning("last_update_failed", id=file_id, exc_info=True)
            return None

    async def _build(
        self,
        file_id: str,
        code: str,
        site_config: Any,
        layout: Optional[str],
        options: ConvertOptions,
        ) -> WrappedPage:
        fm: dict[str, Any] = {}
        svelte_code = ""
        kind = layout_kind(file_id)
        last_update = await self._lookup_last_update(file_id)

        if kind is LayoutKind.markdown:
            result = await self._convert(file_id, code, options)
            if result is None:
                log.warning("convert_empty", id=file_id)
                result = ConvertResult(code="")
            fm = merge_md_frontmatter(result.data, last_update)
            svelte_code = result.code
        elif kind is LayoutKind.page_template:
            fm = merge_svelte_frontmatter(parse_svelte_frontmatter(code), last_update)
            svelte_code = code
        elif kind is LayoutKind.layout_template:
            svelte_code = code

        wrapped = svelte_code
        if layout:
            wrapped = wrap_svelte_code(svelte_code, fm, site_config, layout)
        log.debug("page_wrapped", id=file_id, kind=kind.value, layout=layout)
        return WrappedPage(code=wrapped, fm=fm)


_default_pipeline: Optional[PagePipeline] = None


def get_default_pipeline() -> PagePipeline:
    """Return the process-wide pipeline backed by the default cache."""
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = PagePipeline(cache=get_default_cache())
    return _default_pipeline


async def wrap_page(
    file_id: str,
    md_or_svelte_code: str,
    site_config: Any,
    layout: Optional[str] = None,
    highlighter: Optional[Highlighter] = None,
    remark_plugins: Sequence[Any] = (),
    rehype_plugins: Sequence[Callable[[str, dict], str]] = (),
    parser_config: str = "commonmark",
    pipeline: Optional[PagePipeline] = None,
    ) -> WrappedPage:
    """Convert and wrap a single document using the given (or process-wide) pipeline."""
    options = ConvertOptions(
        highlighter=highlighter,
        remark_plugins=tuple(remark_plugins),
        rehype_plugins=tuple(rehype_plugins),
        parser_config=parser_config,
    )
    pipeline = pipeline or get_default_pipeline()
    return await pipeline.wrap(file_id, md_or_svelte_code, site_config, layout, options)
