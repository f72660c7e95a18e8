"""Build-time docs ingestion: manifest to rendered, navigable pages.

The pipeline walks the manifest in order and fetches each source document
sequentially. Later entries may already be satisfied by pages built for
earlier sections, so fetches are never parallelised. It normalizes the
content, renders Markdown, post-processes the HTML, and registers the page
under a unique slug. Any failure aborts the run; there is no partial result.

Example
-------
>>> from pinchtab_docs.pipeline import get_docs_data
>>> data = get_docs_data()  # doctest: +SKIP
>>> data.first_slug  # doctest: +SKIP
'home'
"""

from __future__ import annotations

import logging
import typing as typ

from ._once import Once
from .config import DocsSiteConfig
from .content import normalize_content
from .errors import EmptyResultError
from .http import build_session
from .manifest import DocsManifest, fetch_docs_config
from .models import DocsData, DocsManifestItem, DocsPage
from .postprocess import HtmlPostProcessor
from .registry import PageRegistry, section_label
from .renderer import get_markdown_renderer, title_from_markdown
from .sources import ABSOLUTE_URL_PATTERN, SourceFetcher, normalize_source_path

if typ.TYPE_CHECKING:
    import requests

    from .renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


class DocsPipeline:
    """Run one ingestion pass for a :class:`DocsSiteConfig`."""

    def __init__(
        self,
        config: DocsSiteConfig | None = None,
        *,
        session: requests.Session | None = None,
        renderer: MarkdownRenderer | None = None,
        post_processor: HtmlPostProcessor | None = None,
    ) -> None:
        """Initialize the pipeline.

        Parameters
        ----------
        config : DocsSiteConfig, optional
            Manifest location, skip-list, and transport settings. Defaults to
            the PinchTab content repository.
        session : requests.Session, optional
            Session used for every fetch. When omitted, the pipeline builds a
            session from ``config.http`` and closes it after the run; an
            injected session is left open for the caller.
        renderer : MarkdownRenderer, optional
            Markdown renderer; defaults to the shared process-wide instance.
        post_processor : HtmlPostProcessor, optional
            HTML pass chain; defaults to code blocks, tables, then images.
        """
        self.config = config or DocsSiteConfig()
        self._session = session
        self.renderer = renderer
        self.post_processor = post_processor or HtmlPostProcessor()

    def run(self) -> DocsData:
        """Fetch, render, and assemble the documentation set.

        Returns
        -------
        DocsData
            Sections in manifest order, de-duplicated pages, and the first slug.

        Raises
        ------
        ConfigFetchError, ConfigSchemaError
            If the manifest cannot be loaded or validated.
        InvalidPathError
            If any manifest entry is empty or escapes via ``..``; raised before
            any source document is requested.
        SourceFetchError
            If a source document cannot be fetched from any candidate URL.
        MalformedReferenceError
            If the API-reference document is unusable.
        EmptyResultError
            If no page was produced.
        """
        owns_session = self._session is None
        session = self._session or build_session(self.config.http.retries)
        try:
            manifest = fetch_docs_config(self.config, session)
            return self._assemble(manifest, session)
        finally:
            if owns_session:
                session.close()

    def _plan(self, manifest: DocsManifest) -> list[tuple[str, list[str]]]:
        """Validate every entry up front and drop skip-listed paths."""
        plan: list[tuple[str, list[str]]] = []
        for section_id, raw_paths in manifest.entries():
            paths: list[str] = []
            for raw_path in raw_paths:
                source_path = normalize_source_path(raw_path)
                if self._is_skipped(source_path):
                    logger.debug("skipping %s", source_path)
                    continue
                paths.append(source_path)
            plan.append((section_id, paths))
        return plan

    def _is_skipped(self, source_path: str) -> bool:
        return source_path.lower() in self.config.skipped_docs

    def _assemble(self, manifest: DocsManifest, session: requests.Session) -> DocsData:
        plan = self._plan(manifest)
        fetcher = SourceFetcher(session, manifest.bases, timeout=self.config.http.timeout)
        renderer = self.renderer or get_markdown_renderer()
        registry = PageRegistry()

        for section_id, source_paths in plan:
            items: list[DocsManifestItem] = []
            for source_path in source_paths:
                page = registry.get(source_path)
                if page is None:
                    page = registry.register(
                        self._build_page(
                            section_id, source_path, fetcher, renderer, registry
                        )
                    )
                items.append(page.as_item())
            registry.add_section(section_id, items)

        pages = registry.pages
        if not pages:
            raise EmptyResultError(manifest.docs_json_url)
        logger.info(
            "built %d docs pages across %d sections",
            len(pages),
            len(registry.sections),
        )
        return DocsData(
            name=self.config.name,
            branch=manifest.branch,
            docs_json_url=manifest.docs_json_url,
            sections=registry.sections,
            pages=pages,
            first_slug=registry.first_slug,
        )

    def _build_page(
        self,
        section_id: str,
        source_path: str,
        fetcher: SourceFetcher,
        renderer: MarkdownRenderer,
        registry: PageRegistry,
    ) -> DocsPage:
        fetched = fetcher.fetch(source_path)
        content = normalize_content(
            source_path,
            fetched.content,
            api_reference_path=self.config.api_reference_path,
        )
        rendered = renderer.render(content)
        title_path = source_path
        if ABSOLUTE_URL_PATTERN.match(source_path):
            title_path = source_path.split("?", 1)[0].split("#", 1)[0]
        page = DocsPage(
            slug=registry.allocate_slug(source_path),
            title=title_from_markdown(content, title_path),
            source_path=source_path,
            section_id=section_id,
            section_label=section_label(section_id),
            content=content,
            html=self.post_processor.process(rendered.html, fetched.source_url),
            headings=rendered.headings,
            source_url=fetched.source_url,
        )
        logger.info("built docs page %s from %s", page.slug, page.source_url)
        return page


_DOCS: Once[DocsData] = Once(lambda: DocsPipeline().run())


def get_docs_data() -> DocsData:
    """Return the process-wide documentation set, building it on first use.

    Concurrent callers share the single in-flight build. A failed build is
    remembered and re-raised to every later caller; a new process is needed to
    retry or to pick up upstream content changes.
    """
    return _DOCS.get()


__all__ = ["DocsPipeline", "get_docs_data"]
