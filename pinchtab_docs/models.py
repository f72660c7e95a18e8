"""Dataclasses describing the resolved, render-ready documentation set."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(frozen=True, slots=True)
class DocsManifestItem:
    """Navigation reference to a page without its rendered content."""

    slug: str
    title: str
    source_path: str


@dc.dataclass(slots=True)
class DocsManifestSection:
    """Named group of navigation items, ordered as in the manifest.

    Attributes
    ----------
    id : str
        Section identifier taken verbatim from the manifest key.
    label : str
        Human-readable label derived from ``id``.
    items : list[DocsManifestItem]
        Pages listed in this section, in manifest order.
    """

    id: str
    label: str
    items: list[DocsManifestItem] = dc.field(default_factory=list)


@dc.dataclass(frozen=True, slots=True)
class DocsPageHeading:
    """Single entry of a page's heading outline."""

    depth: int
    slug: str
    text: str


@dc.dataclass(slots=True)
class DocsPage:
    """Fully rendered documentation page.

    Attributes
    ----------
    slug : str
        Unique identifier across the whole page set.
    title : str
        Title taken from the first level-one heading or the filename.
    source_path : str
        Normalized manifest path the page was loaded from.
    section_id : str
        Identifier of the first section that referenced the page.
    section_label : str
        Display label for ``section_id``.
    content : str
        Normalized Markdown source.
    html : str
        Rendered and post-processed HTML.
    headings : list[DocsPageHeading]
        Heading outline in document order.
    source_url : str
        Absolute URL the content was fetched from; relative assets resolve
        against it.
    """

    slug: str
    title: str
    source_path: str
    section_id: str
    section_label: str
    content: str
    html: str
    headings: list[DocsPageHeading]
    source_url: str

    def as_item(self) -> DocsManifestItem:
        """Return the lightweight navigation reference for this page."""
        return DocsManifestItem(
            slug=self.slug, title=self.title, source_path=self.source_path
        )


@dc.dataclass(slots=True)
class DocsData:
    """Result of one ingestion run, consumed by the page-rendering layer."""

    name: str
    branch: str
    docs_json_url: str
    sections: list[DocsManifestSection]
    pages: list[DocsPage]
    first_slug: str | None

    def get_page(self, slug: str) -> DocsPage:
        """Return the page registered under ``slug``.

        Raises
        ------
        KeyError
            If no page carries ``slug``.
        """
        for page in self.pages:
            if page.slug == slug:
                return page
        msg = f"Unknown docs page '{slug}'."
        raise KeyError(msg)


__all__ = [
    "DocsData",
    "DocsManifestItem",
    "DocsManifestSection",
    "DocsPage",
    "DocsPageHeading",
]
