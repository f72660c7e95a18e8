"""Slug derivation and page bookkeeping for a docs ingestion run.

The registry keeps one :class:`~pinchtab_docs.models.DocsPage` per normalized
source path, so a document referenced from several sections is fetched and
rendered once and shared by reference. Slugs are unique across the whole page
set; collisions get ``-2``, ``-3``, ... in first-encountered order.

Examples
--------
>>> seen: set[str] = set()
>>> paths = ("a/guide/README.md", "b/guide/readme.md")
>>> [make_unique_slug(slug_from_path(p), seen) for p in paths]
['guide', 'guide-2']
"""

from __future__ import annotations

import re
import typing as typ

from .models import DocsManifestItem, DocsManifestSection

if typ.TYPE_CHECKING:
    from .models import DocsPage

_NON_SLUG = re.compile(r"[^a-z0-9]+")
_SEPARATORS = re.compile(r"[-_]+")
_EXTENSION = re.compile(r"\.[^.]+$")


def slugify(value: str) -> str:
    """Lowercase ``value`` and collapse non-alphanumeric runs into hyphens."""
    return _NON_SLUG.sub("-", value.lower()).strip("-")


def title_case(text: str) -> str:
    """Uppercase the first letter of each whitespace-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


def section_label(section_id: str) -> str:
    """Return a display label for a manifest section identifier.

    Examples
    --------
    >>> section_label("getting-started")
    'Getting Started'
    >>> section_label("api_reference")
    'Api Reference'
    """
    return title_case(_SEPARATORS.sub(" ", section_id).strip())


def slug_from_path(source_path: str) -> str:
    """Derive a base slug from the filename, falling back to the parent folder.

    ``readme`` files and names without slug characters take the parent
    directory's name, or ``home`` when there is no parent.
    """
    normalized = re.sub(r"^(?:\./+)+", "", source_path.replace("\\", "/")).lstrip("/")
    parts = [part for part in normalized.split("/") if part]
    filename = normalized.rsplit("/", 1)[-1]
    base = slugify(_EXTENSION.sub("", filename))
    if base and base != "readme":
        return base
    if len(parts) <= 1:
        return "home"
    return slugify(parts[-2]) or "home"


def make_unique_slug(base_slug: str, seen: set[str]) -> str:
    """Return ``base_slug`` or the first free ``base_slug-N`` and record it."""
    candidate = base_slug
    suffix = 2
    while candidate in seen:
        candidate = f"{base_slug}-{suffix}"
        suffix += 1
    seen.add(candidate)
    return candidate


class PageRegistry:
    """Collect pages and sections in manifest order."""

    def __init__(self) -> None:
        self._pages: dict[str, DocsPage] = {}
        self._slugs: set[str] = set()
        self.sections: list[DocsManifestSection] = []

    def get(self, source_path: str) -> DocsPage | None:
        """Return the page already built for ``source_path``, if any."""
        return self._pages.get(source_path)

    def allocate_slug(self, source_path: str) -> str:
        """Reserve and return a unique slug for a new page."""
        return make_unique_slug(slug_from_path(source_path), self._slugs)

    def register(self, page: DocsPage) -> DocsPage:
        """Store ``page`` under its source path and return it."""
        self._pages[page.source_path] = page
        return page

    def add_section(
        self, section_id: str, items: list[DocsManifestItem]
    ) -> DocsManifestSection | None:
        """Append a section unless it resolved to zero items."""
        if not items:
            return None
        section = DocsManifestSection(
            id=section_id, label=section_label(section_id), items=list(items)
        )
        self.sections.append(section)
        return section

    @property
    def pages(self) -> list[DocsPage]:
        """Return every registered page in first-encountered order."""
        return list(self._pages.values())

    @property
    def first_slug(self) -> str | None:
        """Return the slug of the first item of the first section."""
        for section in self.sections:
            if section.items:
                return section.items[0].slug
        return None


__all__ = [
    "PageRegistry",
    "make_unique_slug",
    "section_label",
    "slug_from_path",
    "slugify",
    "title_case",
]
