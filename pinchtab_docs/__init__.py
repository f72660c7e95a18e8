"""Build-time ingestion of the PinchTab documentation.

This package fetches the docs manifest and its Markdown/JSON sources from the
content repository, renders them to styled HTML with stable navigation, and
exposes the result as :class:`~pinchtab_docs.models.DocsData`.

Exports
-------
- ``get_docs_data``: Process-wide, lazily built documentation set.
- ``DocsPipeline``: Un-memoized pipeline for explicit configuration.
- ``app`` / ``main``: Cyclopts CLI entry points.

Examples
--------
>>> from pinchtab_docs import get_docs_data
>>> data = get_docs_data()  # doctest: +SKIP
>>> [section.label for section in data.sections]  # doctest: +SKIP
['Getting Started', 'Guides']
"""

from __future__ import annotations

from .cli import app, main
from .models import DocsData, DocsManifestItem, DocsManifestSection, DocsPage
from .pipeline import DocsPipeline, get_docs_data

__all__ = [
    "DocsData",
    "DocsManifestItem",
    "DocsManifestSection",
    "DocsPage",
    "DocsPipeline",
    "app",
    "get_docs_data",
    "main",
]
