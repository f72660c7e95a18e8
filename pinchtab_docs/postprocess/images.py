"""Resolve relative ``<img src>`` values against a page's source URL."""

from __future__ import annotations

import re
from urllib.parse import urljoin

from .base import PostProcessContext

IMG_TAG_PATTERN = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
SRC_PATTERN = re.compile(r"""\bsrc=(["'])([^"']+)\1""", re.IGNORECASE)
_SCHEME_OR_PROTOCOL_RELATIVE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)


def should_resolve(url: str) -> bool:
    """Return whether ``url`` is relative to the document it appears in."""
    normalized = url.strip()
    if not normalized or normalized.startswith(("/", "#")):
        return False
    return _SCHEME_OR_PROTOCOL_RELATIVE.match(normalized) is None


def resolve_asset_url(url: str, source_url: str) -> str:
    """Return ``url`` joined onto ``source_url``; unresolvable input is kept.

    Examples
    --------
    >>> resolve_asset_url("img/a.png", "https://raw.example/docs/guide.md")
    'https://raw.example/docs/img/a.png'
    >>> resolve_asset_url("/logo.png", "https://raw.example/docs/guide.md")
    '/logo.png'
    """
    if not should_resolve(url):
        return url
    try:
        return urljoin(source_url, url.strip())
    except ValueError:
        return url


class ImagePass:
    """Rewrite relative image sources to absolute URLs."""

    name = "images"

    def apply(self, html_text: str, context: PostProcessContext) -> str:
        """Resolve every relative ``<img src>`` against ``context.source_url``."""

        def _replace(tag_match: re.Match[str]) -> str:
            tag = tag_match.group(0)
            src_match = SRC_PATTERN.search(tag)
            if not src_match:
                return tag
            original = src_match.group(2)
            resolved = resolve_asset_url(original, context.source_url)
            if resolved == original:
                return tag
            safe = resolved.replace('"', "&quot;")
            start, end = src_match.span()
            return f'{tag[:start]}src="{safe}"{tag[end:]}'

        return IMG_TAG_PATTERN.sub(_replace, html_text)


__all__ = ["ImagePass", "resolve_asset_url", "should_resolve"]
