"""Named HTML transforms applied to rendered documentation pages.

Passes run in a fixed order: ``code-blocks``, ``tables``, then ``images``.
Each pass scans the whole document and replaces matched blocks with styled
markup rendered from the package's Jinja templates.

Example
-------
>>> processor = HtmlPostProcessor()
>>> [step.name for step in processor.passes]
['code-blocks', 'tables', 'images']
"""

from __future__ import annotations

import typing as typ

from .base import HtmlPass, PostProcessContext
from .code_blocks import CodeBlockKind, CodeBlockPass, classify_code_block
from .images import ImagePass
from .tables import TablePass

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_PASSES: tuple[HtmlPass, ...] = (CodeBlockPass(), TablePass(), ImagePass())


class HtmlPostProcessor:
    """Apply a sequence of :class:`HtmlPass` transforms in order."""

    def __init__(self, passes: cabc.Sequence[HtmlPass] = DEFAULT_PASSES) -> None:
        self.passes = tuple(passes)

    def process(self, html_text: str, source_url: str) -> str:
        """Return ``html_text`` after every pass has run."""
        context = PostProcessContext(source_url=source_url)
        for step in self.passes:
            html_text = step.apply(html_text, context)
        return html_text


__all__ = [
    "DEFAULT_PASSES",
    "CodeBlockKind",
    "CodeBlockPass",
    "HtmlPass",
    "HtmlPostProcessor",
    "ImagePass",
    "PostProcessContext",
    "TablePass",
    "classify_code_block",
]
