"""Turn fetched source text into canonical Markdown."""

from __future__ import annotations

from ._constants import API_REFERENCE_PATH
from .api_reference import build_api_reference_markdown
from .sources import normalize_source_path


def is_api_reference(source_path: str, suffix: str = API_REFERENCE_PATH) -> bool:
    """Return whether ``source_path`` names the API-reference JSON document."""
    return normalize_source_path(source_path).lower().endswith(suffix.lower())


def normalize_content(
    source_path: str, raw_text: str, *, api_reference_path: str = API_REFERENCE_PATH
) -> str:
    """Return Markdown for a fetched document.

    Markdown sources pass through unchanged; the API-reference document is
    synthesized from its JSON endpoints instead.
    """
    if is_api_reference(source_path, api_reference_path):
        return build_api_reference_markdown(raw_text, normalize_source_path(source_path))
    return raw_text


__all__ = ["is_api_reference", "normalize_content"]
