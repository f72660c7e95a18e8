"""Utility helpers shared by the docs configuration loader."""

from __future__ import annotations

import typing as typ

from pinchtab_docs._constants import RAW_CONTENT_TEMPLATE
from pinchtab_docs.sources import normalize_source_path


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_repo_url(repo: str, ref: str, path: str) -> str:
    """Build the raw GitHub URL for a file at the given ref and path."""
    normalized = path.lstrip("/")
    ref_segment = ref if ref.startswith("refs/") else f"refs/heads/{ref}"
    return RAW_CONTENT_TEMPLATE.format(repo=repo, ref=ref_segment, path=normalized)


def _normalize_skip_list(value: object) -> frozenset[str]:
    """Return skip-list entries normalized for case-insensitive matching."""
    match value:
        case str() as single:
            entries: list[object] = [single]
        case list() | tuple():
            entries = list(typ.cast("typ.Iterable[object]", value))
        case _:
            msg = "'skip' must be a string or a list of strings."
            raise TypeError(msg)
    normalized: set[str] = set()
    for entry in entries:
        if not isinstance(entry, str):
            msg = f"Skip-list entries must be strings, got {entry!r}."
            raise TypeError(msg)
        if entry.strip():
            normalized.add(normalize_source_path(entry.strip()).lower())
    return frozenset(normalized)


def _positive_number(value: object, *, field: str, default: float) -> float:
    """Return ``value`` as a non-negative float, or ``default`` when unset."""
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"'{field}' must be a number, got {value!r}."
        raise TypeError(msg)
    if value < 0:
        msg = f"'{field}' cannot be negative."
        raise ValueError(msg)
    return float(value)


__all__ = [
    "_build_repo_url",
    "_normalize_skip_list",
    "_optional_str",
    "_positive_number",
]
