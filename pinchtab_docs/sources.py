"""Resolve logical manifest paths to fetchable URLs.

A manifest entry such as ``guides/setup.md`` may live next to the manifest
(``docs/guides/setup.md``) or at the repository root (``README.md``). The
resolver turns each entry into an ordered, de-duplicated list of candidate URLs
produced by independent :class:`CandidateRule` objects and fetches them in
order until one succeeds.

Examples
--------
>>> bases = SourceBases(
...     docs_base_url="https://raw.example/repo/main/docs/",
...     repo_base_url="https://raw.example/repo/main/",
... )
>>> resolve_candidates(bases, "guides/my file.md")[0]
'https://raw.example/repo/main/docs/guides/my%20file.md'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from urllib.parse import quote

import requests

from .errors import FetchAttempt, InvalidPathError, SourceFetchError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

ABSOLUTE_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_LEADING_DOT_SLASH = re.compile(r"^(?:\./+)+")


def normalize_source_path(source_path: str) -> str:
    """Return ``source_path`` with separators unified and leading ``./``/``/`` removed.

    Raises
    ------
    InvalidPathError
        If the normalized path is empty or contains a ``..`` segment.

    Examples
    --------
    >>> normalize_source_path(".\\\\guides\\\\intro.md")
    'guides/intro.md'
    """
    normalized = source_path.replace("\\", "/")
    normalized = _LEADING_DOT_SLASH.sub("", normalized).lstrip("/")
    if not normalized:
        msg = "Navigation path cannot be empty"
        raise InvalidPathError(source_path, msg)
    if ".." in normalized.split("/"):
        msg = f'Navigation path cannot contain "..": {source_path}'
        raise InvalidPathError(source_path, msg)
    return normalized


def encode_path(path: str) -> str:
    """Percent-encode each path segment independently, dropping empty ones."""
    segments = (segment for segment in path.split("/") if segment)
    return "/".join(quote(segment, safe="!*'()") for segment in segments)


@dc.dataclass(frozen=True, slots=True)
class SourceBases:
    """Base URLs that relative manifest entries resolve against."""

    docs_base_url: str
    repo_base_url: str


class CandidateRule(typ.Protocol):
    """Strategy producing one candidate URL for a normalized path."""

    name: str

    def candidate(self, bases: SourceBases, path: str) -> str | None:
        """Return a candidate URL for ``path`` or ``None`` when not applicable."""
        ...


@dc.dataclass(frozen=True, slots=True)
class DocsRelativeRule:
    """Resolve against the directory holding the manifest."""

    name: str = "docs-relative"

    def candidate(self, bases: SourceBases, path: str) -> str | None:
        return f"{bases.docs_base_url}{encode_path(path)}"


@dc.dataclass(frozen=True, slots=True)
class RepoRootRule:
    """Resolve against the repository root, e.g. for a top-level README."""

    name: str = "repo-root"

    def candidate(self, bases: SourceBases, path: str) -> str | None:
        return f"{bases.repo_base_url}{encode_path(path)}"


DEFAULT_RULES: tuple[CandidateRule, ...] = (DocsRelativeRule(), RepoRootRule())


def resolve_candidates(
    bases: SourceBases,
    source_path: str,
    rules: cabc.Sequence[CandidateRule] = DEFAULT_RULES,
) -> list[str]:
    """Return the ordered, de-duplicated candidate URLs for ``source_path``.

    Absolute ``http(s)`` URLs bypass resolution and are returned verbatim as
    the sole candidate.
    """
    if ABSOLUTE_URL_PATTERN.match(source_path):
        return [source_path]
    safe_path = normalize_source_path(source_path)
    candidates: list[str] = []
    for rule in rules:
        url = rule.candidate(bases, safe_path)
        if url and url not in candidates:
            candidates.append(url)
    return candidates


@dc.dataclass(frozen=True, slots=True)
class FetchedSource:
    """Body of a resolved source document and the URL that served it."""

    source_url: str
    content: str


class SourceFetcher:
    """Fetch source documents by trying candidate URLs in order."""

    def __init__(
        self,
        session: requests.Session,
        bases: SourceBases,
        *,
        timeout: float = 30.0,
        rules: cabc.Sequence[CandidateRule] = DEFAULT_RULES,
    ) -> None:
        self.session = session
        self.bases = bases
        self.timeout = timeout
        self.rules = tuple(rules)

    def fetch(self, source_path: str) -> FetchedSource:
        """Return the first successfully fetched candidate for ``source_path``.

        Bodies are decoded as UTF-8, minus any byte-order mark, whatever charset
        the response declares.

        Raises
        ------
        InvalidPathError
            If ``source_path`` is empty or attempts traversal.
        SourceFetchError
            If every candidate failed; the error lists each attempt.
        """
        attempts: list[FetchAttempt] = []
        for url in resolve_candidates(self.bases, source_path, self.rules):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as exc:
                attempts.append(FetchAttempt(url=url, status=None, reason=str(exc)))
                logger.debug("fetch %s failed: %s", url, exc)
                continue
            logger.debug("fetch %s -> %s", url, response.status_code)
            if response.ok:
                return FetchedSource(
                    source_url=url,
                    content=response.content.decode("utf-8-sig", errors="replace"),
                )
            attempts.append(
                FetchAttempt(
                    url=url, status=response.status_code, reason=response.reason or ""
                )
            )
        raise SourceFetchError(source_path, attempts)


__all__ = [
    "DEFAULT_RULES",
    "CandidateRule",
    "DocsRelativeRule",
    "FetchedSource",
    "RepoRootRule",
    "SourceBases",
    "SourceFetcher",
    "encode_path",
    "normalize_source_path",
    "resolve_candidates",
]
