"""Typed dataclasses describing docs ingestion configuration."""

from __future__ import annotations

import dataclasses as dc

from pinchtab_docs._constants import (
    API_REFERENCE_PATH,
    DEFAULT_BRANCH,
    DEFAULT_MANIFEST_PATH,
    DEFAULT_REPO,
    DEFAULT_SITE_NAME,
    DEFAULT_SKIPPED_DOCS,
)

from .helpers import _build_repo_url


class SiteConfigError(ValueError):
    """Raised when the docs configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class HttpConfig:
    """Transport settings shared by every remote fetch."""

    timeout: float = 30.0
    retries: int = 0


@dc.dataclass(frozen=True, slots=True)
class DocsSiteConfig:
    """Where the docs manifest lives and how its entries are treated.

    Attributes
    ----------
    name : str
        Product name reported in the resulting ``DocsData``.
    repo : str
        Content repository in ``owner/name`` form.
    branch : str
        Branch the manifest and sources are read from.
    manifest_path : str
        Repository-relative location of the manifest.
    manifest_url : str | None
        Explicit manifest URL; overrides ``repo``/``branch``/``manifest_path``.
    skipped_docs : frozenset[str]
        Normalized, lowercase source paths excluded from the manifest walk.
    api_reference_path : str
        Filename suffix identifying the API-reference JSON document.
    http : HttpConfig
        Timeout and retry settings.
    """

    name: str = DEFAULT_SITE_NAME
    repo: str = DEFAULT_REPO
    branch: str = DEFAULT_BRANCH
    manifest_path: str = DEFAULT_MANIFEST_PATH
    manifest_url: str | None = None
    skipped_docs: frozenset[str] = frozenset(DEFAULT_SKIPPED_DOCS)
    api_reference_path: str = API_REFERENCE_PATH
    http: HttpConfig = dc.field(default_factory=HttpConfig)

    @property
    def docs_json_url(self) -> str:
        """Return the effective manifest URL."""
        if self.manifest_url:
            return self.manifest_url
        return _build_repo_url(self.repo, self.branch, self.manifest_path)


__all__ = ["DocsSiteConfig", "HttpConfig", "SiteConfigError"]
