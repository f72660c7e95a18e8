"""Fetch and validate the remote docs manifest (``docs/index.json``).

The manifest maps section identifiers to one or more source paths. Key order
defines section order and list order defines page order inside a section.

Example
-------
>>> from pinchtab_docs.config import DocsSiteConfig
>>> from pinchtab_docs.http import build_session
>>> manifest = fetch_docs_config(DocsSiteConfig(), build_session())  # doctest: +SKIP
>>> list(manifest.entries())[0]  # doctest: +SKIP
('getting-started', ['README.md', 'guides/install.md'])
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

import msgspec
import requests

from .errors import ConfigFetchError, ConfigSchemaError
from .sources import SourceBases

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import DocsSiteConfig

logger = logging.getLogger(__name__)

DocsConfig = dict[str, str | list[str]]


@dc.dataclass(frozen=True, slots=True)
class DocsManifest:
    """Validated manifest plus the base URLs its entries resolve against.

    Attributes
    ----------
    config : DocsConfig
        Raw section-to-paths mapping in document order.
    branch : str
        Branch the manifest was read from.
    docs_json_url : str
        URL the manifest was fetched from.
    bases : SourceBases
        Manifest-relative and repository-root base URLs.
    """

    config: DocsConfig
    branch: str
    docs_json_url: str
    bases: SourceBases

    def entries(self) -> cabc.Iterator[tuple[str, list[str]]]:
        """Yield ``(section_id, source_paths)`` pairs in manifest order."""
        for section_id, value in self.config.items():
            yield section_id, [value] if isinstance(value, str) else list(value)


def docs_base_url(docs_json_url: str) -> str:
    """Return the directory URL containing the manifest, with a trailing slash."""
    head, sep, _tail = docs_json_url.rpartition("/")
    return f"{head}{sep}" if sep else docs_json_url


def repo_base_url(docs_json_url: str, manifest_path: str) -> str:
    """Return the repository root URL by stripping ``manifest_path`` from the URL.

    Falls back to :func:`docs_base_url` when the URL does not end with the
    manifest's repository-relative path.

    Examples
    --------
    >>> repo_base_url("https://raw.example/o/r/main/docs/index.json", "docs/index.json")
    'https://raw.example/o/r/main/'
    """
    suffix = "/" + manifest_path.strip("/")
    if docs_json_url.endswith(suffix):
        return docs_json_url[: -len(suffix)] + "/"
    return docs_base_url(docs_json_url)


def parse_docs_config(payload: bytes | str, url: str) -> DocsConfig:
    """Decode and validate a manifest body.

    Raises
    ------
    ConfigSchemaError
        If the body is not JSON, or not an object whose values are strings or
        lists of strings.
    """
    try:
        return msgspec.json.decode(payload, type=DocsConfig)
    except msgspec.DecodeError as exc:
        raise ConfigSchemaError(url, str(exc)) from exc


def fetch_docs_config(
    config: DocsSiteConfig, session: requests.Session
) -> DocsManifest:
    """Download the manifest described by ``config``.

    Parameters
    ----------
    config : DocsSiteConfig
        Site configuration naming the manifest location.
    session : requests.Session
        Session used for the request.

    Returns
    -------
    DocsManifest
        Validated manifest and derived base URLs.

    Raises
    ------
    ConfigFetchError
        If the request fails or returns a non-success status.
    ConfigSchemaError
        If the manifest fails shape validation.
    """
    url = config.docs_json_url
    try:
        response = session.get(url, timeout=config.http.timeout)
    except requests.RequestException as exc:
        raise ConfigFetchError(url, None, str(exc)) from exc
    if not response.ok:
        raise ConfigFetchError(url, response.status_code, response.reason or "")

    parsed = parse_docs_config(response.content, url)
    logger.info("loaded docs manifest %s (%d sections)", url, len(parsed))
    return DocsManifest(
        config=parsed,
        branch=config.branch,
        docs_json_url=url,
        bases=SourceBases(
            docs_base_url=docs_base_url(url),
            repo_base_url=repo_base_url(url, config.manifest_path),
        ),
    )


__all__ = [
    "DocsConfig",
    "DocsManifest",
    "docs_base_url",
    "fetch_docs_config",
    "parse_docs_config",
    "repo_base_url",
]
