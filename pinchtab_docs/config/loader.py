"""Load docs ingestion configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from pinchtab_docs._constants import (
    API_REFERENCE_PATH,
    DEFAULT_BRANCH,
    DEFAULT_MANIFEST_PATH,
    DEFAULT_REPO,
    DEFAULT_SITE_NAME,
    DEFAULT_SKIPPED_DOCS,
)

from .helpers import _normalize_skip_list, _optional_str, _positive_number
from .models import DocsSiteConfig, HttpConfig, SiteConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_site_config(path: Path) -> DocsSiteConfig:
    """Load the YAML configuration describing where docs content lives.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/docs.yaml``).

    Returns
    -------
    DocsSiteConfig
        Parsed configuration with defaults applied for omitted keys.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If a field has the wrong type or an invalid value.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_site_config(Path("config/docs.yaml"))  # doctest: +SKIP
    >>> config.docs_json_url  # doctest: +SKIP
    'https://raw.githubusercontent.com/pinchtab/pinchtab/refs/heads/main/docs/index.json'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    docs_raw = _section(raw, "docs")
    http_raw = _section(raw, "http")

    try:
        skipped = (
            _normalize_skip_list(docs_raw["skip"])
            if "skip" in docs_raw
            else frozenset(DEFAULT_SKIPPED_DOCS)
        )
        http = HttpConfig(
            timeout=_positive_number(
                http_raw.get("timeout"), field="http.timeout", default=30.0
            ),
            retries=int(
                _positive_number(http_raw.get("retries"), field="http.retries", default=0)
            ),
        )
    except (TypeError, ValueError) as exc:
        raise SiteConfigError(str(exc)) from exc

    repo = _optional_str(docs_raw.get("repo")) or DEFAULT_REPO
    if "/" not in repo:
        msg = f"'docs.repo' must use the owner/name form, got {repo!r}."
        raise SiteConfigError(msg)

    return DocsSiteConfig(
        name=_optional_str(docs_raw.get("name")) or DEFAULT_SITE_NAME,
        repo=repo,
        branch=_optional_str(docs_raw.get("branch")) or DEFAULT_BRANCH,
        manifest_path=_optional_str(docs_raw.get("manifest_path"))
        or DEFAULT_MANIFEST_PATH,
        manifest_url=_optional_str(docs_raw.get("manifest_url")),
        skipped_docs=skipped,
        api_reference_path=_optional_str(docs_raw.get("api_reference_path"))
        or API_REFERENCE_PATH,
        http=http,
    )


def _section(raw: typ.Mapping[str, typ.Any], key: str) -> dict[str, typ.Any]:
    """Return the mapping stored under ``key`` or an empty dict when absent."""
    value = raw.get(key)
    match value:
        case None:
            return {}
        case dict():
            return dict(value)
        case _:
            msg = f"'{key}' must be a mapping."
            raise SiteConfigError(msg)


__all__ = ["load_site_config"]
