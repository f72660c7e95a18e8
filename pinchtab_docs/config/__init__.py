"""Load and validate the docs ingestion configuration.

This subpackage parses ``config/docs.yaml``, applies defaults that point at the
PinchTab content repository, and produces a frozen :class:`DocsSiteConfig` that
the pipeline consumes. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pinchtab_docs.config import DocsSiteConfig
>>> DocsSiteConfig().docs_json_url
'https://raw.githubusercontent.com/pinchtab/pinchtab/refs/heads/main/docs/index.json'
"""

from .loader import load_site_config
from .models import DocsSiteConfig, HttpConfig, SiteConfigError

__all__ = ["DocsSiteConfig", "HttpConfig", "SiteConfigError", "load_site_config"]
