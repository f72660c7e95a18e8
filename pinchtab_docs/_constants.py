"""Common literal values used across pinchtab_docs.

These constants keep remote locations, filenames, and skip-list defaults
centralized so the config loader, pipeline, and tests import the same values
without drifting. Intended for internal use within the pinchtab_docs package.

Examples
--------
>>> from pinchtab_docs import _constants
>>> _constants.RAW_CONTENT_TEMPLATE.format(
...     repo="pinchtab/pinchtab", ref="refs/heads/main", path="docs/index.json"
... )
'https://raw.githubusercontent.com/pinchtab/pinchtab/refs/heads/main/docs/index.json'
"""

RAW_CONTENT_TEMPLATE = "https://raw.githubusercontent.com/{repo}/{ref}/{path}"
DEFAULT_SITE_NAME = "PinchTab"
DEFAULT_REPO = "pinchtab/pinchtab"
DEFAULT_BRANCH = "main"
DEFAULT_MANIFEST_PATH = "docs/index.json"
API_REFERENCE_PATH = "references/api-reference.json"
DEFAULT_SKIPPED_DOCS: tuple[str, ...] = (API_REFERENCE_PATH,)
DEFAULT_OUTPUT = "public/docs-data.json"
