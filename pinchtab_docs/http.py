"""Shared ``requests`` session factory for remote docs fetches."""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

USER_AGENT = "pinchtab-docs/0.1"


def build_session(retries: int = 0) -> requests.Session:
    """Return a session that can retry transient 5xx responses.

    Parameters
    ----------
    retries : int, optional
        Maximum retry count per request. ``0``, the default, disables
        retries so a failed fetch surfaces immediately.

    Returns
    -------
    requests.Session
        Session with retrying adapters mounted for ``http://`` and
        ``https://``. Exhausted retries hand back the final response instead of
        raising, so callers still judge the status themselves.
    """
    session = requests.Session()
    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers["User-Agent"] = USER_AGENT
    return session


__all__ = ["USER_AGENT", "build_session"]
