"""Shared fixtures for docs ingestion tests.

HTTP is never touched: ``fake_session`` serves bodies from an in-memory route
table and records every requested URL, mirroring the parts of
``requests.Session`` the pipeline relies on.
"""

from __future__ import annotations

import dataclasses as dc
import json
import typing as typ
from http import HTTPStatus
from types import SimpleNamespace

import pytest

from pinchtab_docs.config import DocsSiteConfig

MANIFEST_URL = (
    "https://raw.githubusercontent.com/acme/widgets/refs/heads/main/docs/index.json"
)
DOCS_BASE = "https://raw.githubusercontent.com/acme/widgets/refs/heads/main/docs/"
REPO_BASE = "https://raw.githubusercontent.com/acme/widgets/refs/heads/main/"


@dc.dataclass
class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    status_code: int
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code < HTTPStatus.BAD_REQUEST

    @property
    def reason(self) -> str:
        return HTTPStatus(self.status_code).phrase

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")


@dc.dataclass
class FakeSession:
    """Serve canned responses keyed by URL; unknown URLs return 404."""

    routes: dict[str, FakeResponse | Exception] = dc.field(default_factory=dict)
    calls: list[str] = dc.field(default_factory=list)
    closed: bool = False

    def add(self, url: str, body: str | object, status: int = 200) -> None:
        text = body if isinstance(body, str) else json.dumps(body)
        self.routes[url] = FakeResponse(status, text)

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:  # noqa: ARG002
        self.calls.append(url)
        route = self.routes.get(url, FakeResponse(404))
        if isinstance(route, Exception):
            raise route
        return route

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> FakeSession:
    """Return an empty fake session."""
    return FakeSession()


@pytest.fixture
def site_config() -> DocsSiteConfig:
    """Return a config pointing at a fixture repository with an empty skip-list."""
    return DocsSiteConfig(
        name="Widgets", repo="acme/widgets", branch="main", skipped_docs=frozenset()
    )


@pytest.fixture
def serve_manifest(
    fake_session: FakeSession,
) -> typ.Callable[[dict[str, object]], FakeSession]:
    """Return a helper registering ``manifest`` at the fixture manifest URL."""

    def _serve(manifest: dict[str, object]) -> FakeSession:
        fake_session.add(MANIFEST_URL, manifest)
        return fake_session

    return _serve


@pytest.fixture
def urls() -> SimpleNamespace:
    """Return the manifest, docs-relative, and repo-root URLs of the fixture repo."""
    return SimpleNamespace(manifest=MANIFEST_URL, docs=DOCS_BASE, repo=REPO_BASE)
