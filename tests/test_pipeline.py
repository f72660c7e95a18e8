"""End-to-end tests for :class:`DocsPipeline` against a fake content repo."""

from __future__ import annotations

import dataclasses as dc
import json
import typing as typ

import pytest

from pinchtab_docs import pipeline as pipeline_module
from pinchtab_docs._once import Once
from pinchtab_docs.errors import (
    EmptyResultError,
    InvalidPathError,
    SourceFetchError,
)
from pinchtab_docs.pipeline import DocsPipeline

if typ.TYPE_CHECKING:
    from types import SimpleNamespace

    from pinchtab_docs.config import DocsSiteConfig

    from conftest import FakeSession

ServeManifest = typ.Callable[[dict[str, object]], "FakeSession"]


@pytest.fixture
def populated(serve_manifest: ServeManifest, urls: SimpleNamespace) -> FakeSession:
    """Serve a manifest exercising sharing, fallback, and slug collisions."""
    session = serve_manifest(
        {
            "getting-started": ["README.md", "guides/setup.md"],
            "guides": [
                "./guides/setup.md",
                "a/guide/README.md",
                "b/guide/readme.md",
            ],
            "empty": [],
        }
    )
    session.add(
        f"{urls.repo}README.md", "# PinchTab\n\n![logo](assets/logo.png)\n"
    )
    session.add(f"{urls.docs}guides/setup.md", "# Setup\n\n## Install\n")
    session.add(f"{urls.docs}a/guide/README.md", "# Guide A\n")
    session.add(f"{urls.docs}b/guide/readme.md", "Untitled guide.\n")
    return session


def test_pipeline_builds_sections_in_manifest_order(
    populated: FakeSession, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    """Sections follow key order, empty sections vanish, first slug is set."""
    data = DocsPipeline(site_config, session=populated).run()

    assert data.name == "Widgets"
    assert data.branch == "main"
    assert data.docs_json_url == urls.manifest
    assert [section.id for section in data.sections] == ["getting-started", "guides"]
    assert [section.label for section in data.sections] == [
        "Getting Started",
        "Guides",
    ]
    assert data.first_slug == "home"
    assert [[item.slug for item in s.items] for s in data.sections] == [
        ["home", "setup"],
        ["setup", "guide", "guide-2"],
    ]


def test_shared_document_is_fetched_and_rendered_once(
    populated: FakeSession, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    """A path listed in two sections yields one page owned by the first."""
    data = DocsPipeline(site_config, session=populated).run()

    assert [page.slug for page in data.pages] == ["home", "setup", "guide", "guide-2"]
    assert populated.calls.count(f"{urls.docs}guides/setup.md") == 1
    setup = data.get_page("setup")
    assert setup.section_id == "getting-started"
    assert setup.section_label == "Getting Started"
    assert data.sections[1].items[0] == setup.as_item()


def test_repo_root_fallback_sets_source_url(
    populated: FakeSession, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    """A root README is found after the docs-relative candidate 404s."""
    data = DocsPipeline(site_config, session=populated).run()

    home = data.get_page("home")
    assert home.title == "PinchTab"
    assert home.source_url == f"{urls.repo}README.md"
    assert populated.calls.index(f"{urls.docs}README.md") < populated.calls.index(
        f"{urls.repo}README.md"
    )
    assert f'src="{urls.repo}assets/logo.png"' in home.html


def test_page_fields_are_populated(
    populated: FakeSession, site_config: DocsSiteConfig
) -> None:
    data = DocsPipeline(site_config, session=populated).run()

    setup = data.get_page("setup")
    assert setup.source_path == "guides/setup.md"
    assert setup.content == "# Setup\n\n## Install\n"
    assert [heading.slug for heading in setup.headings] == ["setup", "install"]
    assert 'id="install"' in setup.html
    assert data.get_page("guide-2").title == "Home"


def test_pipeline_is_idempotent(
    populated: FakeSession, site_config: DocsSiteConfig
) -> None:
    """Two runs over unchanged content produce equal results."""
    first = DocsPipeline(site_config, session=populated).run()
    second = DocsPipeline(site_config, session=populated).run()
    assert first == second


def test_traversal_is_rejected_before_any_source_fetch(
    serve_manifest: ServeManifest, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    """Path validation covers the whole manifest before fetching starts."""
    session = serve_manifest({"a": ["intro.md"], "b": ["../secrets.md"]})
    session.add(f"{urls.docs}intro.md", "# Intro\n")

    with pytest.raises(InvalidPathError, match=r"\.\."):
        DocsPipeline(site_config, session=session).run()
    assert session.calls == [urls.manifest]


def test_empty_path_is_rejected(
    serve_manifest: ServeManifest, site_config: DocsSiteConfig
) -> None:
    session = serve_manifest({"a": ["./"]})
    with pytest.raises(InvalidPathError, match="empty"):
        DocsPipeline(site_config, session=session).run()


def test_missing_source_reports_every_candidate(
    serve_manifest: ServeManifest, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    session = serve_manifest({"a": ["missing.md"]})

    with pytest.raises(SourceFetchError) as excinfo:
        DocsPipeline(site_config, session=session).run()
    message = str(excinfo.value)
    assert f"{urls.docs}missing.md -> 404 Not Found" in message
    assert f"{urls.repo}missing.md -> 404 Not Found" in message


def test_skip_list_is_case_insensitive_and_can_empty_the_result(
    serve_manifest: ServeManifest, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    """Skipping every entry leaves no pages, which is an error."""
    session = serve_manifest({"a": ["./Guides/Setup.md"]})
    config = dc.replace(site_config, skipped_docs=frozenset({"guides/setup.md"}))

    with pytest.raises(EmptyResultError, match="No documentation pages"):
        DocsPipeline(config, session=session).run()
    assert session.calls == [urls.manifest]


def test_api_reference_is_synthesized_when_not_skipped(
    serve_manifest: ServeManifest, site_config: DocsSiteConfig, urls: SimpleNamespace
) -> None:
    session = serve_manifest({"reference": "references/api-reference.json"})
    session.add(
        f"{urls.docs}references/api-reference.json",
        json.dumps(
            {
                "endpoints": [
                    {"method": "get", "path": "/health", "description": "Probe"}
                ]
            }
        ),
    )

    data = DocsPipeline(site_config, session=session).run()

    page = data.get_page("api-reference")
    assert page.title == "API Reference"
    assert page.content.startswith("# API Reference\n")
    assert "data-api-table" in page.html
    assert 'data-method-badge="green"' in page.html


def test_absolute_url_entries_are_fetched_verbatim(
    serve_manifest: ServeManifest, site_config: DocsSiteConfig
) -> None:
    """Absolute entries skip resolution; the title ignores the query string."""
    url = "https://example.com/notes/Release-Notes.md?raw=1"
    session = serve_manifest({"external": [url]})
    session.add(url, "Plain notes.\n")

    data = DocsPipeline(site_config, session=session).run()

    page = data.pages[0]
    assert page.slug == "release-notes"
    assert page.title == "Release Notes"
    assert page.source_url == url


def test_owned_session_is_closed(
    populated: FakeSession,
    site_config: DocsSiteConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Sessions built by the pipeline are closed; injected ones are not."""
    DocsPipeline(site_config, session=populated).run()
    assert not populated.closed

    monkeypatch.setattr(pipeline_module, "build_session", lambda _retries: populated)
    DocsPipeline(site_config).run()
    assert populated.closed


def test_get_docs_data_builds_once(
    populated: FakeSession,
    site_config: DocsSiteConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The process-wide accessor reuses the first build."""
    runs: list[int] = []

    def _build() -> object:
        runs.append(1)
        return DocsPipeline(site_config, session=populated).run()

    monkeypatch.setattr(pipeline_module, "_DOCS", Once(_build))

    first = pipeline_module.get_docs_data()
    assert pipeline_module.get_docs_data() is first
    assert runs == [1]
