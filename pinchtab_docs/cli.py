"""Cyclopts CLI entrypoint for building the PinchTab docs data artifact.

The ``docs`` console script runs the ingestion pipeline once and writes the
resulting :class:`~pinchtab_docs.models.DocsData` as JSON for the site's page
layer. Any ingestion error propagates, so the process exits non-zero and the
site build fails rather than shipping partial docs.

Examples
--------
Build the artifact with the default configuration:

>>> from pinchtab_docs.cli import main
>>> main()  # doctest: +SKIP

Write to a custom location with verbose logging:

>>> from pinchtab_docs.cli import app
>>> app(["build", "--output", "dist/docs.json", "--verbose"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import re
import typing as typ
from pathlib import Path

import cyclopts
import msgspec
from cyclopts import App, Parameter

from ._constants import DEFAULT_OUTPUT
from .config import DocsSiteConfig, load_site_config
from .pipeline import DocsPipeline

if typ.TYPE_CHECKING:
    from .models import DocsData

DEFAULT_CONFIG = Path("config/docs.yaml")

app = App(name="docs", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

_CAMEL_BOUNDARY = re.compile(r"_([a-z])")


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config: Path) -> DocsSiteConfig:
    """Load ``config`` when present, otherwise fall back to built-in defaults."""
    if config.exists():
        return load_site_config(config)
    logging.getLogger(__name__).info("%s not found; using defaults", config)
    return DocsSiteConfig()


def _camelize(value: object) -> object:
    """Rename snake_case mapping keys to camelCase, recursively."""
    if isinstance(value, dict):
        return {
            _CAMEL_BOUNDARY.sub(lambda m: m.group(1).upper(), str(key)): _camelize(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_camelize(item) for item in value]
    return value


def encode_docs_data(data: DocsData) -> bytes:
    """Serialize ``data`` to indented JSON with camelCase keys."""
    payload = msgspec.json.encode(_camelize(msgspec.to_builtins(data)))
    return msgspec.json.format(payload, indent=2)


@app.command(help="Fetch, render, and write the docs data artifact.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to docs config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path, Parameter(help="Where to write the JSON artifact", env_var="INPUT_OUTPUT")
    ] = Path(DEFAULT_OUTPUT),
    verbose: bool = False,
) -> None:
    """Run the ingestion pipeline and write the ``DocsData`` JSON artifact.

    Parameters
    ----------
    config : Path, optional
        Path to ``docs.yaml``; built-in defaults apply when the file is absent.
    output : Path, optional
        Destination of the JSON artifact (default ``public/docs-data.json``).
    verbose : bool, optional
        Log each fetch attempt at DEBUG level.

    Raises
    ------
    DocsError
        Propagated from the pipeline on any fetch, validation, or render failure.
    """
    _configure_logging(verbose=verbose)
    data = DocsPipeline(_load_config(config)).run()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(encode_docs_data(data))
    print(f"wrote {_format_path(output)}")


@app.command(help="List manifest sections and the pages they resolve to.")
def sections(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to docs config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: bool = False,
) -> None:
    """Print each section label followed by its page slugs and titles."""
    _configure_logging(verbose=verbose)
    data = DocsPipeline(_load_config(config)).run()
    for section in data.sections:
        print(section.label)
        for item in section.items:
            print(f"  {item.slug}: {item.title}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docs`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
