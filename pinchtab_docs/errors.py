"""Exceptions raised by the docs ingestion pipeline.

Every failure is fatal to a pipeline run: the errors below propagate out of
:meth:`~pinchtab_docs.pipeline.DocsPipeline.run` so the surrounding build fails
instead of publishing partial documentation.
"""

from __future__ import annotations

import dataclasses as dc


class DocsError(RuntimeError):
    """Base class for docs ingestion failures."""


class ConfigFetchError(DocsError):
    """Raised when the remote manifest cannot be downloaded."""

    def __init__(self, url: str, status: int | None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"{status} {reason}".strip() if status is not None else reason
        super().__init__(f"Failed to fetch {url} ({detail})")


class ConfigSchemaError(DocsError):
    """Raised when the manifest is not a mapping of strings or string lists."""

    def __init__(self, url: str, detail: str = "") -> None:
        self.url = url
        msg = f"Invalid index.json schema at {url}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class InvalidPathError(DocsError, ValueError):
    """Raised for empty source paths or paths containing ``..`` segments."""

    def __init__(self, source_path: str, msg: str) -> None:
        self.source_path = source_path
        super().__init__(msg)


@dc.dataclass(frozen=True, slots=True)
class FetchAttempt:
    """Outcome of requesting a single candidate URL.

    Attributes
    ----------
    url : str
        Candidate URL that was requested.
    status : int | None
        HTTP status code, or ``None`` when the transport itself failed.
    reason : str
        HTTP reason phrase or the transport error message.
    """

    url: str
    status: int | None
    reason: str = ""

    def describe(self) -> str:
        """Return a ``url -> status reason`` line for diagnostics."""
        if self.status is None:
            return f"{self.url} -> {self.reason}"
        return f"{self.url} -> {self.status} {self.reason}".rstrip()


class SourceFetchError(DocsError):
    """Raised when every resolution candidate for a source path failed."""

    def __init__(self, source_path: str, attempts: list[FetchAttempt]) -> None:
        self.source_path = source_path
        self.attempts = list(attempts)
        lines = "\n".join(attempt.describe() for attempt in self.attempts)
        super().__init__(f'Failed to fetch "{source_path}". Attempts:\n{lines}')


class MalformedReferenceError(DocsError):
    """Raised when an API-reference document is not usable JSON."""

    def __init__(self, source_path: str, msg: str) -> None:
        self.source_path = source_path
        super().__init__(msg)


class EmptyResultError(DocsError):
    """Raised when the manifest resolves to zero documentation pages."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"No documentation pages found in {url}")


__all__ = [
    "ConfigFetchError",
    "ConfigSchemaError",
    "DocsError",
    "EmptyResultError",
    "FetchAttempt",
    "InvalidPathError",
    "MalformedReferenceError",
    "SourceFetchError",
]
