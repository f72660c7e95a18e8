"""Once-only, lock-guarded lazy initialisation for process-wide state."""

from __future__ import annotations

import threading
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

T = typ.TypeVar("T")


class Once(typ.Generic[T]):
    """Run ``factory`` at most once and share its outcome with every caller.

    The first call to :meth:`get` runs the factory while holding a lock, so
    concurrent callers wait for that single attempt instead of starting their
    own. A raised exception is stored and re-raised to every later caller;
    there is no retry.

    Examples
    --------
    >>> calls = []
    >>> cell = Once(lambda: calls.append(1) or len(calls))
    >>> cell.get(), cell.get()
    (1, 1)
    """

    def __init__(self, factory: cabc.Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None
        self._error: Exception | None = None

    @property
    def done(self) -> bool:
        """Return whether the single construction attempt has finished."""
        return self._done

    def get(self) -> T:
        """Return the shared value, constructing it on first use."""
        with self._lock:
            if not self._done:
                try:
                    self._value = self._factory()
                except Exception as exc:
                    self._error = exc
                self._done = True
        if self._error is not None:
            raise self._error
        return typ.cast("T", self._value)


__all__ = ["Once"]
