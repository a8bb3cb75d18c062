"""Best-effort lookup results.

Queries that are allowed to fail without affecting the report (shell version,
plugin revision, latest release) return a :class:`Lookup` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Outcome of a query that may be unavailable.

    Example::

        rev = git.lookup_revision()
        text = rev.value_or("(unknown)")
    """

    ok: bool
    value: T | None = None
    reason: str | None = None

    def value_or(self, default: T) -> T:
        """Return the found value, or ``default`` when unavailable."""
        if self.ok:
            return self.value  # type: ignore[return-value]
        return default

    @classmethod
    def found(cls, value: T) -> Lookup[T]:
        return cls(ok=True, value=value)

    @classmethod
    def unavailable(cls, reason: str) -> Lookup[T]:
        return cls(ok=False, reason=reason)
