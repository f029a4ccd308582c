"""Exceptions raised by catalog loading and serialization."""

from __future__ import annotations

from typing import Optional


class MalformedCatalog(ValueError):
    """A field catalog violates its structural invariants.

    Raised for dangling ``parentPath`` references, duplicate paths, level
    mismatches between a descriptor and its parent, and records that cannot be
    decoded. Serialization against such a catalog is aborted rather than
    producing a partial document.

    Attributes:
        path: Path of the offending descriptor, when known.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
