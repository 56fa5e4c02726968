"""Custom exceptions for the sheetdiff engine."""

from __future__ import annotations


class DiffEngineError(Exception):
    """Base exception for diff engine errors."""

    pass


class MalformedStateError(DiffEngineError):
    """Raised when a DatasetState does not satisfy its invariants.

    States are only produced by state capture, so this always points at a
    programming error in the caller (a hand-built or corrupted snapshot).
    """

    def __init__(self, document_id: str, reason: str) -> None:
        self.document_id = document_id
        self.reason = reason
        super().__init__(f"Malformed state for document '{document_id}': {reason}")
