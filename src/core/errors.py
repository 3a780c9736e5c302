"""Stockroom exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type and every error exposes a
stable ``kind`` so callers can branch without string matching.
"""

from __future__ import annotations


class StockroomError(Exception):
    """Base exception for all Stockroom failures."""

    kind = "StockroomError"


class StockroomConfigError(StockroomError):
    """Raised for invalid runtime configuration."""

    kind = "ConfigError"


class StockroomStoreError(StockroomError):
    """Raised for entity store contract violations."""

    kind = "StoreError"


class DuplicateKeyError(StockroomStoreError):
    """Raised when adding an entity whose id is already stored."""

    kind = "DuplicateKey"


class NotFoundError(StockroomStoreError):
    """Raised when a requested entity id or predicate has no match."""

    kind = "NotFound"


class InvalidValueError(StockroomStoreError):
    """Raised when a field update violates a domain constraint."""

    kind = "InvalidValue"


class StockroomImportError(StockroomError):
    """Raised for delimited line import failures."""

    kind = "ImportError"

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class MissingFieldError(StockroomImportError):
    """Raised when a line does not carry the expected number of fields."""

    kind = "MissingField"


class BadFormatError(StockroomImportError):
    """Raised when a field value does not parse for its declared type."""

    kind = "BadFormat"


class StockroomPersistenceError(StockroomError):
    """Raised for snapshot save and load failures."""

    kind = "PersistenceError"


class CorruptDataError(StockroomPersistenceError):
    """Raised when a persisted snapshot exists but cannot be decoded."""

    kind = "CorruptData"


class StockroomIOError(StockroomPersistenceError):
    """Raised when the filesystem rejects a read or write."""

    kind = "IOFailure"


class StockroomRunSpecError(StockroomError):
    """Raised for invalid or unsupported run-spec configuration."""

    kind = "RunSpecError"
