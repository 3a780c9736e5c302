"""Public SDK surface for Stockroom.

This module provides a stable import path for library users.
It re-exports the store, index, persistence, and import primitives.
"""

from __future__ import annotations

from core.config import StockroomConfig
from core.errors import (
    BadFormatError,
    CorruptDataError,
    DuplicateKeyError,
    InvalidValueError,
    MissingFieldError,
    NotFoundError,
    StockroomError,
    StockroomIOError,
)
from core.types import KeyedEntity
from ingest.line_reader import import_entities, parse_delimited_lines, read_delimited_file
from store.entity_codec import EntityCodec
from store.entity_store import EntityStore
from store.field_validation import in_range, non_blank, non_negative
from store.group_index import GroupIndex, build_index
from store.snapshot_io import LoadResult, load_store, save_store
from store.store_sdk import EntityCollection, StockroomClient

__all__ = [
    "BadFormatError",
    "CorruptDataError",
    "DuplicateKeyError",
    "EntityCodec",
    "EntityCollection",
    "EntityStore",
    "GroupIndex",
    "InvalidValueError",
    "KeyedEntity",
    "LoadResult",
    "MissingFieldError",
    "NotFoundError",
    "StockroomClient",
    "StockroomConfig",
    "StockroomError",
    "StockroomIOError",
    "build_index",
    "import_entities",
    "in_range",
    "load_store",
    "non_blank",
    "non_negative",
    "parse_delimited_lines",
    "read_delimited_file",
    "save_store",
]
