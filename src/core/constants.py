"""Core constants used across Stockroom modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".stockroom")
DEFAULT_IMPORT_DELIMITER = ","
SNAPSHOT_FILE_SUFFIX = ".json"
SNAPSHOT_JSON_INDENT = 2
TEMP_FILE_SUFFIX = ".tmp"
QUANTITY_FIELD_NAME = "quantity"
IDENTITY_FIELD_NAME = "id"
RUN_SPEC_VERSION = 1
GRADE_THRESHOLDS = ((80, "A"), (70, "B"), (60, "C"), (50, "D"))
FAILING_GRADE = "F"
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")
