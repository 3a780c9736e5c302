"""Runtime configuration model for Stockroom.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_IMPORT_DELIMITER, FALSE_VALUES, TRUE_VALUES
from core.errors import StockroomConfigError


@dataclass(frozen=True)
class StockroomConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory that relative store files resolve under.
        import_delimiter: Single field separator for delimited line imports.
        atomic_writes: Whether snapshots are written through a temporary file.
    """

    data_root: Path
    import_delimiter: str
    atomic_writes: bool

    @classmethod
    def from_env(cls) -> "StockroomConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StockroomConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("STOCKROOM_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        delimiter_value = os.getenv("STOCKROOM_IMPORT_DELIMITER", DEFAULT_IMPORT_DELIMITER)
        atomic_value = os.getenv("STOCKROOM_ATOMIC_WRITES", "true")
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            import_delimiter=parse_delimiter(delimiter_value, "STOCKROOM_IMPORT_DELIMITER"),
            atomic_writes=_parse_bool("STOCKROOM_ATOMIC_WRITES", atomic_value),
        )

    def resolve_store_path(self, store_file: str) -> Path:
        """Resolve a store file name against the data root.

        Args:
            store_file: Absolute path or path relative to ``data_root``.

        Returns:
            Absolute snapshot path.
        """
        store_path = Path(store_file).expanduser()
        if store_path.is_absolute():
            return store_path
        return self.data_root / store_path


def parse_delimiter(raw_value: str, source: str) -> str:
    """Validate an import delimiter from the environment or a command override.

    Args:
        raw_value: Raw delimiter text.
        source: Setting name used in the error message.

    Returns:
        Single-character delimiter.

    Raises:
        StockroomConfigError: If value is not exactly one character.
    """
    if len(raw_value) != 1:
        raise StockroomConfigError(
            f"Invalid {source} value: expected a single character, got '{raw_value}'. "
            f"Set {source} to one separator character such as ','."
        )
    return raw_value


def _parse_bool(name: str, raw_value: str) -> bool:
    normalized_value = raw_value.strip().lower()
    if normalized_value in TRUE_VALUES:
        return True
    if normalized_value in FALSE_VALUES:
        return False
    raise StockroomConfigError(
        f"Invalid {name} value: expected a boolean, got '{raw_value}'. "
        f"Use one of: {', '.join(TRUE_VALUES + FALSE_VALUES)}."
    )
