"""Typed run-spec parsing for declarative store batches.

This module loads and validates YAML run-spec files used by CLI workflows.
A run-spec replaces an interactive prompt loop with an ordered list of
store operations that CLI and SDK entry points execute the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

import yaml

from core.constants import RUN_SPEC_VERSION
from core.errors import StockroomRunSpecError

RunSpecCommand = Literal[
    "load",
    "add",
    "get",
    "update",
    "increase-stock",
    "remove",
    "list",
    "group",
    "import",
    "save",
]
SUPPORTED_RUN_SPEC_COMMANDS: tuple[RunSpecCommand, ...] = (
    "load",
    "add",
    "get",
    "update",
    "increase-stock",
    "remove",
    "list",
    "group",
    "import",
    "save",
)


@dataclass(frozen=True)
class RunSpecDefaults:
    """Default values applied to run-spec steps."""

    data_root: str | None = None
    entity_type: str | None = None
    store_file: str | None = None


@dataclass(frozen=True)
class RunSpecStep:
    """One runnable step from a run-spec file."""

    command: RunSpecCommand
    args: Mapping[str, object]


@dataclass(frozen=True)
class RunSpec:
    """Validated run-spec root object."""

    version: int
    defaults: RunSpecDefaults
    steps: tuple[RunSpecStep, ...]


def load_run_spec(spec_path: str) -> RunSpec:
    """Load and validate a YAML run-spec from disk.

    Args:
        spec_path: File path to YAML run-spec.

    Returns:
        Fully validated run-spec object.

    Raises:
        StockroomRunSpecError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(spec_path)
    return parse_run_spec(payload)


def parse_run_spec(payload: object) -> RunSpec:
    """Validate an already-parsed run-spec payload.

    Args:
        payload: YAML document parsed into Python objects.

    Returns:
        Fully validated run-spec object.

    Raises:
        StockroomRunSpecError: If schema checks fail.
    """
    root_mapping = _expect_mapping(payload, "run spec root")
    _validate_root_keys(root_mapping)
    version = _parse_version(root_mapping)
    defaults = _parse_defaults(root_mapping)
    steps = _parse_steps(root_mapping)
    return RunSpec(version=version, defaults=defaults, steps=steps)


def _load_yaml_payload(spec_path: str) -> object:
    spec_file = Path(spec_path).expanduser().resolve()
    if not spec_file.exists():
        raise StockroomRunSpecError(
            f"Run spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise StockroomRunSpecError(
            f"Failed to read run spec at {spec_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise StockroomRunSpecError(
            f"Failed to parse YAML run spec at {spec_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise StockroomRunSpecError(
            f"Run spec at {spec_file} is empty. Define 'version' and 'steps'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise StockroomRunSpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise StockroomRunSpecError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise StockroomRunSpecError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise StockroomRunSpecError(
            f"Run spec field 'version' must be an integer. Set version: {RUN_SPEC_VERSION}."
        )
    if raw_version != RUN_SPEC_VERSION:
        raise StockroomRunSpecError(
            f"Unsupported run spec version {raw_version}. Use version: {RUN_SPEC_VERSION}."
        )
    return raw_version


def _parse_defaults(root_mapping: Mapping[str, object]) -> RunSpecDefaults:
    raw_defaults = root_mapping.get("defaults")
    if raw_defaults is None:
        return RunSpecDefaults()
    defaults_mapping = _expect_mapping(raw_defaults, "run spec defaults")
    _validate_defaults_keys(defaults_mapping)
    return RunSpecDefaults(
        data_root=_optional_string(defaults_mapping, "data_root"),
        entity_type=_optional_string(defaults_mapping, "entity_type"),
        store_file=_optional_string(defaults_mapping, "store_file"),
    )


def _parse_steps(root_mapping: Mapping[str, object]) -> tuple[RunSpecStep, ...]:
    raw_steps = root_mapping.get("steps")
    if raw_steps is None:
        raise StockroomRunSpecError(
            "Run spec missing required field 'steps'. Add a non-empty list of commands."
        )
    step_rows = _expect_sequence(raw_steps, "run spec steps")
    if len(step_rows) == 0:
        raise StockroomRunSpecError("Run spec field 'steps' must include at least one step.")
    return tuple(_parse_step(step_value, index) for index, step_value in enumerate(step_rows))


def _parse_step(step_value: object, step_index: int) -> RunSpecStep:
    context = f"run spec step #{step_index + 1}"
    step_mapping = _expect_mapping(step_value, context)
    raw_command = step_mapping.get("command")
    if not isinstance(raw_command, str):
        raise StockroomRunSpecError(f"Invalid {context}: field 'command' must be a string.")
    command = _parse_command(raw_command, context)
    args_mapping = _parse_step_args(step_mapping, context)
    return RunSpecStep(command=command, args=args_mapping)


def _parse_command(raw_command: str, context: str) -> RunSpecCommand:
    if raw_command in SUPPORTED_RUN_SPEC_COMMANDS:
        return cast(RunSpecCommand, raw_command)
    supported_rows = ", ".join(SUPPORTED_RUN_SPEC_COMMANDS)
    raise StockroomRunSpecError(
        f"Unsupported command '{raw_command}' in {context}. Use one of: {supported_rows}."
    )


def _parse_step_args(step_mapping: Mapping[str, object], context: str) -> Mapping[str, object]:
    if "args" in step_mapping:
        if len(step_mapping.keys() - {"command", "args"}) > 0:
            raise StockroomRunSpecError(
                f"Invalid {context}: when using 'args', do not mix inline keys."
            )
        return _expect_mapping(step_mapping["args"], f"{context} args")
    return {key: value for key, value in step_mapping.items() if key != "command"}


def _optional_string(mapping: Mapping[str, object], field_name: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        normalized_value = raw_value.strip()
        return normalized_value if normalized_value else None
    raise StockroomRunSpecError(f"Run spec field '{field_name}' must be a string when provided.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    allowed_keys = {"version", "defaults", "steps"}
    unknown_keys = sorted(set(root_mapping) - allowed_keys)
    if unknown_keys:
        raise StockroomRunSpecError(
            f"Run spec contains unknown root fields: {', '.join(unknown_keys)}."
        )


def _validate_defaults_keys(defaults_mapping: Mapping[str, object]) -> None:
    allowed_keys = {"data_root", "entity_type", "store_file"}
    unknown_keys = sorted(set(defaults_mapping) - allowed_keys)
    if unknown_keys:
        raise StockroomRunSpecError(
            f"Run spec defaults contain unknown fields: {', '.join(unknown_keys)}."
        )
