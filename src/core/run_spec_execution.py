"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to collection operations so
different entry points execute one declarative batch path without drift.
Steps run in order and the first failing step aborts the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from core.errors import StockroomRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import (
    optional_string,
    optional_text,
    required_int,
    required_mapping,
    required_string,
    required_value,
)


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def with_data_root(self, data_root: str) -> Any: ...

    def collection(self, entity_type: str, store_file: str | None = None) -> Any: ...


@dataclass
class RunSpecExecutionContext:
    """In-memory context used to execute run-spec steps.

    Collections are opened once per ``(entity_type, store_file)`` pair and
    reused by later steps, so adds and updates accumulate before ``save``.
    """

    client: RunSpecClient
    default_entity_type: str | None
    default_store_file: str | None
    collections: dict[tuple[str, str | None], Any] = field(default_factory=dict)


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines."""
    execution_client = (
        client.with_data_root(spec.defaults.data_root) if spec.defaults.data_root else client
    )
    context = RunSpecExecutionContext(
        client=execution_client,
        default_entity_type=spec.defaults.entity_type,
        default_store_file=spec.defaults.store_file,
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    collection = _resolve_collection(context, step)
    if step.command == "load":
        found = collection.load()
        return (f"load found={str(found).lower()} count={len(collection.get_all())}",)
    if step.command == "add":
        entity = collection.add(required_mapping(step.args, "fields"))
        return (f"added id={entity.id}",)
    if step.command == "get":
        entity = collection.get(required_value(step.args, "id"))
        return (collection.render(entity),)
    if step.command == "update":
        field_name = required_string(step.args, "field")
        entity = collection.update(
            required_value(step.args, "id"),
            field_name,
            required_value(step.args, "value"),
        )
        return (f"updated id={entity.id} {field_name}={getattr(entity, field_name)}",)
    if step.command == "increase-stock":
        entity = collection.increase_stock(
            required_value(step.args, "id"),
            required_int(step.args, "amount"),
        )
        return (f"stock id={entity.id} quantity={entity.quantity}",)
    if step.command == "remove":
        entity_id = required_value(step.args, "id")
        collection.remove(entity_id)
        return (f"removed id={entity_id}",)
    if step.command == "list":
        return tuple(collection.render(entity) for entity in collection.get_all())
    if step.command == "group":
        return (_execute_group_step(collection, step),)
    if step.command == "import":
        source_path = Path(required_string(step.args, "source")).expanduser()
        imported_count = collection.import_file(
            source_path,
            optional_text(step.args, "delimiter"),
        )
        return (f"imported count={imported_count}",)
    if step.command == "save":
        return (f"saved path={collection.save()}",)
    raise StockroomRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _execute_group_step(collection: Any, step: RunSpecStep) -> str:
    field_name = required_string(step.args, "field")
    raw_key = required_value(step.args, "key")
    index = collection.group_by(field_name)
    group_key = collection.coerce_group_key(field_name, raw_key)
    entity_ids = ",".join(str(entity_id) for entity_id in index.lookup_ids(group_key))
    return f"group {field_name}={raw_key} ids={entity_ids or '-'}"


def _resolve_collection(context: RunSpecExecutionContext, step: RunSpecStep) -> Any:
    entity_type = optional_string(step.args, "entity_type") or context.default_entity_type
    if entity_type is None:
        raise StockroomRunSpecError(
            f"Run-spec command '{step.command}' requires entity_type. "
            "Set 'entity_type' on the step or in top-level defaults."
        )
    store_file = optional_string(step.args, "store_file") or context.default_store_file
    key = (entity_type, store_file)
    if key not in context.collections:
        context.collections[key] = context.client.collection(entity_type, store_file)
    return context.collections[key]
