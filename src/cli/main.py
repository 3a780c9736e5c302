"""Stockroom CLI entry points.
This module exposes store commands for import, listing, updates, and grouping.
It maps argparse commands onto SDK calls and prints their results.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Any, Sequence

from cli.report_command import add_report_command, run_report_command
from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import StockroomConfig
from core.errors import StockroomError
from domains.registry import supported_entity_types
from store.store_sdk import EntityCollection, StockroomClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="stockroom", description="Stockroom entity store CLI")
    parser.add_argument("--data-root", help="Override STOCKROOM_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_list_command(subparsers)
    _add_update_command(subparsers)
    _add_increase_stock_command(subparsers)
    _add_remove_command(subparsers)
    _add_group_command(subparsers)
    add_report_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Stockroom CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code; 1 when a store operation fails, with the error
        written to stderr.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch(parser, client, args)
    except StockroomError as error:
        print(f"error={error.kind}: {error}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    client: StockroomClient,
    args: argparse.Namespace,
) -> int:
    if args.command == "import":
        return _run_import_command(client, args)
    if args.command == "list":
        return _run_list_command(client, args)
    if args.command == "update":
        return _run_update_command(client, args)
    if args.command == "increase-stock":
        return _run_increase_stock_command(client, args)
    if args.command == "remove":
        return _run_remove_command(client, args)
    if args.command == "group":
        return _run_group_command(client, args)
    if args.command == "report":
        return run_report_command(client, args)
    if args.command == "run-spec":
        return run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> StockroomClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = StockroomConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return StockroomClient(config)


def _open_collection(client: StockroomClient, args: argparse.Namespace) -> EntityCollection:
    """Open the requested collection and load its snapshot when present."""
    collection = client.collection(args.type, args.store_file)
    collection.load()
    return collection


def _run_import_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    collection = _open_collection(client, args)
    imported_count = collection.import_file(Path(args.source).expanduser(), args.delimiter)
    store_path = collection.save()
    print(f"imported={imported_count}")
    print(f"store_path={store_path}")
    return 0


def _run_list_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Handle list command; reports when no snapshot exists yet."""
    collection = client.collection(args.type, args.store_file)
    if not collection.load():
        print(f"no_data={collection.snapshot_path}")
        return 0
    for entity in collection.get_all():
        print(collection.render(entity))
    return 0


def _run_update_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Handle update command."""
    collection = _open_collection(client, args)
    entity = collection.update(args.id, args.field, args.value)
    collection.save()
    print(collection.render(entity))
    return 0


def _run_increase_stock_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Handle increase-stock command."""
    collection = _open_collection(client, args)
    entity = collection.increase_stock(args.id, args.amount)
    collection.save()
    print(collection.render(entity))
    return 0


def _run_remove_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Handle remove command."""
    collection = _open_collection(client, args)
    collection.remove(args.id)
    collection.save()
    print(f"removed={args.id}")
    return 0


def _run_group_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Handle group command; an unseen key prints nothing."""
    collection = _open_collection(client, args)
    index = collection.group_by(args.field)
    for entity in index.lookup_group(collection.coerce_group_key(args.field, args.key)):
        print(collection.render(entity))
    return 0


def _add_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type",
        required=True,
        choices=supported_entity_types(),
        help="Entity type stored in the snapshot",
    )
    parser.add_argument(
        "--store-file",
        help="Snapshot file, relative to the data root; defaults to <type>.json",
    )


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import a delimited file into a store")
    parser.add_argument("source", help="Delimited text file, one record per line")
    _add_store_arguments(parser)
    parser.add_argument("--delimiter", help="Override STOCKROOM_IMPORT_DELIMITER")


def _add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    parser = subparsers.add_parser("list", help="Print every stored entity in order")
    _add_store_arguments(parser)


def _add_update_command(subparsers: Any) -> None:
    """Register update subcommand."""
    parser = subparsers.add_parser("update", help="Validate and update one entity field")
    _add_store_arguments(parser)
    parser.add_argument("--id", required=True, help="Entity id")
    parser.add_argument("--field", required=True, help="Field name to update")
    parser.add_argument("--value", required=True, help="New value, parsed by field type")


def _add_increase_stock_command(subparsers: Any) -> None:
    """Register increase-stock subcommand."""
    parser = subparsers.add_parser("increase-stock", help="Add units to an item quantity")
    _add_store_arguments(parser)
    parser.add_argument("--id", required=True, help="Item id")
    parser.add_argument("--amount", required=True, type=int, help="Units to add")


def _add_remove_command(subparsers: Any) -> None:
    """Register remove subcommand."""
    parser = subparsers.add_parser("remove", help="Remove one entity by id")
    _add_store_arguments(parser)
    parser.add_argument("--id", required=True, help="Entity id")


def _add_group_command(subparsers: Any) -> None:
    """Register group subcommand."""
    parser = subparsers.add_parser("group", help="Print entities sharing one field value")
    _add_store_arguments(parser)
    parser.add_argument("--field", required=True, help="Field to group by")
    parser.add_argument("--key", required=True, help="Group key to look up")
