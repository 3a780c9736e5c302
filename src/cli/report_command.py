"""Grade report CLI command wiring."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.config import parse_delimiter
from domains.grading import grade_report_lines, write_grade_report
from domains.registry import get_entity_type
from ingest.line_reader import read_delimited_file
from store.store_sdk import StockroomClient


def add_report_command(subparsers: Any) -> None:
    """Register report subcommand."""
    parser = subparsers.add_parser(
        "report",
        help="Grade a delimited student file and write a report",
    )
    parser.add_argument("source", help="Delimited file with id,full_name,score per line")
    parser.add_argument("--output", required=True, help="Report text file to write")
    parser.add_argument("--delimiter", help="Override STOCKROOM_IMPORT_DELIMITER")


def run_report_command(client: StockroomClient, args: argparse.Namespace) -> int:
    """Parse students fail-fast, write the report, and echo its lines."""
    students = read_delimited_file(
        Path(args.source).expanduser(),
        get_entity_type("student").codec,
        client.config.import_delimiter
        if args.delimiter is None
        else parse_delimiter(args.delimiter, "--delimiter"),
    )
    report_path = write_grade_report(students, Path(args.output).expanduser())
    for line in grade_report_lines(students):
        print(line)
    print(f"report_path={report_path}")
    return 0
