"""blockdb CLI entry points.

This module exposes read-only inspection commands for datasets and
blocks. It maps argparse commands onto Database calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Sequence

from core.config import DBConfig
from store.database import Database
from store.dataset import Dataset


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="blockdb", description="blockdb inspection CLI")
    parser.add_argument("--db-path", help="Override BLOCKDB_PATH for this command")
    parser.add_argument("--config", help="YAML config file applied over the environment")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("datasets", help="List datasets")
    blocks_parser = subparsers.add_parser("blocks", help="List blocks of a dataset")
    blocks_parser.add_argument("dataset", help="Dataset name")
    for command, help_text in (
        ("records", "Print hydrated records of a block"),
        ("table", "Print a block's record data as tab-separated rows"),
    ):
        command_parser = subparsers.add_parser(command, help=help_text)
        command_parser.add_argument("dataset", help="Dataset name")
        command_parser.add_argument("block", help="Block name")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the blockdb CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    database = _build_database(args.db_path, args.config)
    if args.command == "datasets":
        return _run_datasets_command(database)
    if args.command == "blocks":
        return _run_blocks_command(database, args)
    if args.command == "records":
        return _run_records_command(database, args)
    if args.command == "table":
        return _run_table_command(database, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_database(db_path: str | None, config_path: str | None) -> Database:
    """Build a database handle with optional overrides.

    Args:
        db_path: Optional root directory override.
        config_path: Optional YAML config file.

    Returns:
        Configured database handle.
    """
    config = DBConfig.from_file(config_path) if config_path else DBConfig.from_env()
    if db_path:
        config = replace(config, db_path=Path(db_path).expanduser().resolve())
    return Database(config)


def _run_datasets_command(database: Database) -> int:
    for dataset_name in database.dataset_names():
        print(dataset_name)
    return 0


def _run_blocks_command(database: Database, args: argparse.Namespace) -> int:
    """Handle blocks command.

    Args:
        database: Database handle.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when any block failed to decode.
    """
    dataset = database.dataset(args.dataset)
    bad_blocks: list[str] = []
    for block in dataset.blocks():
        record_count = block.record_count()
        bad_blocks.extend(dataset.bad_blocks)
        print(f"{block.name}\t{block.human_size()}\t{record_count}")
    for block_file in bad_blocks:
        print(f"bad block: {block_file}", file=sys.stderr)
    return 1 if bad_blocks else 0


def _run_records_command(database: Database, args: argparse.Namespace) -> int:
    """Handle records command.

    Args:
        database: Database handle.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when the read reported bad blocks or records.
    """
    dataset = database.dataset(args.dataset)
    block = dataset.block(args.block)
    block.load_records()
    for record in block.records:
        print(record.content)
    return _report_diagnostics(dataset)


def _run_table_command(database: Database, args: argparse.Namespace) -> int:
    """Handle table command.

    Args:
        database: Database handle.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when the read reported bad blocks or records.
    """
    dataset = database.dataset(args.dataset)
    table = dataset.block(args.block).table()
    if table.headers:
        print("\t".join(table.headers))
    for row in table.rows:
        print("\t".join(row))
    return _report_diagnostics(dataset)


def _report_diagnostics(dataset: Dataset) -> int:
    for block_file in dataset.bad_blocks:
        print(f"bad block: {block_file}", file=sys.stderr)
    for record_key in dataset.bad_records:
        print(f"bad record: {record_key}", file=sys.stderr)
    return 1 if dataset.bad_blocks or dataset.bad_records else 0
