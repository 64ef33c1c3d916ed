"""arma-storage CLI entry points.
This module exposes storage file inspection and editing commands.
It maps argparse commands onto storage pool calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import StorageConfig
from core.errors import ArmaStorageError
from core.logging_config import configure_logging
from core.value_rendering import render_text
from extension.entrypoints import version_text
from extension.error_codes import ERROR_CODE_DESCRIPTIONS
from extension.value_parsing import parse_value_text
from store.storage_pool import StoragePool


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="arma-storage", description="Arma Storage CLI")
    parser.add_argument("--root", help="Override ARMA_STORAGE_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("version", help="Print the product version")
    subparsers.add_parser("error-codes", help="Print the status code table")
    _add_list_command(subparsers)
    _add_get_command(subparsers)
    _add_set_command(subparsers)
    _add_erase_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the arma-storage CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.root)
    except ArmaStorageError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    configure_logging(config.log_level)
    if args.command == "version":
        print(version_text())
        return 0
    if args.command == "error-codes":
        for code, description in ERROR_CODE_DESCRIPTIONS.items():
            print(f"{int(code)}\t{description}")
        return 0
    pool = StoragePool.from_config(config)
    try:
        if args.command == "list":
            return _run_list_command(pool, args)
        if args.command == "get":
            return _run_get_command(pool, args)
        if args.command == "set":
            return _run_set_command(pool, args)
        if args.command == "erase":
            return _run_erase_command(pool, args)
    except ArmaStorageError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(root: str | None) -> StorageConfig:
    """Build config with optional root override.

    Args:
        root: Optional override path.

    Returns:
        Runtime configuration.
    """
    config = StorageConfig.from_env()
    if root:
        config = replace(config, storage_root=Path(root).expanduser().resolve())
    return config


def _load_storage(pool: StoragePool, name: str, required: bool) -> None:
    """Open a storage and read its file when one exists or is required."""
    pool.open(name)
    if required or pool.storage_path(name).exists():
        pool.read(name)


def _run_list_command(pool: StoragePool, args: argparse.Namespace) -> int:
    """Handle list command.

    Args:
        pool: Storage pool.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    _load_storage(pool, args.storage, required=True)
    for key in sorted(pool.keys(args.storage)):
        print(f"{key}\t{render_text(pool.get(args.storage, key))}")
    return 0


def _run_get_command(pool: StoragePool, args: argparse.Namespace) -> int:
    """Handle get command."""
    _load_storage(pool, args.storage, required=True)
    print(render_text(pool.get(args.storage, args.key)))
    return 0


def _run_set_command(pool: StoragePool, args: argparse.Namespace) -> int:
    """Handle set command; creates the storage file when missing."""
    value = parse_value_text(args.value)
    _load_storage(pool, args.storage, required=False)
    pool.set(args.storage, args.key, value)
    pool.write(args.storage)
    return 0


def _run_erase_command(pool: StoragePool, args: argparse.Namespace) -> int:
    """Handle erase command."""
    _load_storage(pool, args.storage, required=True)
    pool.erase(args.storage, args.key)
    pool.write(args.storage)
    return 0


def _add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    parser = subparsers.add_parser("list", help="Print every key of a storage file")
    parser.add_argument("storage", help="Storage name")


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print the rendered value at a key")
    parser.add_argument("storage", help="Storage name")
    parser.add_argument("key", help="Entry key")


def _add_set_command(subparsers: Any) -> None:
    """Register set subcommand."""
    parser = subparsers.add_parser("set", help="Store a literal value at a key")
    parser.add_argument("storage", help="Storage name")
    parser.add_argument("key", help="Entry key")
    parser.add_argument("value", help='Literal value, e.g. 5, "text", [1, true], west')


def _add_erase_command(subparsers: Any) -> None:
    """Register erase subcommand."""
    parser = subparsers.add_parser("erase", help="Remove a key from a storage file")
    parser.add_argument("storage", help="Storage name")
    parser.add_argument("key", help="Entry key")
