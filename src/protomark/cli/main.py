# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the ProtoMark command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from protomark.compiler.artifact import ARTIFACT_SUFFIX, write_artifact
from protomark.compiler.engine import ResolutionResult, resolve_schema
from protomark.config.settings import (
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_TEXT,
    ConfigError,
    ProtomarkConfig,
    load_config,
)
from protomark.enrichment.enrichment_type import EnrichmentError
from protomark.model.schema import SchemaGraph
from protomark.refs.type_ref import InvalidReferenceError
from protomark.schema.errors import SchemaLoadError
from protomark.schema.loader import load_schema
from protomark.validation.checks import validate

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the ProtoMark CLI."""
    parser = argparse.ArgumentParser(
        prog="protomark",
        description="ProtoMark: resolve enrichments and interface directives for Protobuf schemas",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-declaration decisions")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Write a default configuration file",
        description=f"Create a {CONFIG_FILE_NAME} file with the default settings.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to write the configuration to (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check a schema for structural errors",
        description="Validate a schema and report every error resolution would produce.",
    )
    check_parser.add_argument("schema", help="Schema document (.yaml, .yml, .json) or descriptor set")
    _add_config_argument(check_parser)

    # resolve subcommand
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a schema into insertion directives",
        description="Classify every message and match every enrichment of a schema.",
    )
    resolve_parser.add_argument("schema", help="Schema document (.yaml, .yml, .json) or descriptor set")
    _add_config_argument(resolve_parser)
    resolve_parser.add_argument(
        "-o",
        "--output",
        help=(
            "Write the result as a JSON artifact instead of printing the directives. "
            f"A directory receives <schema name>{ARTIFACT_SUFFIX}"
        ),
    )
    resolve_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker threads (default: chosen by the executor)",
    )
    resolve_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first error instead of reporting all of them",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        help=f"Configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "resolve":
        return _cmd_resolve(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    print(f"Initialized ProtoMark configuration at '{config_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    loaded = _load_inputs(args)
    if loaded is None:
        return 1
    schema, config = loaded

    print(f"Checking {len(schema)} message(s) in {len(schema.files)} file(s)...")
    has_errors = False
    validation = validate(schema, config)
    for warning in validation.warnings:
        print(f"Warning: {warning.message}")
    for error in validation.errors:
        print(f"Error: {error.message}", file=sys.stderr)
        has_errors = True

    result = resolve_schema(schema, config)
    for resolution_error in result.errors:
        print(f"Error: {resolution_error.message}", file=sys.stderr)
        has_errors = True

    if has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the resolve subcommand."""
    if args.workers is not None and args.workers < 1:
        print("Error: --workers must be at least 1.", file=sys.stderr)
        return 1

    loaded = _load_inputs(args)
    if loaded is None:
        return 1
    schema, config = loaded

    try:
        result = resolve_schema(schema, config, max_workers=args.workers, fail_fast=args.fail_fast)
    except (InvalidReferenceError, EnrichmentError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        output = Path(args.output)
        if output.is_dir():
            output = output / (Path(args.schema).stem + ARTIFACT_SUFFIX)
        write_artifact(result, output)
        print(
            f"Wrote {len(result.directives)} directive(s), {len(result.declarations)} interface declaration(s) "
            f"and {len(result.enrichments)} enrichment record(s) to '{output}'."
        )
    else:
        _print_result(result)

    for error in result.errors:
        print(f"Error: {error.message}", file=sys.stderr)
    return 1 if result.has_errors else 0


def _load_inputs(args: argparse.Namespace) -> tuple[SchemaGraph, ProtomarkConfig] | None:
    """Load the configuration and the schema, reporting failures on stderr."""
    try:
        config = _load_config(args.config)
        schema = load_schema(Path(args.schema), config)
    except (ConfigError, SchemaLoadError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    return schema, config


def _load_config(path: str | None) -> ProtomarkConfig:
    if path is not None:
        return load_config(Path(path))
    default = Path.cwd() / CONFIG_FILE_NAME
    if default.exists():
        return load_config(default)
    return ProtomarkConfig()


def _print_result(result: ResolutionResult) -> None:
    for directive in result.directives:
        print(f"{directive.target} [{directive.marker}] {directive.content}")
    for declaration in result.declarations:
        print(f"{declaration.target} (interface declaration)")
    for record in result.enrichments:
        print(f"{record.enrichment} <- {record.source}")
        for name, binding in record.fields.items():
            origin = binding.field if binding.field is not None else "<context>"
            print(f"  {name} = {origin} (by {binding.ref})")
