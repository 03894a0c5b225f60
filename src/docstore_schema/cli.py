"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

import click
import yaml

from docstore_schema.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    load_schema_tree,
    write_placeholder_configuration,
)
from docstore_schema.inventory_export import write_inventory_workbook
from docstore_schema.path_grammar import PathError, parse_path
from docstore_schema.path_resolution import (
    SchemaUnion,
    match_collection_group,
    schema_at_path,
)
from docstore_schema.query_narrowing import (
    Operator,
    OperatorError,
    Predicate,
    narrow_all,
    predicate_from_value,
    project,
)
from docstore_schema.schema_tree import SchemaTree, render_type

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="docstore-schema")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Verbosity of diagnostics written to stderr",
)
def cli(log_level: str) -> None:
    """Resolve paths and narrow queries against a declared document-store schema."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _config_option(function):
    return click.option(
        "--config",
        "config_path",
        required=True,
        type=click.Path(path_type=str),
        help="Path to the YAML configuration file",
    )(function)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="resolve")
@_config_option
@click.option(
    "--literal",
    is_flag=True,
    default=False,
    help="Treat segments wrapped in braces as literal names instead of wildcards.",
)
@click.argument("path")
def resolve_path(config_path: str, literal: bool, path: str) -> None:
    """Print the schemas declared at a collection or document PATH as JSON."""
    tree, _ = _load_tree(config_path)
    try:
        union = schema_at_path(tree, parse_path(path, allow_wildcards=not literal))
    except PathError as exc:
        raise CliError(str(exc)) from exc
    click.echo(_render_union(union))


@cli.command(name="collection-group")
@_config_option
@click.argument("name")
def collection_group(config_path: str, name: str) -> None:
    """Print the schemas of every collection called NAME, at any depth, as JSON."""
    tree, configuration = _load_tree(config_path)
    try:
        union = match_collection_group(
            tree, name, max_depth=configuration.resolution.max_traversal_depth
        )
    except PathError as exc:
        raise CliError(str(exc)) from exc
    click.echo(_render_union(union))


@cli.command(name="narrow")
@_config_option
@click.option(
    "--where",
    "where_clauses",
    multiple=True,
    help="Filter as 'field operator value'; the value is read as YAML. Repeatable.",
)
@click.option(
    "--select",
    "selected_fields",
    multiple=True,
    help="Top-level field to keep in the result. Repeatable.",
)
@click.argument("path")
def narrow_path(
    config_path: str,
    where_clauses: Sequence[str],
    selected_fields: Sequence[str],
    path: str,
) -> None:
    """Print the schemas at PATH that could satisfy the given filters as JSON."""
    tree, _ = _load_tree(config_path)
    try:
        predicates = [_parse_where_clause(clause) for clause in where_clauses]
        union = narrow_all(schema_at_path(tree, path), predicates)
    except (PathError, OperatorError) as exc:
        raise CliError(str(exc)) from exc
    if selected_fields:
        union = project(union, selected_fields)
    click.echo(_render_union(union))


@cli.command(name="export-inventory")
@_config_option
@click.option(
    "--output",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the inventory workbook to write",
)
def export_inventory(config_path: str, output_path: str) -> None:
    """Write an Excel inventory of every declared collection and field."""
    tree, _ = _load_tree(config_path)
    try:
        destination = write_inventory_workbook(tree, output_path)
    except OSError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(destination))


def _load_tree(config_path: str) -> tuple[SchemaTree, Configuration]:
    try:
        configuration = load_configuration(config_path)
        return load_schema_tree(configuration), configuration
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _parse_where_clause(clause: str) -> Predicate:
    parts = clause.split(None, 2)
    if len(parts) < 2:
        raise CliError(f"Filter '{clause}' must look like 'field operator value'.")
    field_path, symbol = parts[0], parts[1]
    operator = Operator.from_symbol(symbol)
    if operator == Operator.HAS_FIELD:
        return predicate_from_value(field_path, operator)
    if len(parts) < 3:
        raise CliError(f"Filter '{clause}' is missing a comparison value.")
    try:
        value = yaml.safe_load(parts[2])
    except yaml.YAMLError as exc:
        raise CliError(f"Filter value in '{clause}' is not valid YAML: {exc}") from exc
    return predicate_from_value(field_path, operator, value)


def _render_union(union: SchemaUnion) -> str:
    payload: dict[str, Any] = {
        "generic": union.is_generic,
        "variants": [
            {
                "origins": list(variant.origins),
                "fields": {
                    name: render_type(field_type) for name, field_type in variant.schema.fields
                },
            }
            for variant in union.variants
        ],
    }
    return json.dumps(payload, indent=2)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
