"""CLI entry point for api-schema-walker."""

import logging
from pathlib import Path

import click

from api_schema_walker.generator.constraints import check_spec
from api_schema_walker.parser.base import Schema, Spec
from api_schema_walker.parser.openapi import SpecLoadError, load_spec
from api_schema_walker.validate.errors import ConstraintError
from api_schema_walker.walker import SchemaDefectError, free_form_items, walk_all_schemas


def _load(doc_path: Path) -> Spec:
    try:
        return load_spec(doc_path)
    except SpecLoadError as e:
        raise click.ClickException(str(e)) from e


def _describe(schema: Schema) -> str:
    kind = schema.type.value or "any"
    if schema.format:
        kind = f"{kind} ({schema.format})"
    return kind


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Schema Walker: walk OpenAPI schemas and check numeric constraints."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--strict-arrays", is_flag=True, help="Fail on arrays without items instead of treating items as free-form.")
def walk(doc_path: Path, strict_arrays: bool):
    """List every primitive schema of an OpenAPI document."""
    spec = _load(doc_path)

    leaves: list[Schema] = []
    try:
        walk_all_schemas(spec, leaves.append, None if strict_arrays else free_form_items)
    except SchemaDefectError as e:
        raise click.ClickException(str(e)) from e

    for schema in leaves:
        click.echo(_describe(schema))
    click.echo(f"Found {len(leaves)} primitive schemas.")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--strict", is_flag=True, help="Stop at the first violation.")
@click.option("--strict-arrays", is_flag=True, help="Fail on arrays without items instead of treating items as free-form.")
@click.pass_context
def check(ctx: click.Context, doc_path: Path, strict: bool, strict_arrays: bool):
    """Check defaults, examples and enum members against numeric constraints."""
    spec = _load(doc_path)

    try:
        collector = check_spec(spec, strict=strict, fix_arrays=not strict_arrays)
    except (SchemaDefectError, ConstraintError) as e:
        raise click.ClickException(str(e)) from e

    for v in collector.violations:
        click.echo(f"{_describe(v.schema)} {v.source}: {v.error}")

    click.echo(f"Checked {len(collector.validators)} constrained schemas, {len(collector.violations)} violations.")
    if collector.violations:
        ctx.exit(1)
