"""Command-line interface for gql-toolgen."""

import json
import logging

import click

from .core.config import ToolsConfig
from .core.errors import GQLToolError
from .core.parser import SchemaParser
from .core.tools import CompiledSchema, compile_schema

schema_option = click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file or directory.",
)
config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    help="JSON configuration file.",
)
name_option = click.option(
    "--name",
    "-n",
    required=True,
    help="Operation name.",
)


def _load(
    schema: str,
    config_path: str | None,
    mutations: bool = False,
    subscriptions: bool = False,
) -> CompiledSchema:
    """Parse the schema and compile tools, applying flag overrides."""
    config = ToolsConfig.from_file(config_path) if config_path else ToolsConfig()
    overrides = {}
    if mutations:
        overrides["include_mutations"] = True
    if subscriptions:
        overrides["include_subscriptions"] = True
    if overrides:
        config = config.model_copy(update=overrides)

    parser = SchemaParser(schema)
    return compile_schema(parser.parse_all(), config)


def _parse_json(value: str | None, option: str):
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint=option)


@click.group()
@click.version_option(package_name="gql-toolgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def main(verbose: bool):
    """Compile GraphQL schemas into validated operation tools.

    Validates variables and field selections, and renders query documents.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("list")
@schema_option
@config_option
@click.option("--mutations", is_flag=True, help="Include mutations.")
@click.option("--subscriptions", is_flag=True, help="Include subscriptions.")
def list_operations(schema: str, config_path: str | None, mutations: bool, subscriptions: bool):
    """List the operations extracted from a schema.

    Examples:

        gql-toolgen list --schema ./schema.graphql --mutations
    """
    compiled = _load(schema, config_path, mutations, subscriptions)
    for tool in compiled:
        op = tool.operation
        args = ", ".join(f"{arg.name}: {arg.type_name}" for arg in op.arguments)
        click.echo(f"{op.operation_type:<12} {op.name}({args}): {op.return_type_name}")
    for note in compiled.diagnostics:
        click.echo(f"warning: {note}", err=True)


@main.command()
@schema_option
@config_option
@name_option
@click.option("--variables", help="Operation variables as a JSON object.")
@click.option("--selection", help="Field selection as a JSON object.")
@click.option("--mutations", is_flag=True, help="Include mutations.")
@click.option("--subscriptions", is_flag=True, help="Include subscriptions.")
def render(
    schema: str,
    config_path: str | None,
    name: str,
    variables: str | None,
    selection: str | None,
    mutations: bool,
    subscriptions: bool,
):
    """Validate input and render the GraphQL document for an operation.

    Examples:

        gql-toolgen render -s schema.graphql -n user --variables '{"id": "1"}'

        gql-toolgen render -s schema.graphql -n user --selection '{"id": true}'
    """
    compiled = _load(schema, config_path, mutations, subscriptions)
    try:
        result = compiled.render(
            name,
            _parse_json(variables, "--variables"),
            _parse_json(selection, "--selection"),
        )
    except GQLToolError as e:
        raise click.ClickException(str(e))
    click.echo(result.model_dump_json(indent=2))


@main.command()
@schema_option
@config_option
@name_option
@click.option("--mutations", is_flag=True, help="Include mutations.")
@click.option("--subscriptions", is_flag=True, help="Include subscriptions.")
def describe(schema: str, config_path: str | None, name: str, mutations: bool, subscriptions: bool):
    """Show the argument and selection schemas of an operation."""
    compiled = _load(schema, config_path, mutations, subscriptions)
    try:
        tool = compiled.get(name)
    except GQLToolError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(
        {
            "name": tool.name,
            "description": tool.description,
            "arguments": tool.input_schema(),
            "selection": tool.output_schema(),
            "defaultSelection": tool.default_selection,
        },
        indent=2,
    ))


if __name__ == "__main__":
    main()
