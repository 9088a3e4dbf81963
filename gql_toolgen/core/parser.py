"""GraphQL schema parser using graphql-core.

Builds a ``GraphQLSchema`` from .graphql/.graphqls files and extracts the
root Query, Mutation and Subscription fields as ``IROperation`` records.
"""

import logging
import os

from graphql import GraphQLObjectType, GraphQLSchema, build_schema

from .config import ToolsConfig
from .ir import IRArgument, IROperation

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls")


class SchemaParser:
    """Parses GraphQL schema files into a graphql-core schema."""

    def __init__(self, schema_path: str):
        """Initialize a parser with a path to a schema file or directory."""
        self.schema_path = schema_path
        self.schema: GraphQLSchema | None = None

    @staticmethod
    def from_text(sdl: str) -> GraphQLSchema:
        """Build a schema directly from SDL text."""
        return build_schema(sdl)

    def parse_all(self) -> GraphQLSchema:
        """Parse all schema files and return the combined schema."""
        schema_files = self._collect_schema_files()
        if not schema_files:
            raise FileNotFoundError(f"No GraphQL schema files found in {self.schema_path}")

        sources = []
        for file_path in schema_files:
            with open(file_path, encoding="utf-8") as f:
                sources.append(f.read())

        try:
            self.schema = build_schema("\n".join(sources))
        except Exception as e:
            logger.error(
                "Error parsing %s: %s",
                ", ".join(os.path.basename(p) for p in schema_files),
                e,
            )
            raise
        return self.schema

    def _collect_schema_files(self) -> list[str]:
        """Collect all schema files from path."""
        files = []
        if os.path.isfile(self.schema_path):
            files.append(self.schema_path)
        else:
            for root, _, filenames in os.walk(self.schema_path):
                for filename in filenames:
                    if filename.endswith(SCHEMA_EXTENSIONS):
                        files.append(os.path.join(root, filename))
        return sorted(files)


def extract_operations(
    schema: GraphQLSchema, config: ToolsConfig | None = None
) -> list[IROperation]:
    """Turn the schema's root fields into a flat list of operations.

    Operations come out in root type order (query, mutation, subscription)
    and field declaration order. Later duplicates of an operation name are
    dropped.
    """
    config = config or ToolsConfig()
    roots: list[tuple[str, GraphQLObjectType | None]] = [
        ("query", schema.query_type),
        ("mutation", schema.mutation_type),
        ("subscription", schema.subscription_type),
    ]

    operations: list[IROperation] = []
    seen_fields: set[tuple[str, str]] = set()
    seen_names: set[str] = set()

    for op_type, root in roots:
        if root is None or not config.includes(op_type):
            continue
        prefix = config.prefix_for(op_type)

        for field_name, field in root.fields.items():
            if config.ignore_phrase and field.description and config.ignore_phrase in field.description:
                logger.debug("Skipping %s %s: description contains ignore phrase", op_type, field_name)
                continue
            if (op_type, field_name) in seen_fields:
                continue
            seen_fields.add((op_type, field_name))

            name = f"{prefix}{field_name}"
            if name in seen_names:
                logger.warning("Duplicate operation name %s (%s) ignored", name, op_type)
                continue
            seen_names.add(name)

            args = [
                IRArgument(
                    name=arg_name,
                    type_ref=arg.type,
                    description=arg.description,
                )
                for arg_name, arg in field.args.items()
            ]
            if len(args) > config.max_operation_arguments:
                logger.warning(
                    "Operation %s has %d arguments, processing only %d",
                    name, len(args), config.max_operation_arguments,
                )
                args = args[: config.max_operation_arguments]

            operations.append(
                IROperation(
                    name=name,
                    operation_type=op_type,
                    arguments=args,
                    return_type=field.type,
                    description=field.description,
                    field_name=field_name,
                )
            )

    if len(operations) > config.max_operations:
        logger.warning(
            "Schema has %d operations, processing only %d",
            len(operations), config.max_operations,
        )
        operations = operations[: config.max_operations]
    return operations
