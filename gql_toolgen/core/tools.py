"""Per-operation tools: compiled validators plus a document renderer.

Example:
    tools = schema_parser("type Query { hello: String }")
    tools[0].render().query  # 'query hello { hello }'
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from graphql import GraphQLSchema
from pydantic import BaseModel, Field

from .arguments import ArgumentCompiler
from .cache import SchemaCache
from .config import ToolsConfig
from .errors import UnknownOperationName, ValidationError
from .ir import IROperation
from .parser import SchemaParser, extract_operations
from .query_builder import QueryBuilder
from .scalars import ScalarRegistry
from .selection import SelectionCompiler, SelectionSchema
from .validators import ObjectValidator

logger = logging.getLogger(__name__)


class RenderedOperation(BaseModel):
    """A rendered GraphQL document and its validated variables."""

    query: str
    variables: dict[str, Any] = Field(default_factory=dict)


@dataclass
class OperationTool:
    """One operation with its compiled validators."""
    operation: IROperation
    argument_validator: ObjectValidator
    selection_validator: SelectionSchema
    query_builder: QueryBuilder = field(default_factory=QueryBuilder)

    @property
    def name(self) -> str:
        return self.operation.name

    @property
    def description(self) -> str:
        op = self.operation
        return op.description or f"GraphQL {op.operation_type} operation: {op.name}"

    @property
    def default_selection(self) -> dict[str, bool]:
        return dict(self.selection_validator.default)

    def validate_arguments(self, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Validate caller variables against the operation's arguments."""
        try:
            return self.argument_validator.validate({} if variables is None else variables)
        except ValidationError as e:
            e.for_operation(self.name)
            raise

    def validate_selection(self, selection: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Validate a selection, falling back to the default when empty."""
        try:
            return self.selection_validator.validate(selection)
        except ValidationError as e:
            e.for_operation(self.name)
            raise

    def render(
        self,
        variables: Mapping[str, Any] | None = None,
        selection: Mapping[str, Any] | None = None,
    ) -> RenderedOperation:
        """Validate variables and selection, then build the document.

        The builder sees the caller's variable names so it can warn about
        ones the operation does not use; only validated values are returned.
        """
        validated_variables = self.validate_arguments(variables)
        validated_selection = self.validate_selection(selection)
        query = self.query_builder.build(self.operation, variables or {}, validated_selection)
        return RenderedOperation(query=query, variables=validated_variables)

    async def execute(
        self,
        variables: Mapping[str, Any] | None = None,
        selection: Mapping[str, Any] | None = None,
    ) -> RenderedOperation:
        """Async wrapper around ``render`` for tool-calling hosts. Performs no I/O."""
        return self.render(variables, selection)

    def input_schema(self) -> dict[str, Any]:
        return self.argument_validator.json_schema()

    def output_schema(self) -> dict[str, Any]:
        return self.selection_validator.json_schema()


class CompiledSchema:
    """All tools compiled from one schema, looked up by operation name."""

    def __init__(self, tools: list[OperationTool], cache: SchemaCache | None = None):
        self._tools: dict[str, OperationTool] = {}
        for tool in tools:
            self._tools.setdefault(tool.name, tool)
        self.cache = cache if cache is not None else SchemaCache()

    def get(self, name: str) -> OperationTool:
        """Look up a tool, raising ``UnknownOperationName`` if absent."""
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownOperationName(name) from None

    def __iter__(self) -> Iterator[OperationTool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    @property
    def diagnostics(self) -> list[str]:
        return list(self.cache.diagnostics)

    def validate_arguments(self, name: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return self.get(name).validate_arguments(variables)

    def validate_selection(self, name: str, selection: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return self.get(name).validate_selection(selection)

    def render(
        self,
        name: str,
        variables: Mapping[str, Any] | None = None,
        selection: Mapping[str, Any] | None = None,
    ) -> RenderedOperation:
        return self.get(name).render(variables, selection)


def compile_schema(
    schema: GraphQLSchema,
    config: ToolsConfig | None = None,
    cache: SchemaCache | None = None,
    scalars: ScalarRegistry | None = None,
    operations: list[IROperation] | None = None,
) -> CompiledSchema:
    """Compile argument and selection validators for every operation.

    Args:
        schema: The parsed schema
        config: Extraction and limit options
        cache: Memoization cache; a fresh one is used when omitted
        scalars: Validators for custom scalars
        operations: Pre-extracted operations; extracted from ``schema`` if omitted

    Returns:
        The compiled tools
    """
    config = config or ToolsConfig()
    cache = cache if cache is not None else SchemaCache()
    if operations is None:
        operations = extract_operations(schema, config)

    argument_compiler = ArgumentCompiler(config, cache, scalars)
    selection_compiler = SelectionCompiler(schema, config, cache)
    query_builder = QueryBuilder()

    tools = [
        OperationTool(
            operation=op,
            argument_validator=argument_compiler.compile_operation(op),
            selection_validator=selection_compiler.compile_operation(op),
            query_builder=query_builder,
        )
        for op in operations
    ]
    logger.debug("Compiled %d operations (%d cached validators)", len(tools), len(cache))
    return CompiledSchema(tools, cache)


def schema_parser(sdl: str, config: ToolsConfig | None = None) -> list[OperationTool]:
    """Parse SDL text and return one tool per extracted operation."""
    schema = SchemaParser.from_text(sdl)
    return list(compile_schema(schema, config))
