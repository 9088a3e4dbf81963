"""Compile GraphQL schemas into validated, renderable operation tools."""

from .core import (
    CompiledSchema,
    OperationTool,
    ToolsConfig,
    compile_schema,
    schema_parser,
)

__version__ = "0.1.0"

__all__ = [
    "CompiledSchema",
    "OperationTool",
    "ToolsConfig",
    "compile_schema",
    "schema_parser",
]
