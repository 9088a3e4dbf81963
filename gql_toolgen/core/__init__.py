"""Core modules for compiling GraphQL operations into validated tools."""

from .arguments import ArgumentCompiler
from .cache import SchemaCache
from .config import ToolsConfig
from .errors import (
    ArgumentTypeMismatch,
    GQLToolError,
    InvalidEnumValue,
    InvalidListItem,
    MissingRequiredArgument,
    MissingRequiredVariableAtRender,
    SelectionTypeMismatch,
    UnknownOperationName,
    UnknownSelectionField,
    ValidationError,
)
from .ir import IRArgument, IROperation
from .parser import SchemaParser, extract_operations
from .query_builder import QueryBuilder
from .scalars import ScalarRegistry
from .selection import (
    Excluded,
    Included,
    Nested,
    SelectionCompiler,
    SelectionSchema,
    compute_defaults,
    selection_to_dict,
    to_selection_node,
)
from .tools import (
    CompiledSchema,
    OperationTool,
    RenderedOperation,
    compile_schema,
    schema_parser,
)

__all__ = [
    # Config
    "ToolsConfig",
    # Errors
    "GQLToolError",
    "ValidationError",
    "MissingRequiredArgument",
    "ArgumentTypeMismatch",
    "InvalidListItem",
    "InvalidEnumValue",
    "UnknownSelectionField",
    "SelectionTypeMismatch",
    "UnknownOperationName",
    "MissingRequiredVariableAtRender",
    # IR types
    "IRArgument",
    "IROperation",
    # Parser
    "SchemaParser",
    "extract_operations",
    # Compilers
    "ArgumentCompiler",
    "SelectionCompiler",
    "SelectionSchema",
    "SchemaCache",
    "ScalarRegistry",
    "compute_defaults",
    # Selection nodes
    "Included",
    "Excluded",
    "Nested",
    "to_selection_node",
    "selection_to_dict",
    # Query Builder
    "QueryBuilder",
    # Tools
    "CompiledSchema",
    "OperationTool",
    "RenderedOperation",
    "compile_schema",
    "schema_parser",
]
