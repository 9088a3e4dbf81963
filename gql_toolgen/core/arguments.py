"""Compiles GraphQL input types into argument validators.

Nullability becomes optionality on the enclosing object; lists become
``ListValidator``; enums and input objects are memoized by type name.
Cycles through input objects are broken by name with a permissive
placeholder.
"""

import logging

from graphql import (
    GraphQLEnumType,
    GraphQLInputObjectType,
    GraphQLType,
    is_enum_type,
    is_input_object_type,
    is_list_type,
    is_non_null_type,
    is_scalar_type,
)

from .cache import SchemaCache
from .config import ToolsConfig
from .ir import IROperation
from .scalars import ScalarRegistry
from .validators import (
    AnyValidator,
    EnumValidator,
    ListValidator,
    LiteralValidator,
    ObjectField,
    ObjectValidator,
    StringValidator,
    Validator,
)

logger = logging.getLogger(__name__)


class ArgumentCompiler:
    """Builds argument validators for operations of one schema."""

    def __init__(
        self,
        config: ToolsConfig | None = None,
        cache: SchemaCache | None = None,
        scalars: ScalarRegistry | None = None,
    ):
        self.config = config or ToolsConfig()
        self.cache = cache if cache is not None else SchemaCache()
        self.scalars = scalars or ScalarRegistry()

    def compile_operation(self, operation: IROperation) -> ObjectValidator:
        """Build the validator for an operation's whole variable set."""
        fields = {}
        for arg in operation.arguments:
            if arg.type_ref is None:
                validator: Validator = AnyValidator()
            else:
                validator = self.compile_type(arg.type_ref, set(), 0)
            fields[arg.name] = ObjectField(validator, optional=arg.is_optional)
        return ObjectValidator(fields, type_name=operation.name)

    def compile_type(
        self,
        type_ref: GraphQLType,
        visited: set[str] | None = None,
        depth: int = 0,
    ) -> Validator:
        """Translate an input type into a validator.

        Args:
            type_ref: The (possibly wrapped) GraphQL input type
            visited: Names of enum/input types being compiled on this branch
            depth: Input object nesting level

        Returns:
            The validator; the caller decides whether it is optional
        """
        if visited is None:
            visited = set()

        if depth > self.config.max_schema_depth:
            logger.debug("Depth limit reached at %s, accepting any value", type_ref)
            return AnyValidator()

        if is_non_null_type(type_ref):
            return self.compile_type(type_ref.of_type, visited, depth)

        if is_list_type(type_ref):
            inner = type_ref.of_type
            return ListValidator(
                self.compile_type(inner, visited, depth),
                item_optional=not is_non_null_type(inner),
            )

        if is_scalar_type(type_ref):
            return self.scalars.get(type_ref.name)

        if is_enum_type(type_ref):
            return self._compile_enum(type_ref, visited)

        if is_input_object_type(type_ref):
            return self._compile_input_object(type_ref, visited, depth)

        # Output-only kinds are not valid inputs; accept anything
        return AnyValidator()

    def _compile_enum(self, enum_type: GraphQLEnumType, visited: set[str]) -> Validator:
        key = ("enum", enum_type.name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if enum_type.name in visited:
            return StringValidator()

        visited.add(enum_type.name)
        try:
            values = list(enum_type.values.keys())
            if not values:
                validator: Validator = StringValidator()
            elif len(values) == 1:
                validator = LiteralValidator(values[0])
            else:
                validator = EnumValidator(tuple(values))
            return self.cache.set(key, validator)
        finally:
            visited.discard(enum_type.name)

    def _compile_input_object(
        self, input_type: GraphQLInputObjectType, visited: set[str], depth: int
    ) -> Validator:
        key = ("input", input_type.name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if input_type.name in visited:
            return ObjectValidator(permissive=True, type_name=input_type.name)

        visited.add(input_type.name)
        try:
            field_entries = list(input_type.fields.items())
            limit = self.config.max_argument_fields
            if len(field_entries) > limit:
                self.cache.warn(
                    "Input type %s has %d fields, truncated to %d",
                    input_type.name, len(field_entries), limit,
                )

            fields = {}
            for field_name, input_field in field_entries[:limit]:
                fields[field_name] = ObjectField(
                    self.compile_type(input_field.type, visited, depth + 1),
                    optional=not is_non_null_type(input_field.type),
                )
            return self.cache.set(key, ObjectValidator(fields, type_name=input_type.name))
        finally:
            visited.discard(input_type.name)
