"""Compiles GraphQL output types into selection validators.

A selection is a nested mapping of field name to ``true``/``false`` or a
nested mapping, e.g. ``{"id": True, "posts": {"title": True}}``. Union
members and interface implementers are addressed by type name and rendered
as inline fragments.

Each operation also gets a default selection: the first-layer scalar and
enum fields of its return type that take no required arguments.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Union

from graphql import (
    GraphQLField,
    GraphQLSchema,
    GraphQLType,
    get_named_type,
    is_interface_type,
    is_leaf_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
    is_union_type,
)

from .cache import SchemaCache
from .config import ToolsConfig
from .errors import SelectionTypeMismatch
from .ir import IROperation
from .validators import (
    TYPENAME_FIELD,
    OpenSelectionObject,
    PermissiveSelection,
    SelectionLeaf,
    SelectionObject,
    Validator,
    type_label,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Selection nodes
# =============================================================================


@dataclass(frozen=True)
class Included:
    """The field is selected."""


@dataclass(frozen=True)
class Excluded:
    """The field is explicitly left out (``false`` or ``null``)."""


@dataclass(frozen=True)
class Nested:
    """A composite field with its own sub-selection."""
    children: dict[str, "SelectionNode"] = field(default_factory=dict)


SelectionNode = Union[Included, Excluded, Nested]

INCLUDED = Included()
EXCLUDED = Excluded()


def to_selection_node(value: Any) -> SelectionNode:
    """Convert a ``true``/``false``/mapping tree into selection nodes."""
    if isinstance(value, (Included, Excluded, Nested)):
        return value
    if value is True:
        return INCLUDED
    if isinstance(value, Mapping):
        return Nested({key: to_selection_node(sub) for key, sub in value.items()})
    return EXCLUDED


def selection_to_dict(node: SelectionNode) -> Any:
    """Inverse of ``to_selection_node``."""
    if isinstance(node, Nested):
        return {key: selection_to_dict(child) for key, child in node.children.items()}
    return isinstance(node, Included)


# =============================================================================
# Default selection
# =============================================================================


def has_required_arguments(gql_field: GraphQLField) -> bool:
    """True if the field declares at least one non-null argument."""
    return any(is_non_null_type(arg.type) for arg in gql_field.args.values())


def compute_defaults(type_ref: GraphQLType | None) -> dict[str, bool]:
    """Compute the default selection for a return type.

    Only first-layer scalar/enum fields (or lists of them) are selected.
    Fields with required arguments are skipped since no argument values are
    available for them. Unions select ``__typename`` only.
    """
    if type_ref is None:
        return {}
    named = get_named_type(type_ref)

    if is_union_type(named):
        return {TYPENAME_FIELD: True}
    if not (is_object_type(named) or is_interface_type(named)):
        return {}

    defaults = {}
    for field_name, gql_field in named.fields.items():
        if has_required_arguments(gql_field):
            continue
        if is_leaf_type(get_named_type(gql_field.type)):
            defaults[field_name] = True
    return defaults


@dataclass(frozen=True)
class SelectionSchema:
    """A selection validator with the default applied to empty selections."""
    validator: Validator
    default: dict[str, bool] = field(default_factory=dict)

    def validate(self, selection: Any) -> dict[str, Any]:
        """Validate a selection, substituting the default when it is empty.

        Returns the selection unchanged (``false`` entries included).
        """
        if selection is None or (isinstance(selection, Mapping) and not selection):
            return dict(self.default)
        if not isinstance(selection, Mapping):
            raise SelectionTypeMismatch(f"selection must be an object, got {type_label(selection)}")
        if isinstance(self.validator, SelectionLeaf):
            raise SelectionTypeMismatch("operation returns a scalar and takes no sub-selection")
        return self.validator.validate(selection)

    def json_schema(self) -> dict[str, Any]:
        schema = dict(self.validator.json_schema())
        schema["default"] = dict(self.default)
        return schema


# =============================================================================
# Compiler
# =============================================================================


class SelectionCompiler:
    """Builds selection validators for operations of one schema."""

    def __init__(
        self,
        schema: GraphQLSchema | None = None,
        config: ToolsConfig | None = None,
        cache: SchemaCache | None = None,
    ):
        self.schema = schema
        self.config = config or ToolsConfig()
        self.cache = cache if cache is not None else SchemaCache()

    def compile_operation(self, operation: IROperation) -> SelectionSchema:
        """Build the selection schema for an operation's return type."""
        if operation.return_type is None:
            return SelectionSchema(PermissiveSelection())
        return SelectionSchema(
            validator=self.compile_type(operation.return_type, set(), 0),
            default=compute_defaults(operation.return_type),
        )

    def compile_type(
        self,
        type_ref: GraphQLType,
        visited: set[str] | None = None,
        depth: int = 0,
    ) -> Validator:
        """Translate an output type into a selection validator.

        Wrappers are transparent: ``[User!]!`` selects like ``User``.
        Scalars and enums are always leaves. Composite types already being
        compiled on the current branch, or beyond the depth limit, become an
        open object: unknown keys pass, known fields are shape-checked on
        demand, and ``true`` is rejected. Results are cached per type name
        and depth.
        """
        if visited is None:
            visited = set()

        if is_non_null_type(type_ref) or is_list_type(type_ref):
            return self.compile_type(type_ref.of_type, visited, depth)

        # Scalars, enums and anything unresolvable are terminal at any depth
        if not (is_object_type(type_ref) or is_interface_type(type_ref) or is_union_type(type_ref)):
            return SelectionLeaf()

        if depth > self.config.max_schema_depth:
            logger.debug("Depth limit reached at %s, checking its selection lazily", type_ref.name)
            return self._open(type_ref)

        if type_ref.name in visited:
            return self._open(type_ref)

        key = ("output", type_ref.name, depth)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        visited.add(type_ref.name)
        try:
            if is_union_type(type_ref):
                result = SelectionObject(
                    type_ref.name,
                    fragments=self._compile_fragments(type_ref.types, visited, depth),
                )
            else:
                result = self._compile_fields(type_ref, visited, depth)
        finally:
            visited.discard(type_ref.name)
        return self.cache.set(key, result)

    def _compile_fields(self, type_ref, visited: set[str], depth: int) -> SelectionObject:
        field_entries = list(type_ref.fields.items())
        limit = self.config.max_selection_fields
        if len(field_entries) > limit:
            self.cache.warn(
                "Output type %s has %d fields, truncated to %d",
                type_ref.name, len(field_entries), limit,
            )

        # Arguments do not affect the selection shape
        fields = {
            field_name: self.compile_type(gql_field.type, visited, depth + 1)
            for field_name, gql_field in field_entries[:limit]
        }

        fragments = {}
        if is_interface_type(type_ref) and self.schema is not None:
            implementers = self.schema.get_possible_types(type_ref)
            fragments = self._compile_fragments(implementers, visited, depth)
        return SelectionObject(type_ref.name, fields=fields, fragments=fragments)

    def _compile_fragments(self, object_types, visited: set[str], depth: int) -> dict[str, Validator]:
        return {
            object_type.name: self.compile_type(object_type, visited, depth + 1)
            for object_type in object_types
        }

    def _open(self, named_type) -> OpenSelectionObject:
        return OpenSelectionObject(named_type.name, child=partial(self._open_child, named_type))

    def _open_child(self, named_type, key: str) -> Validator | None:
        """Resolve the validator for one key of an uncompiled composite type.

        Only the shape is enforced (leaf vs. composite); unknown keys
        resolve to ``None`` and pass through.
        """
        if is_union_type(named_type):
            members = {member.name: member for member in named_type.types}
            return self._open(members[key]) if key in members else None

        gql_field = named_type.fields.get(key)
        if gql_field is None:
            if is_interface_type(named_type) and self.schema is not None:
                for implementer in self.schema.get_possible_types(named_type):
                    if implementer.name == key:
                        return self._open(implementer)
            return None

        child_type = get_named_type(gql_field.type)
        if is_leaf_type(child_type):
            return SelectionLeaf()
        return self._open(child_type)
