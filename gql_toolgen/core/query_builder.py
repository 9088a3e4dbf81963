"""Query builder for GraphQL operations.

Constructs GraphQL query/mutation/subscription documents from operation
metadata, variables and a selection tree.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .errors import MissingRequiredVariableAtRender
from .ir import IRArgument, IROperation
from .selection import Included, Nested, SelectionNode, to_selection_node

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Builds GraphQL documents from operation metadata.

    Example:
        builder = QueryBuilder()
        builder.build(op, {"id": "1"}, {"id": True, "posts": {"title": True}})
        # 'query user($id: ID!) { user(id: $id) { id posts { title } } }'
    """

    def build(
        self,
        operation: IROperation,
        variables: Mapping[str, Any] | None = None,
        selection: Mapping[str, Any] | SelectionNode | None = None,
    ) -> str:
        """Build a GraphQL document string.

        Args:
            operation: The operation metadata
            variables: Variable values; only their presence is checked
            selection: Selection tree; ``None`` renders the bare call site

        Returns:
            Complete GraphQL document on a single line

        Raises:
            MissingRequiredVariableAtRender: If a non-null argument has no variable
        """
        variables = variables or {}
        self._check_variables(operation, variables)

        var_decls = self._build_variable_declarations(operation.arguments)
        field_args = self._build_field_arguments(operation.arguments)

        fields = ""
        if selection is not None:
            node = to_selection_node(selection)
            if isinstance(node, Nested):
                fields = self._build_selection(node)

        call = f"{operation.field_name}{field_args}"
        if fields:
            call = f"{call} {{ {fields} }}"

        return f"{operation.operation_type} {operation.name}{var_decls} {{ {call} }}"

    @staticmethod
    def _check_variables(operation: IROperation, variables: Mapping[str, Any]):
        """Fail on missing required variables, warn on unused ones."""
        for arg in operation.arguments:
            if arg.name not in variables and not arg.is_optional:
                raise MissingRequiredVariableAtRender(operation.name, arg.name)

        expected = {arg.name for arg in operation.arguments}
        for var_name in variables:
            if var_name not in expected:
                logger.warning(
                    "Variable '%s' is not used by operation '%s'", var_name, operation.name
                )

    @staticmethod
    def _build_variable_declarations(args: list[IRArgument]) -> str:
        """Build the variable declaration part: ($accountId: ID!, $input: SomeInput!)"""
        if not args:
            return ""
        return "(" + ", ".join(f"${arg.name}: {arg.type_name}" for arg in args) + ")"

    @staticmethod
    def _build_field_arguments(args: list[IRArgument]) -> str:
        """Build argument string for the root field: (accountId: $accountId, input: $input)"""
        if not args:
            return ""
        return "(" + ", ".join(f"{arg.name}: ${arg.name}" for arg in args) + ")"

    def _build_selection(self, node: Nested) -> str:
        """Render a selection tree as a space-separated field list.

        Capitalized keys holding a nested selection become inline fragments.
        Excluded fields and empty nested selections are left out.
        """
        parts = []
        for key, child in node.children.items():
            if isinstance(child, Included):
                parts.append(key)
            elif isinstance(child, Nested):
                inner = self._build_selection(child)
                if not inner:
                    continue
                if key[:1].isupper():
                    parts.append(f"... on {key} {{ {inner} }}")
                else:
                    parts.append(f"{key} {{ {inner} }}")
        return " ".join(parts)
