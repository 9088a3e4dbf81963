"""Exceptions raised while validating and rendering GraphQL operations.

Validation errors carry the operation name, the path of the offending value
and a human-readable reason. The compiler itself never raises for odd
schemas; it falls back to permissive validators instead.
"""

from typing import Sequence

PathSegment = str | int


def format_path(path: Sequence[PathSegment]) -> str:
    """Format a value path as ``posts[0].title``."""
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


class GQLToolError(Exception):
    """Base class for all gql-toolgen errors."""


class ValidationError(GQLToolError):
    """A caller-supplied value does not match a compiled validator."""

    code = "invalid"

    def __init__(
        self,
        reason: str,
        path: Sequence[PathSegment] = (),
        operation_name: str | None = None,
    ):
        self.reason = reason
        self.path = tuple(path)
        self.operation_name = operation_name
        super().__init__(self.message)

    @property
    def message(self) -> str:
        location = f" at '{format_path(self.path)}'" if self.path else ""
        prefix = f"Validation failed for {self.operation_name}: " if self.operation_name else ""
        return f"{prefix}{self.reason}{location}"

    def __str__(self) -> str:
        return self.message

    def for_operation(self, operation_name: str) -> "ValidationError":
        """Attach the operation name once it is known."""
        self.operation_name = operation_name
        self.args = (self.message,)
        return self


class MissingRequiredArgument(ValidationError):
    code = "missing_required"


class ArgumentTypeMismatch(ValidationError):
    code = "type_mismatch"


class InvalidListItem(ArgumentTypeMismatch):
    code = "invalid_list_item"


class InvalidEnumValue(ValidationError):
    code = "invalid_enum_value"


class UnknownSelectionField(ValidationError):
    code = "unknown_field"


class SelectionTypeMismatch(ValidationError):
    code = "selection_type_mismatch"


class UnknownOperationName(GQLToolError, KeyError):
    """No tool was compiled under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown operation: {name}")

    def __str__(self) -> str:
        return self.args[0]


class MissingRequiredVariableAtRender(GQLToolError):
    """A non-null argument has no variable when rendering the document."""

    def __init__(self, operation_name: str, argument_name: str):
        self.operation_name = operation_name
        self.argument_name = argument_name
        super().__init__(
            f"Missing required variable: {argument_name} (operation {operation_name})"
        )
