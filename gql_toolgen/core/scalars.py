"""Scalar validators for argument compilation.

Maps GraphQL scalar names to argument validators. Unregistered (custom)
scalars are validated as strings.

Example usage:
    from gql_toolgen.core.scalars import ScalarRegistry
    from gql_toolgen.core.validators import AnyValidator, IntValidator

    registry = ScalarRegistry()
    registry.register("JSON", AnyValidator())
    registry.register("Long", IntValidator())
"""

from .validators import (
    BooleanValidator,
    FloatValidator,
    IntValidator,
    StringValidator,
    Validator,
)


class ScalarRegistry:
    """Registry of scalar validators.

    Example:
        registry = ScalarRegistry()
        registry.get("Int")       # IntValidator()
        registry.get("DateTime")  # StringValidator() fallback
    """

    fallback: Validator = StringValidator()

    def __init__(self):
        self._validators: dict[str, Validator] = {}
        # Register built-in scalars
        self._register_defaults()

    def _register_defaults(self):
        """Register the GraphQL specified scalars."""
        self.register("String", StringValidator())
        self.register("ID", StringValidator())
        self.register("Int", IntValidator())
        self.register("Float", FloatValidator())
        self.register("Boolean", BooleanValidator())

    def register(self, scalar_name: str, validator: Validator):
        """Register a validator for a scalar type."""
        self._validators[scalar_name] = validator

    def get(self, scalar_name: str) -> Validator:
        """Get the validator for a scalar, falling back to string."""
        return self._validators.get(scalar_name, self.fallback)

    def has(self, scalar_name: str) -> bool:
        """Check if a validator is registered for a scalar type."""
        return scalar_name in self._validators
