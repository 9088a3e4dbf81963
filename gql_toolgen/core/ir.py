"""Intermediate Representation (IR) for extracted GraphQL operations.

Operations keep references into the graphql-core type graph so that the
compilers can walk argument and return types without re-reading the
schema text.
"""

from dataclasses import dataclass, field

from graphql import GraphQLInputType, GraphQLOutputType, get_named_type, is_list_type, is_non_null_type

OPERATION_TYPES = ("query", "mutation", "subscription")


@dataclass
class IRArgument:
    """Represents an argument to a root operation."""
    name: str
    type_ref: GraphQLInputType | None = None
    # GraphQL type literal, e.g. "[String!]"; derived from type_ref when omitted
    type_name: str = ""
    description: str | None = None

    def __post_init__(self):
        if not self.type_name and self.type_ref is not None:
            self.type_name = str(self.type_ref)

    @property
    def is_optional(self) -> bool:
        """True if the argument may be left out (no ! in GraphQL)."""
        if self.type_ref is not None:
            return not is_non_null_type(self.type_ref)
        return not self.type_name.endswith("!")


@dataclass
class IROperation:
    """Represents one root field of Query, Mutation or Subscription.

    ``name`` is the (possibly prefixed) operation name used for the tool and
    the document header; ``field_name`` is the root field that is called.
    """
    name: str
    operation_type: str  # 'query', 'mutation' or 'subscription'
    arguments: list[IRArgument] = field(default_factory=list)
    return_type: GraphQLOutputType | None = None
    description: str | None = None
    field_name: str = ""

    def __post_init__(self):
        if self.operation_type not in OPERATION_TYPES:
            raise ValueError(f"Unknown operation type: {self.operation_type}")
        if not self.field_name:
            self.field_name = self.name

    @property
    def return_type_name(self) -> str:
        return str(self.return_type) if self.return_type is not None else ""

    @property
    def named_return_type(self):
        """The return type with list and non-null wrappers removed."""
        return get_named_type(self.return_type) if self.return_type is not None else None

    @property
    def is_return_list(self) -> bool:
        rt = self.return_type
        if rt is not None and is_non_null_type(rt):
            rt = rt.of_type
        return rt is not None and is_list_type(rt)

    @property
    def required_arguments(self) -> list[IRArgument]:
        return [arg for arg in self.arguments if not arg.is_optional]
