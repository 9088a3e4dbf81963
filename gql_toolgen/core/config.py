"""Configuration for operation extraction and schema compilation."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ToolsConfig(BaseModel):
    """Options recognised by the extractor and the compilers.

    Accepts both snake_case names and the camelCase aliases used in JSON
    configuration files (``includeMutations``, ``maxSchemaDepth``...).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    include_queries: bool = Field(default=True, alias="includeQueries")
    include_mutations: bool = Field(default=False, alias="includeMutations")
    include_subscriptions: bool = Field(default=False, alias="includeSubscriptions")

    query_name_prefix: str = Field(default="", alias="queryNamePrefix")
    mutation_name_prefix: str = Field(default="", alias="mutationNamePrefix")
    subscription_name_prefix: str = Field(default="", alias="subscriptionNamePrefix")

    # Root fields whose description contains this phrase are skipped
    ignore_phrase: str = Field(default="NO_MCP_TOOL", alias="ignorePhrase")

    max_operations: int = Field(default=200, ge=1, alias="maxOperations")
    max_operation_arguments: int = Field(default=50, ge=1, alias="maxOperationArguments")
    max_schema_depth: int = Field(default=10, ge=1, alias="maxSchemaDepth")
    max_argument_fields: int = Field(default=100, ge=1, alias="maxArgumentFields")
    max_selection_fields: int = Field(default=50, ge=1, alias="maxSelectionFields")

    @model_validator(mode="before")
    @classmethod
    def _expand_max_fields(cls, data: Any) -> Any:
        """``maxFieldsPerType`` sets both field caps unless they are given."""
        if isinstance(data, dict) and "maxFieldsPerType" in data:
            data = dict(data)
            limit = data.pop("maxFieldsPerType")
            data.setdefault("maxArgumentFields", limit)
            data.setdefault("maxSelectionFields", limit)
        return data

    @classmethod
    def from_file(cls, path: str | Path) -> "ToolsConfig":
        """Load a configuration from a JSON file."""
        with open(path) as f:
            return cls.model_validate(json.load(f))

    def prefix_for(self, operation_type: str) -> str:
        """Return the name prefix configured for an operation kind."""
        return {
            "query": self.query_name_prefix,
            "mutation": self.mutation_name_prefix,
            "subscription": self.subscription_name_prefix,
        }.get(operation_type, "")

    def includes(self, operation_type: str) -> bool:
        """Check whether operations of this kind are extracted."""
        return {
            "query": self.include_queries,
            "mutation": self.include_mutations,
            "subscription": self.include_subscriptions,
        }.get(operation_type, False)
