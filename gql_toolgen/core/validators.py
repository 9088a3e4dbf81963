"""Compiled validator trees.

Argument validators mirror GraphQL input types; selection validators mirror
output types and accept ``true``/``false``/nested mappings. Each variant
implements ``check`` (collect issues, return the accepted value) and
``json_schema``.

Example:
    validator = ObjectValidator({"id": ObjectField(StringValidator())})
    validator.validate({"id": "42"})  # {"id": "42"}
    validator.validate({})            # raises MissingRequiredArgument
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import (
    ArgumentTypeMismatch,
    InvalidEnumValue,
    InvalidListItem,
    MissingRequiredArgument,
    PathSegment,
    SelectionTypeMismatch,
    UnknownSelectionField,
    ValidationError,
)

logger = logging.getLogger(__name__)

Path = tuple[PathSegment, ...]

TYPENAME_FIELD = "__typename"


def type_label(value: Any) -> str:
    """Name a Python value by its JSON type."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def first_issue(issues: list[ValidationError]) -> ValidationError:
    """Pick the issue to report: a missing required value wins, else the first found."""
    for issue in issues:
        if isinstance(issue, MissingRequiredArgument):
            return issue
    return issues[0]


class Validator:
    """Base class for all compiled validators."""

    kind = "any"

    def check(self, value: Any, path: Path, issues: list[ValidationError]) -> Any:
        raise NotImplementedError

    def validate(self, value: Any) -> Any:
        """Validate a value, raising the first issue found."""
        issues: list[ValidationError] = []
        result = self.check(value, (), issues)
        if issues:
            raise first_issue(issues)
        return result

    def json_schema(self) -> dict[str, Any]:
        raise NotImplementedError


# =============================================================================
# Argument validators
# =============================================================================


@dataclass(frozen=True)
class AnyValidator(Validator):
    """Accepts every value. Used for types that cannot appear as inputs."""

    kind = "any"

    def check(self, value, path, issues):
        return value

    def json_schema(self):
        return {}


@dataclass(frozen=True)
class StringValidator(Validator):
    kind = "string"

    def check(self, value, path, issues):
        if not isinstance(value, str):
            issues.append(ArgumentTypeMismatch(f"expected string, got {type_label(value)}", path))
        return value

    def json_schema(self):
        return {"type": "string"}


@dataclass(frozen=True)
class IntValidator(Validator):
    kind = "int"

    def check(self, value, path, issues):
        if isinstance(value, bool):
            issues.append(ArgumentTypeMismatch("expected integer, got boolean", path))
        elif isinstance(value, int):
            return value
        elif isinstance(value, float) and value.is_integer():
            return int(value)
        else:
            issues.append(ArgumentTypeMismatch(f"expected integer, got {type_label(value)}", path))
        return value

    def json_schema(self):
        return {"type": "integer"}


@dataclass(frozen=True)
class FloatValidator(Validator):
    kind = "float"

    def check(self, value, path, issues):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            issues.append(ArgumentTypeMismatch(f"expected number, got {type_label(value)}", path))
        return value

    def json_schema(self):
        return {"type": "number"}


@dataclass(frozen=True)
class BooleanValidator(Validator):
    kind = "boolean"

    def check(self, value, path, issues):
        if not isinstance(value, bool):
            issues.append(ArgumentTypeMismatch(f"expected boolean, got {type_label(value)}", path))
        return value

    def json_schema(self):
        return {"type": "boolean"}


@dataclass(frozen=True)
class LiteralValidator(Validator):
    """An enum with a single member."""

    value: str
    kind = "literal"

    def check(self, value, path, issues):
        if value != self.value:
            issues.append(InvalidEnumValue(f"invalid enum value {value!r}, expected {self.value!r}", path))
        return value

    def json_schema(self):
        return {"const": self.value}


@dataclass(frozen=True)
class EnumValidator(Validator):
    values: tuple[str, ...]
    kind = "enum"

    def check(self, value, path, issues):
        if not isinstance(value, str):
            issues.append(ArgumentTypeMismatch(f"expected enum string, got {type_label(value)}", path))
        elif value not in self.values:
            issues.append(
                InvalidEnumValue(
                    f"invalid enum value {value!r}, expected one of {', '.join(self.values)}", path
                )
            )
        return value

    def json_schema(self):
        return {"type": "string", "enum": list(self.values)}


@dataclass(frozen=True)
class ListValidator(Validator):
    item: Validator
    item_optional: bool = True  # False for [T!]
    kind = "list"

    def check(self, value, path, issues):
        if not isinstance(value, (list, tuple)):
            issues.append(ArgumentTypeMismatch(f"expected array, got {type_label(value)}", path))
            return value

        result = []
        for i, item in enumerate(value):
            item_path = (*path, i)
            if item is None:
                if not self.item_optional:
                    issues.append(InvalidListItem("list item must not be null", item_path))
                result.append(None)
                continue
            item_issues: list[ValidationError] = []
            result.append(self.item.check(item, item_path, item_issues))
            for issue in item_issues:
                if type(issue) is ArgumentTypeMismatch and issue.path == item_path:
                    issue = InvalidListItem(issue.reason, issue.path)
                issues.append(issue)
        return result

    def json_schema(self):
        items = self.item.json_schema()
        if self.item_optional and items:
            items = {"anyOf": [items, {"type": "null"}]}
        return {"type": "array", "items": items}


@dataclass(frozen=True)
class ObjectField:
    validator: Validator
    optional: bool = False


@dataclass(frozen=True)
class ObjectValidator(Validator):
    """An input object or an operation's argument set.

    A ``permissive`` object accepts any mapping unchecked; it stands in for
    input types that are already being compiled higher up (cycles).
    Unknown keys of a non-permissive object are dropped.
    """

    fields: dict[str, ObjectField] = field(default_factory=dict)
    permissive: bool = False
    type_name: str | None = None
    kind = "object"

    def check(self, value, path, issues):
        if not isinstance(value, Mapping):
            issues.append(ArgumentTypeMismatch(f"expected object, got {type_label(value)}", path))
            return value
        if self.permissive:
            return dict(value)

        result: dict[str, Any] = {}
        for name, entry in self.fields.items():
            field_path = (*path, name)
            if name not in value:
                if not entry.optional:
                    issues.append(MissingRequiredArgument(f"missing required field '{name}'", field_path))
                continue
            field_value = value[name]
            if field_value is None:
                if entry.optional:
                    result[name] = None
                else:
                    issues.append(MissingRequiredArgument(f"required field '{name}' is null", field_path))
                continue
            result[name] = entry.validator.check(field_value, field_path, issues)

        unknown = [key for key in value if key not in self.fields]
        if unknown:
            logger.debug("Dropping unknown keys %s of %s", unknown, self.type_name or "object")
        return result

    def json_schema(self):
        if self.permissive:
            return {"type": "object"}
        properties = {}
        for name, entry in self.fields.items():
            schema = entry.validator.json_schema()
            if entry.optional and schema:
                schema = {"anyOf": [schema, {"type": "null"}]}
            properties[name] = schema
        result: dict[str, Any] = {"type": "object", "properties": properties}
        required = [name for name, entry in self.fields.items() if not entry.optional]
        if required:
            result["required"] = required
        return result


# =============================================================================
# Selection validators
# =============================================================================


@dataclass(frozen=True)
class SelectionLeaf(Validator):
    """A scalar or enum field: selected with ``true``, excluded with ``false``."""

    kind = "selection_leaf"

    def check(self, value, path, issues):
        if value is not None and not isinstance(value, bool):
            issues.append(SelectionTypeMismatch(f"expected true or false, got {type_label(value)}", path))
        return value

    def json_schema(self):
        return {"type": "boolean"}


@dataclass(frozen=True)
class PermissiveSelection(Validator):
    """Accepts any selection shape. Used when an operation has no return type."""

    kind = "selection_any"

    def check(self, value, path, issues):
        if value is not None and not isinstance(value, (bool, Mapping)):
            issues.append(
                SelectionTypeMismatch(f"expected a selection object or boolean, got {type_label(value)}", path)
            )
        return value

    def json_schema(self):
        return {"type": ["object", "boolean"]}


@dataclass(frozen=True)
class OpenSelectionObject(Validator):
    """A composite type that is not compiled ahead of time.

    Stands in for cyclic or too-deep object types. Unknown keys pass
    through; known fields are shape-checked on demand through ``child``,
    which maps a field or fragment name to its validator (or ``None``).
    A composite field needs a sub-selection, so ``true`` is rejected.
    """

    kind = "selection_open_object"
    type_name: str = ""
    child: Callable[[str], "Validator | None"] | None = field(default=None, compare=False, repr=False)

    def check(self, value, path, issues):
        if value is None or value is False:
            return value
        if not isinstance(value, Mapping):
            issues.append(
                SelectionTypeMismatch(
                    f"field of type {self.type_name or 'object'} requires a selection object, "
                    f"got {type_label(value)}",
                    path,
                )
            )
            return value

        for key, sub in value.items():
            if key == TYPENAME_FIELD:
                validator = SelectionLeaf()
            elif self.child is not None:
                validator = self.child(key)
            else:
                validator = None
            if validator is not None:
                validator.check(sub, (*path, key), issues)
        return value

    def json_schema(self):
        return {"type": "object"}


@dataclass(frozen=True)
class SelectionObject(Validator):
    """A strict selection over an object, interface or union type.

    ``fields`` holds the type's own fields; ``fragments`` holds per-type
    shapes (union members, interface implementers) addressed by type name
    and rendered as inline fragments.
    """

    type_name: str
    fields: dict[str, Validator] = field(default_factory=dict)
    fragments: dict[str, Validator] = field(default_factory=dict)
    kind = "selection_object"

    def check(self, value, path, issues):
        if value is None or value is False:
            return value
        if not isinstance(value, Mapping):
            issues.append(
                SelectionTypeMismatch(
                    f"field of type {self.type_name} requires a selection object, got {type_label(value)}",
                    path,
                )
            )
            return value

        result: dict[str, Any] = {}
        for key, sub in value.items():
            key_path = (*path, key)
            if key == TYPENAME_FIELD:
                result[key] = SelectionLeaf().check(sub, key_path, issues)
            elif key in self.fields:
                result[key] = self.fields[key].check(sub, key_path, issues)
            elif key in self.fragments:
                result[key] = self.fragments[key].check(sub, key_path, issues)
            else:
                issues.append(UnknownSelectionField(f"unknown field '{key}' on type {self.type_name}", key_path))
        return result

    def json_schema(self):
        properties: dict[str, Any] = {TYPENAME_FIELD: {"type": "boolean"}}
        for name, validator in self.fields.items():
            properties[name] = validator.json_schema()
        for name, fragment in self.fragments.items():
            properties.setdefault(name, fragment.json_schema())
        return {"type": "object", "properties": properties, "additionalProperties": False}
