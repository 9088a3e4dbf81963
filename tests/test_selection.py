"""Tests for the selection validator compiler and default selections."""

import time

import pytest

from gql_toolgen.core.cache import SchemaCache
from gql_toolgen.core.config import ToolsConfig
from gql_toolgen.core.errors import SelectionTypeMismatch, UnknownSelectionField
from gql_toolgen.core.parser import SchemaParser, extract_operations
from gql_toolgen.core.selection import (
    EXCLUDED,
    INCLUDED,
    Nested,
    SelectionCompiler,
    compute_defaults,
    has_required_arguments,
    selection_to_dict,
    to_selection_node,
)
from gql_toolgen.core.validators import OpenSelectionObject, SelectionLeaf, SelectionObject

SDL = '''
enum Status { DRAFT PUBLISHED }

interface Node { id: ID! }

type User implements Node {
  id: ID!
  name: String
  email: String!
  roles: [String!]!
  status: Status
  posts(status: Status!): [Post!]!
  recent(limit: Int): [Post!]
  avatar(size: Int!): String
  friends: [User!]
}

type Post implements Node {
  id: ID!
  title: String!
  author: User!
}

type Dog { name: String breed: String }
type Cat { name: String lives: Int }
union Pet = Dog | Cat

type Query {
  user(id: ID!): User
  users: [User!]!
  node(id: ID!): Node
  pets: [Pet!]!
  hello: String
}
'''


@pytest.fixture
def schema():
    return SchemaParser.from_text(SDL)


@pytest.fixture
def operations(schema):
    return {op.name: op for op in extract_operations(schema)}


@pytest.fixture
def compiler(schema):
    return SelectionCompiler(schema)


class TestDefaultSelection:
    """Tests for compute_defaults."""

    def test_first_layer_scalars_and_enums(self, schema):
        assert compute_defaults(schema.get_type("User")) == {
            "id": True,
            "name": True,
            "email": True,
            "roles": True,
            "status": True,
        }

    def test_fields_with_required_arguments_excluded(self, schema):
        user = schema.get_type("User")
        defaults = compute_defaults(user)
        for field_name, gql_field in user.fields.items():
            if has_required_arguments(gql_field):
                assert field_name not in defaults
        assert "avatar" not in defaults
        assert "posts" not in defaults

    def test_list_return_type_uses_item_type(self, operations):
        assert "email" in compute_defaults(operations["users"].return_type)

    def test_interface(self, schema):
        assert compute_defaults(schema.get_type("Node")) == {"id": True}

    def test_union_selects_typename(self, operations):
        assert compute_defaults(operations["pets"].return_type) == {"__typename": True}

    def test_scalar_has_no_default(self, operations):
        assert compute_defaults(operations["hello"].return_type) == {}
        assert compute_defaults(None) == {}


class TestSelectionValidation:
    """Tests for validating selection trees."""

    def test_empty_selection_uses_default(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        assert schema.validate({}) == schema.default
        assert schema.validate(None) == schema.default

    def test_default_is_copied(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        result = schema.validate(None)
        result["extra"] = True
        assert "extra" not in schema.default

    def test_unknown_field(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(UnknownSelectionField) as exc_info:
            schema.validate({"id": True, "nonExistentField": True})
        assert exc_info.value.path == ("nonExistentField",)

    def test_field_with_required_argument_selectable(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        selection = {"posts": {"title": True}}
        assert schema.validate(selection) == selection

    def test_false_entries_preserved(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        selection = {"id": True, "name": False, "email": None}
        assert schema.validate(selection) == selection

    def test_object_field_needs_nested_selection(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(SelectionTypeMismatch) as exc_info:
            schema.validate({"posts": True})
        assert exc_info.value.path == ("posts",)

    def test_leaf_rejects_mapping(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(SelectionTypeMismatch) as exc_info:
            schema.validate({"name": {"first": True}})
        assert exc_info.value.path == ("name",)

    def test_nested_unknown_field(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(UnknownSelectionField) as exc_info:
            schema.validate({"posts": {"body": True}})
        assert exc_info.value.path == ("posts", "body")

    def test_typename_allowed(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        assert schema.validate({"__typename": True}) == {"__typename": True}

    def test_selection_must_be_object(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(SelectionTypeMismatch):
            schema.validate(True)

    def test_scalar_operation(self, compiler, operations):
        schema = compiler.compile_operation(operations["hello"])
        assert schema.validate({}) == {}
        with pytest.raises(SelectionTypeMismatch):
            schema.validate({"length": True})


class TestUnionsAndInterfaces:
    """Tests for fragment-addressed selections."""

    def test_union_member_selection(self, compiler, operations):
        schema = compiler.compile_operation(operations["pets"])
        selection = {"__typename": True, "Dog": {"breed": True}}
        assert schema.validate(selection) == selection

    def test_union_member_fields_not_at_top_level(self, compiler, operations):
        schema = compiler.compile_operation(operations["pets"])
        with pytest.raises(UnknownSelectionField):
            schema.validate({"breed": True})

    def test_union_member_unknown_field(self, compiler, operations):
        schema = compiler.compile_operation(operations["pets"])
        with pytest.raises(UnknownSelectionField) as exc_info:
            schema.validate({"Dog": {"lives": True}})
        assert exc_info.value.path == ("Dog", "lives")

    def test_interface_implementer_fragment(self, compiler, operations):
        schema = compiler.compile_operation(operations["node"])
        selection = {"id": True, "Post": {"title": True}}
        assert schema.validate(selection) == selection

    def test_interface_without_schema_has_no_fragments(self, operations):
        schema = SelectionCompiler().compile_operation(operations["node"])
        with pytest.raises(UnknownSelectionField):
            schema.validate({"Post": {"title": True}})


class TestCyclesAndLimits:
    """Tests for cycle breaking, depth and field caps."""

    def test_cyclic_field_is_open(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        assert schema.validator.fields["friends"] == OpenSelectionObject("User")
        selection = {"friends": {"anything": {"goes": True}}}
        assert schema.validate(selection) == selection

    def test_cyclic_field_rejects_true(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(SelectionTypeMismatch) as exc_info:
            schema.validate({"id": True, "friends": True})
        assert exc_info.value.path == ("friends",)

    def test_cyclic_field_can_be_excluded(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        assert schema.validate({"id": True, "friends": False}) == {"id": True, "friends": False}

    def test_cyclic_field_checks_known_fields(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        with pytest.raises(SelectionTypeMismatch) as exc_info:
            schema.validate({"friends": {"name": {"first": True}}})
        assert exc_info.value.path == ("friends", "name")
        with pytest.raises(SelectionTypeMismatch) as exc_info:
            schema.validate({"friends": {"posts": True}})
        assert exc_info.value.path == ("friends", "posts")
        selection = {"friends": {"posts": {"author": {"name": True}}}}
        assert schema.validate(selection) == selection

    def test_cycle_through_other_type(self, compiler, operations):
        schema = compiler.compile_operation(operations["user"])
        posts = schema.validator.fields["posts"]
        assert isinstance(posts, SelectionObject)
        assert posts.fields["author"] == OpenSelectionObject("User")

    def test_mutually_recursive_types_terminate(self):
        schema = SchemaParser.from_text(
            "type A { b: B name: String } type B { a: A name: String } type Query { a: A }"
        )
        compiler = SelectionCompiler(schema, ToolsConfig(max_schema_depth=50))
        op = extract_operations(schema)[0]
        selection_schema = compiler.compile_operation(op)
        deep = {"b": {"a": {"b": {"a": {"name": True}}}}}
        assert selection_schema.validate(deep) == deep

    def test_densely_linked_types_stay_bounded(self):
        count = 20
        types = []
        for i in range(count):
            links = " ".join(f"t{j}: T{j}" for j in range(count) if j != i)
            types.append(f"type T{i} {{ id: ID {links} }}")
        schema = SchemaParser.from_text("\n".join(types) + "\ntype Query { t0: T0 }")
        config = ToolsConfig()
        cache = SchemaCache()

        started = time.perf_counter()
        SelectionCompiler(schema, config, cache).compile_operation(extract_operations(schema)[0])
        assert time.perf_counter() - started < 5
        assert len(cache) <= count * (config.max_schema_depth + 1)

    def test_depth_limit(self, schema, operations):
        compiler = SelectionCompiler(schema, ToolsConfig(max_schema_depth=1))
        validator = compiler.compile_operation(operations["user"]).validator
        posts = validator.fields["posts"]
        assert isinstance(posts, SelectionObject)
        assert posts.fields["title"] == SelectionLeaf()
        assert posts.fields["author"] == OpenSelectionObject("User")

    def test_leaf_past_depth_limit_rejects_nesting(self):
        schema = SchemaParser.from_text(
            "type C { name: String } type B { c: C } type A { b: B } type Query { a: A }"
        )
        compiler = SelectionCompiler(schema, ToolsConfig(max_schema_depth=1))
        selection_schema = compiler.compile_operation(extract_operations(schema)[0])
        with pytest.raises(SelectionTypeMismatch) as exc_info:
            selection_schema.validate({"b": {"c": {"name": {"oops": True}}}})
        assert exc_info.value.path == ("b", "c", "name")

    def test_field_cap(self, schema, operations):
        cache = SchemaCache()
        compiler = SelectionCompiler(schema, ToolsConfig(max_selection_fields=2), cache)
        selection_schema = compiler.compile_operation(operations["user"])
        assert list(selection_schema.validator.fields) == ["id", "name"]
        assert any("User" in note for note in cache.diagnostics)
        with pytest.raises(UnknownSelectionField):
            selection_schema.validate({"email": True})

    def test_cached_per_type_and_depth(self, compiler, schema):
        user = schema.get_type("User")
        first = compiler.compile_type(user)
        assert compiler.compile_type(user) is first
        assert compiler.compile_type(user, depth=1) is not first

    def test_wrappers_are_transparent(self, compiler, operations):
        validator = compiler.compile_operation(operations["users"]).validator
        assert isinstance(validator, SelectionObject)
        assert validator.type_name == "User"
        assert validator.fields["roles"] == SelectionLeaf()


class TestSelectionNodes:
    """Tests for the selection node conversions."""

    def test_to_selection_node(self):
        node = to_selection_node({"a": True, "b": False, "c": None, "d": {"e": True}})
        assert node == Nested({
            "a": INCLUDED,
            "b": EXCLUDED,
            "c": EXCLUDED,
            "d": Nested({"e": INCLUDED}),
        })

    def test_nodes_pass_through(self):
        node = Nested({"a": INCLUDED})
        assert to_selection_node(node) is node

    def test_selection_to_dict(self):
        node = to_selection_node({"a": True, "c": None, "d": {"e": True}})
        assert selection_to_dict(node) == {"a": True, "c": False, "d": {"e": True}}


class TestJsonSchema:
    """Tests for JSON Schema export of selection validators."""

    def test_output_schema(self, compiler, operations):
        schema = compiler.compile_operation(operations["pets"]).json_schema()
        assert schema["additionalProperties"] is False
        assert schema["default"] == {"__typename": True}
        assert schema["properties"]["Dog"]["properties"]["breed"] == {"type": "boolean"}
