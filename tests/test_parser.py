"""Tests for schema parsing and operation extraction."""

import pytest
from graphql import GraphQLError

from gql_toolgen.core.config import ToolsConfig
from gql_toolgen.core.ir import IRArgument, IROperation
from gql_toolgen.core.parser import SchemaParser, extract_operations

SDL = '''
type Query {
  "Fetch a user"
  user(id: ID!): User
  users(limit: Int, offset: Int, filter: String): [User!]!
  "Internal only. NO_MCP_TOOL"
  debug: String
}

type Mutation {
  createUser(name: String!): User
}

type Subscription {
  userAdded: User
}

type User {
  id: ID!
  name: String
}
'''


@pytest.fixture
def schema():
    return SchemaParser.from_text(SDL)


def names(operations):
    return [op.name for op in operations]


class TestExtractOperations:
    """Tests for extract_operations."""

    def test_defaults_extract_queries_only(self, schema):
        ops = extract_operations(schema)
        assert names(ops) == ["user", "users"]
        assert all(op.operation_type == "query" for op in ops)

    def test_ignore_phrase_skips_field(self, schema):
        assert "debug" not in names(extract_operations(schema))

    def test_empty_ignore_phrase_keeps_all(self, schema):
        ops = extract_operations(schema, ToolsConfig(ignore_phrase=""))
        assert "debug" in names(ops)

    def test_include_all_kinds_in_root_order(self, schema):
        config = ToolsConfig(include_mutations=True, include_subscriptions=True)
        ops = extract_operations(schema, config)
        assert names(ops) == ["user", "users", "createUser", "userAdded"]
        assert [op.operation_type for op in ops] == ["query", "query", "mutation", "subscription"]

    def test_exclude_queries(self, schema):
        config = ToolsConfig(include_queries=False, include_mutations=True)
        assert names(extract_operations(schema, config)) == ["createUser"]

    def test_name_prefix(self, schema):
        config = ToolsConfig(query_name_prefix="q_", include_mutations=True, mutation_name_prefix="m_")
        ops = extract_operations(schema, config)
        assert names(ops) == ["q_user", "q_users", "m_createUser"]
        assert ops[0].field_name == "user"

    def test_duplicate_names_keep_first(self):
        schema = SchemaParser.from_text(
            "type Query { ping: String } type Mutation { ping: String }"
        )
        ops = extract_operations(schema, ToolsConfig(include_mutations=True))
        assert len(ops) == 1
        assert ops[0].operation_type == "query"

    def test_max_operations(self, schema):
        ops = extract_operations(schema, ToolsConfig(max_operations=1))
        assert names(ops) == ["user"]

    def test_max_operation_arguments(self, schema):
        ops = extract_operations(schema, ToolsConfig(max_operation_arguments=2))
        users = ops[1]
        assert [arg.name for arg in users.arguments] == ["limit", "offset"]

    def test_argument_records(self, schema):
        user = extract_operations(schema)[0]
        arg = user.arguments[0]
        assert arg.name == "id"
        assert arg.type_name == "ID!"
        assert arg.is_optional is False
        assert user.description == "Fetch a user"
        assert user.return_type_name == "User"

    def test_return_type_helpers(self, schema):
        users = extract_operations(schema)[1]
        assert users.return_type_name == "[User!]!"
        assert users.is_return_list is True
        assert users.named_return_type.name == "User"


class TestSchemaParser:
    """Tests for loading schema files."""

    def test_parse_single_file(self, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text(SDL)
        schema = SchemaParser(str(path)).parse_all()
        assert schema.query_type.name == "Query"

    def test_parse_directory(self, tmp_path):
        (tmp_path / "a_query.graphqls").write_text("type Query { user: User }")
        (tmp_path / "b_types.graphql").write_text("type User { id: ID! }")
        (tmp_path / "notes.txt").write_text("not a schema")
        (tmp_path / "old.gql").write_text("type Query {")
        schema = SchemaParser(str(tmp_path)).parse_all()
        assert "id" in schema.get_type("User").fields

    def test_empty_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SchemaParser(str(tmp_path)).parse_all()

    def test_invalid_sdl(self, tmp_path):
        path = tmp_path / "broken.graphql"
        path.write_text("type Query {")
        with pytest.raises(GraphQLError):
            SchemaParser(str(path)).parse_all()


class TestIR:
    """Tests for IR records built by hand."""

    def test_argument_optional_from_type_name(self):
        assert IRArgument(name="id", type_name="ID!").is_optional is False
        assert IRArgument(name="tags", type_name="[String!]").is_optional is True

    def test_field_name_defaults_to_name(self):
        op = IROperation(name="hello", operation_type="query")
        assert op.field_name == "hello"

    def test_unknown_operation_type(self):
        with pytest.raises(ValueError, match="Unknown operation type: invalid"):
            IROperation(name="test", operation_type="invalid")

    def test_required_arguments(self):
        op = IROperation(
            name="deleteUser",
            operation_type="mutation",
            arguments=[
                IRArgument(name="id", type_name="ID!"),
                IRArgument(name="reason", type_name="String"),
            ],
        )
        assert [arg.name for arg in op.required_arguments] == ["id"]
