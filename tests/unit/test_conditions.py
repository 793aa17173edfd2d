"""Tests for WHERE condition trees and their compilation."""

import pytest

from chainsql import ChainBuilder, ChainSQLError, ErrorCode
from chainsql.compiler import get_compiler
from chainsql.query import AndGroup, ConditionGroup, OrGroup, ValueCondition


@pytest.fixture
def users():
    """SELECT * FROM users on MySQL."""
    return ChainBuilder("mysql").table("users").select()


class TestConditionMutators:
    """Test that mutators append the expected nodes."""

    def test_where_eq_appends_value_condition(self, users):
        """Test where_eq appends one leaf and returns the query builder."""
        query = users.query()
        result = query.where_eq("name", "John")

        assert result is query
        assert len(query.statements) == 1
        node = query.statements[0]
        assert isinstance(node, ValueCondition)
        assert node.column == "name"
        assert node.operator == "EQUAL"
        assert node.value == "John"

    def test_or_returns_child_group(self, users):
        """Test or_() appends an OrGroup and returns its child for mutation."""
        query = users.query()
        child = query.where_eq("status", "active").or_()
        child.where_eq("status", "pending")

        assert isinstance(child, ConditionGroup)
        assert isinstance(query.statements[1], OrGroup)
        assert query.statements[1].group is child
        assert len(child.statements) == 1

    def test_and_returns_child_group(self, users):
        """Test and_() appends an AndGroup and returns its child."""
        query = users.query()
        child = query.and_()

        assert isinstance(query.statements[0], AndGroup)
        assert query.statements[0].group is child

    def test_where_group_returns_parent(self, users):
        """Test where_group configures the child and returns the parent."""
        query = users.query()
        result = query.where_group(lambda group: group.where_eq("a", 1))

        assert result is query
        assert isinstance(query.statements[0], AndGroup)


class TestConditionCompilation:
    """Test rendering of condition trees."""

    def test_or_branch_after_value(self, users):
        """An OR branch after a leaf is joined with OR and nothing else."""
        users.query().where_eq("status", "active").or_().where_eq("status", "pending")

        sql, binds = users.to_sql()

        assert sql == "SELECT * FROM users WHERE status = ? OR status = ?"
        assert binds == ["active", "pending"]

    def test_nested_groups_and_raw(self):
        """Test a mix of leaves, nested AND/OR groups and raw SQL."""
        builder = ChainBuilder("mysql").db("mydb").select("*").table("users")
        query = builder.query()
        query.where_eq("name", "John")
        query.where_eq("city", "New York")
        query.where_in("department", ["IT", "HR"])
        query.where_group(
            lambda sub: sub.where_eq("status", "active")
            .or_()
            .where_eq("status", "pending")
            .where_between("registered_at", ["2024-01-01", "2024-01-31"])
        )
        query.where_raw(
            "(latitude BETWEEN ? AND ?) AND (longitude BETWEEN ? AND ?)",
            [40.0, 41.0, 70.0, 71.0],
        )
        builder.add_raw("LIMIT ?", [10])

        sql, binds = builder.to_sql()

        assert sql == (
            "SELECT * FROM mydb.users WHERE name = ? AND city = ? AND department IN (?,?) "
            "AND (status = ? OR (status = ? AND registered_at BETWEEN ? AND ?)) "
            "AND (latitude BETWEEN ? AND ?) AND (longitude BETWEEN ? AND ?) LIMIT ?"
        )
        assert binds == [
            "John", "New York", "IT", "HR", "active", "pending",
            "2024-01-01", "2024-01-31", 40.0, 41.0, 70.0, 71.0, 10,
        ]

    def test_between_binds_both_values(self, users):
        """Test BETWEEN renders two placeholders in order."""
        users.query().where_between("age", [18, 65])

        assert users.to_sql() == ("SELECT * FROM users WHERE age BETWEEN ? AND ?", [18, 65])

    def test_not_between_accepts_tuple(self, users):
        """Test NOT BETWEEN with a tuple value."""
        users.query().where_not_between("age", (18, 65))

        assert users.to_sql() == ("SELECT * FROM users WHERE age NOT BETWEEN ? AND ?", [18, 65])

    @pytest.mark.parametrize("value", [[18], [18, 30, 65], [], 18, None])
    def test_between_rejects_wrong_arity(self, users, value):
        """Test BETWEEN fails unless given exactly two values."""
        users.query().where_between("age", value)

        with pytest.raises(ChainSQLError) as exc_info:
            users.to_sql()

        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT
        assert exc_info.value.details["field"] == "age"

    def test_in_and_not_in_lists(self, users):
        """Test list values render as a compact placeholder list."""
        users.query().where_in("id", [1, 2, 3]).where_not_in("role", ["guest"])

        sql, binds = users.to_sql()

        assert sql == "SELECT * FROM users WHERE id IN (?,?,?) AND role NOT IN (?)"
        assert binds == [1, 2, 3, "guest"]

    def test_empty_in_list_is_rejected(self, users):
        """Test IN () is never emitted."""
        users.query().where_in("id", [])

        with pytest.raises(ChainSQLError) as exc_info:
            users.to_sql()

        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_null_checks_consume_no_binds(self, users):
        """Test IS NULL / IS NOT NULL render without placeholders."""
        users.query().where_null("deleted_at").where_not_null("email")

        assert users.to_sql() == (
            "SELECT * FROM users WHERE deleted_at IS NULL AND email IS NOT NULL",
            [],
        )

    def test_comparison_helpers(self, users):
        """Test the single-value comparison helpers."""
        (
            users.query()
            .where_ne("a", 1)
            .where_gt("b", 2)
            .where_gte("c", 3)
            .where_lt("d", 4)
            .where_lte("e", 5)
            .where_ltgt("f", 6)
            .where_like("g", "x%")
            .where_not_like("h", "%y")
        )

        sql, binds = users.to_sql()

        assert sql == (
            "SELECT * FROM users WHERE a != ? AND b > ? AND c >= ? AND d < ? "
            "AND e <= ? AND f <> ? AND g LIKE ? AND h NOT LIKE ?"
        )
        assert binds == [1, 2, 3, 4, 5, 6, "x%", "%y"]

    def test_where_clause_accepts_operator_name(self, users):
        """Test where_clause with the operator given by name."""
        users.query().where_clause("age", "GREATER_THAN", 21)

        assert users.to_sql() == ("SELECT * FROM users WHERE age > ?", [21])

    def test_column_comparison_and_ilike(self, users):
        """Test where_column binds nothing and where_ilike lowercases both sides."""
        users.query().where_column("users.manager_id", "=", "users.id").where_ilike("name", "%jo%")

        sql, binds = users.to_sql()

        assert sql == (
            "SELECT * FROM users WHERE users.manager_id = users.id "
            "AND LOWER(name) LIKE LOWER(?)"
        )
        assert binds == ["%jo%"]

    def test_consecutive_or_branches(self, users):
        """Test OR branches can follow each other."""
        query = users.query()
        query.where_eq("a", 1)
        query.or_().where_eq("b", 2)
        query.or_().where_eq("c", 3)

        assert users.to_sql() == ("SELECT * FROM users WHERE a = ? OR b = ? OR c = ?", [1, 2, 3])

    def test_condition_after_or_branch_is_rejected(self, users):
        """A sibling after an OR branch has no connective, so it is refused."""
        query = users.query()
        query.where_eq("a", 1)
        query.or_().where_eq("b", 2)
        query.where_eq("c", 3)

        with pytest.raises(ChainSQLError) as exc_info:
            users.to_sql()

        assert exc_info.value.error_code == ErrorCode.INVALID_CONDITION_TREE
        assert exc_info.value.details["position"] == 2

    def test_or_where_group_is_parenthesized(self, users):
        """Test a multi-condition OR branch built with or_where_group."""
        query = users.query()
        result = query.where_eq("a", 1).or_where_group(
            lambda group: group.where_eq("b", 2).where_eq("c", 3)
        )

        assert result is query
        assert users.to_sql() == ("SELECT * FROM users WHERE a = ? OR (b = ? AND c = ?)", [1, 2, 3])

    def test_single_condition_group_is_not_parenthesized(self, users):
        """Test a one-node AND group renders bare."""
        users.query().where_eq("b", 2).where_group(lambda group: group.where_eq("a", 1))

        assert users.to_sql() == ("SELECT * FROM users WHERE b = ? AND a = ?", [2, 1])

    def test_empty_groups_are_skipped(self, users):
        """Test empty nested groups emit nothing and no connective."""
        query = users.query()
        query.and_()
        query.where_eq("a", 1)
        query.and_()

        assert users.to_sql() == ("SELECT * FROM users WHERE a = ?", [1])

    def test_leading_or_branch_has_no_connective(self, users):
        """Test an OR branch as the first node renders without OR."""
        users.query().or_().where_eq("a", 1)

        assert users.to_sql() == ("SELECT * FROM users WHERE a = ?", [1])

    def test_binds_follow_preorder(self):
        """Test binds come out in left-to-right pre-order across nesting levels."""
        group = ConditionGroup()
        group.where_eq("a", 1)
        inner = group.and_()
        inner.where_eq("b", 2)
        inner.or_().where_in("c", [3, 4])
        group.where_raw("d = ?", [5])

        sql, binds = get_compiler("mysql").compile_conditions(group.statements)

        assert sql == "a = ? AND (b = ? OR c IN (?,?)) AND d = ?"
        assert binds == [1, 2, 3, 4, 5]


class TestSubqueryConditions:
    """Test EXISTS and JSON containment conditions."""

    def test_where_exists_splices_binds(self, users):
        """Test EXISTS renders the nested statement and keeps its binds."""
        orders = ChainBuilder("mysql").table("orders").select("1")
        orders.query().where_column("orders.user_id", "=", "users.id").where_gt("orders.total", 100)
        users.query().where_eq("active", True).where_exists(orders)

        sql, binds = users.to_sql()

        assert sql == (
            "SELECT * FROM users WHERE active = ? AND EXISTS "
            "(SELECT 1 FROM orders WHERE orders.user_id = users.id AND orders.total > ?)"
        )
        assert binds == [True, 100]

    def test_where_not_exists(self, users):
        """Test NOT EXISTS."""
        bans = ChainBuilder("mysql").table("bans").select("1")
        bans.query().where_column("bans.user_id", "=", "users.id")
        users.query().where_not_exists(bans)

        assert users.to_sql() == (
            "SELECT * FROM users WHERE NOT EXISTS (SELECT 1 FROM bans WHERE bans.user_id = users.id)",
            [],
        )

    def test_exists_builder_is_copied(self, users):
        """Test later changes to the nested builder are not seen."""
        orders = ChainBuilder("mysql").table("orders").select("1")
        users.query().where_exists(orders)
        orders.query().where_eq("late", True)

        assert users.to_sql() == ("SELECT * FROM users WHERE EXISTS (SELECT 1 FROM orders)", [])

    def test_exists_dialect_mismatch(self, users):
        """Test a nested statement for another dialect is rejected."""
        orders = ChainBuilder("sqlite").table("orders").select("1")
        users.query().where_exists(orders)

        with pytest.raises(ChainSQLError) as exc_info:
            users.to_sql()

        assert exc_info.value.error_code == ErrorCode.DIALECT_MISMATCH
        assert exc_info.value.details["clause"] == "EXISTS"

    def test_exists_requires_builder(self, users):
        """Test where_exists only accepts ChainBuilder instances."""
        with pytest.raises(ValueError):
            users.query().where_exists("SELECT 1")

    def test_json_contains_mysql(self, users):
        """Test MySQL renders JSON_CONTAINS."""
        users.query().where_json_contains("tags", '"premium"')

        assert users.to_sql() == ("SELECT * FROM users WHERE JSON_CONTAINS(tags, ?)", ['"premium"'])

    def test_json_contains_sqlite(self):
        """Test SQLite renders an EXISTS over json_each."""
        builder = ChainBuilder("sqlite").table("users").select()
        builder.query().where_json_contains("tags", "premium")

        assert builder.to_sql() == (
            "SELECT * FROM users WHERE EXISTS "
            "(SELECT 1 FROM json_each(tags) WHERE json_each.value = ?)",
            ["premium"],
        )
