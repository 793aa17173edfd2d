"""Parse compiled MySQL and SQLite statements with sqlglot to check they are well-formed SQL."""

import pytest
import sqlglot
from sqlglot import exp

from chainsql import ChainBuilder


def _select_with_everything():
    orders = ChainBuilder("mysql").table("orders").select("1")
    orders.query().where_column("orders.user_id", "=", "users.id").where_gt("orders.total", 100)
    builder = ChainBuilder("mysql").table("users").select(["users.id", "users.name"])
    query = builder.query()
    query.left_join("roles").on("roles.id", "=", "users.role_id").on_val("roles.name", "=", "admin")
    query.where_eq("users.active", True).where_in("users.region", ["eu", "us"])
    query.where_between("users.age", [18, 65]).where_null("users.deleted_at")
    query.where_group(lambda g: g.where_like("users.name", "J%").or_().where_like("users.email", "%@x.io"))
    query.where_exists(orders)
    query.group_by("users.id").having("COUNT(*)", ">", 1).order_by("users.name", "desc")
    return builder


def _insert_many():
    return ChainBuilder("mysql").table("users").insert_many([{"a": 1, "b": 2}, {"a": 3, "b": 4}])


def _update():
    builder = ChainBuilder("mysql").table("users").update({"name": "x"}).increment("visits")
    builder.query().where_eq("id", 1)
    return builder


def _delete():
    builder = ChainBuilder("mysql").table("users").delete()
    builder.query().where_in("id", [1, 2])
    return builder


def _union_with_cte():
    cte = ChainBuilder("mysql").table("orders").select("user_id")
    cte.query().where_gt("total", 10)
    other = ChainBuilder("mysql").table("archived").select("user_id")
    other.query().where_eq("kept", True)
    return ChainBuilder("mysql").table("big").select("user_id").with_("big", cte).union_all(other)


class TestSqlglotParityMySQL:
    """Test compiled MySQL statements parse and bind one value per placeholder."""

    @pytest.mark.parametrize(
        "factory, expression_type",
        [
            (_select_with_everything, exp.Select),
            (_insert_many, exp.Insert),
            (_update, exp.Update),
            (_delete, exp.Delete),
            (_union_with_cte, exp.Union),
        ],
    )
    def test_statement_parses(self, factory, expression_type):
        """Test the statement parses as MySQL and placeholders match binds."""
        sql, binds = factory().to_sql()

        tree = sqlglot.parse_one(sql, read="mysql")

        assert isinstance(tree, expression_type)
        assert len(list(tree.find_all(exp.Placeholder))) == len(binds)
        assert sql.count("?") == len(binds)


def _sqlite_paged_select():
    builder = ChainBuilder("sqlite").table("users").select(["id", "name"])
    query = builder.query()
    query.where_eq("status", "active").where_in("role", ["admin", "editor"])
    query.where_json_contains("tags", "premium")
    query.order_by("name").limit(10).offset(20)
    return builder


def _sqlite_offset_only():
    builder = ChainBuilder("sqlite").table("users").select("id")
    builder.query().where_gt("age", 18).offset(5)
    return builder


def _sqlite_default_values():
    return ChainBuilder("sqlite").table("events").insert({})


def _sqlite_insert_rows():
    return ChainBuilder("sqlite").table("users").insert_many([{"a": 1, "b": 2}, {"a": 3, "b": 4}])


class TestSqlglotParitySQLite:
    """Test compiled SQLite statements parse and bind one value per placeholder."""

    @pytest.mark.parametrize(
        "factory, expression_type, fragment",
        [
            (_sqlite_paged_select, exp.Select, "LIMIT 20, 10"),
            (_sqlite_offset_only, exp.Select, "LIMIT 5, -1"),
            (_sqlite_default_values, exp.Insert, "DEFAULT VALUES"),
            (_sqlite_insert_rows, exp.Insert, "VALUES (?, ?), (?, ?)"),
        ],
    )
    def test_statement_parses(self, factory, expression_type, fragment):
        """Test the statement parses as SQLite and placeholders match binds."""
        sql, binds = factory().to_sql()

        tree = sqlglot.parse_one(sql, read="sqlite")

        assert fragment in sql
        assert isinstance(tree, expression_type)
        assert len(list(tree.find_all(exp.Placeholder))) == len(binds)
        assert sql.count("?") == len(binds)

