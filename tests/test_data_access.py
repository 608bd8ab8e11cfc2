import pytest

from conftest import FakeClient, make_settings
from dbagent.models import QueryIntent
from dbagent.services.data_access import FAILURE_WARNING, RESTRICTED_WARNING, DataAccessShim
from dbagent.utils.synthetic import classify_query


@pytest.mark.parametrize(
    "query, intent",
    [
        ("SELECT email FROM users", QueryIntent.USER_EMAILS),
        ("select EMAIL from public.USERS limit 5", QueryIntent.USER_EMAILS),
        ("SELECT * FROM orders LIMIT 100", QueryIntent.ORDERS),
        ("SELECT customer_email FROM orders", QueryIntent.ORDERS),
        ("SELECT id FROM users", QueryIntent.UNKNOWN),
        ("SELECT 1 -- from orders", QueryIntent.ORDERS),
        ("/* users email */ SELECT 1", QueryIntent.USER_EMAILS),
        ("", QueryIntent.UNKNOWN),
    ],
)
def test_classify_query(query, intent):
    assert classify_query(query) == intent


def test_restricted_context_skips_live_attempt(restricted_settings):
    client = FakeClient(rows=[{"email": "live@example.com"}])
    shim = DataAccessShim(restricted_settings, client=client)

    response = shim.execute("SELECT email FROM users")

    assert client.queries == []
    assert len(response.rows) == 4
    assert response.row_count == 4
    assert {"email": "invalid-email"} in response.rows
    assert response.warning == RESTRICTED_WARNING
    assert response.error is None


def test_live_failure_returns_synthetic_rows_with_error(settings):
    shim = DataAccessShim(settings, client=FakeClient(error=ConnectionRefusedError("connection refused")))

    response = shim.execute("SELECT email FROM users")
    restricted = DataAccessShim(make_settings(restricted_context="true")).execute("SELECT email FROM users")

    assert response.rows == restricted.rows
    assert response.warning == FAILURE_WARNING
    assert response.error == "connection refused"


def test_failure_on_orders_query_keeps_flawed_rows(settings):
    shim = DataAccessShim(settings, client=FakeClient(error=RuntimeError("boom")))

    response = shim.execute("SELECT * FROM orders")

    assert [row["order_id"] for row in response.rows] == [1, 2, 3]
    assert any(row["amount"] < 0 for row in response.rows)
    assert any("@" not in row["customer_email"] for row in response.rows)


def test_explicit_intent_overrides_query_text(restricted_settings):
    shim = DataAccessShim(restricted_settings)

    response = shim.execute("SELECT * FROM v_customer_orders_2024", intent=QueryIntent.USER_EMAILS)

    assert response.rows[0] == {"email": "john@example.com"}


def test_unknown_query_degrades_to_empty_rows(restricted_settings):
    response = DataAccessShim(restricted_settings).execute("SELECT now()")

    assert response.rows == []
    assert response.row_count == 0
    assert response.warning == RESTRICTED_WARNING


def test_live_success_has_no_annotations(settings):
    rows = [{"email": "a@example.com"}, {"email": "b@example.com"}]
    client = FakeClient(rows=rows)

    response = DataAccessShim(settings, client=client).execute("SELECT email FROM users")

    assert client.queries == ["SELECT email FROM users"]
    assert response.rows == rows
    assert response.row_count == 2
    assert response.warning is None
    assert response.error is None


def test_malformed_database_url_degrades(settings):
    shim = DataAccessShim(settings.model_copy(update={"database_url": "not-a-url"}))

    response = shim.execute("SELECT email FROM users")

    assert len(response.rows) == 4
    assert "Unsupported JDBC scheme" in response.error


def test_synthetic_rows_are_fresh_copies(restricted_settings):
    shim = DataAccessShim(restricted_settings)

    shim.execute("SELECT email FROM users").rows[0]["email"] = "tampered"

    assert shim.execute("SELECT email FROM users").rows[0]["email"] == "john@example.com"


def test_list_tables_restricted(restricted_settings):
    client = FakeClient()
    response = DataAccessShim(restricted_settings, client=client).list_tables()

    assert client.catalog_reads == 0
    assert [t.name for t in response.tables] == ["orders", "users"]
    assert response.warning == RESTRICTED_WARNING
    assert response.error is None


def test_list_tables_failure(settings):
    response = DataAccessShim(settings, client=FakeClient(error=OSError("no route to host"))).list_tables()

    assert [t.name for t in response.tables] == ["orders", "users"]
    assert response.warning == FAILURE_WARNING
    assert response.error == "no route to host"


def test_list_tables_from_catalog(settings):
    client = FakeClient(tables=[
        {"table_name": "customers", "table_schema": "sales", "column_count": 7},
        {"table_name": "events", "table_schema": "web", "column_count": None},
    ])

    response = DataAccessShim(settings, client=client).list_tables()

    assert response.warning is None
    first, second = response.tables
    assert (first.name, first.table_schema, first.column_count) == ("customers", "sales", 7)
    assert second.column_count == 0
    assert first.row_count == 0
    assert first.table_size == "Unknown"
    dumped = first.model_dump(by_alias=True)
    assert set(dumped) == {"name", "schema", "rowCount", "columnCount", "tableSize", "lastUpdated"}


def _large_in_list_query(values=20000):
    return "SELECT email FROM users WHERE id IN (" + ", ".join(str(i) for i in range(values)) + ")"


def test_large_query_degrades_in_restricted_context(restricted_settings):
    response = DataAccessShim(restricted_settings).execute(_large_in_list_query())

    assert len(response.rows) == 4
    assert response.warning == RESTRICTED_WARNING


def test_large_query_runs_live_when_allowed(settings):
    query = _large_in_list_query()
    client = FakeClient(rows=[{"email": "a@example.com"}])

    response = DataAccessShim(settings, client=client).execute(query)

    assert client.queries == [query]
    assert response.rows == [{"email": "a@example.com"}]
    assert response.warning is None


def test_commented_table_names_still_select_sample_rows(restricted_settings):
    response = DataAccessShim(restricted_settings).execute("/* users email */ SELECT 1")

    assert len(response.rows) == 4


def test_list_tables_bad_catalog_row_degrades(settings):
    client = FakeClient(tables=[{"table_name": None, "table_schema": "public", "column_count": 3}])

    response = DataAccessShim(settings, client=client).list_tables()

    assert [t.name for t in response.tables] == ["orders", "users"]
    assert response.warning == FAILURE_WARNING
    assert response.error
