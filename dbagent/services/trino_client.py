from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlparse

from trino import dbapi
from trino.auth import BasicAuthentication

CATALOG_TABLES_SQL = """
SELECT
  t.table_name,
  t.table_schema,
  c.column_count
FROM information_schema.tables t
LEFT JOIN (
  SELECT table_schema, table_name, COUNT(*) AS column_count
  FROM information_schema.columns
  GROUP BY table_schema, table_name
) c ON c.table_schema = t.table_schema AND c.table_name = t.table_name
WHERE t.table_type = 'BASE TABLE'
  AND t.table_schema NOT IN ('information_schema', 'pg_catalog', 'pg_toast')
ORDER BY t.table_schema, t.table_name
"""


@dataclass
class ConnectionParams:
    host: str
    port: int
    catalog: Optional[str]
    schema: Optional[str]
    user: str
    password: Optional[str]
    http_scheme: str


class TrinoClient:
    def __init__(self, jdbc_url: str):
        self.jdbc_url = jdbc_url
        self.params = self._parse_jdbc_url(jdbc_url)

    def query(self, sql: str) -> list[dict[str, Any]]:
        """Run one statement on a fresh connection; the connection is closed on every exit path."""
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(sql)
            rows = cur.fetchall()
            columns = [c[0] for c in cur.description] if cur.description else []
            cur.close()
            return [dict(zip(columns, row)) for row in rows]
        finally:
            conn.close()

    def list_tables(self) -> list[dict[str, Any]]:
        return self.query(CATALOG_TABLES_SQL)

    def _connect(self):
        auth = None
        if self.params.password:
            auth = BasicAuthentication(self.params.user, self.params.password)

        return dbapi.connect(
            host=self.params.host,
            port=self.params.port,
            user=self.params.user,
            catalog=self.params.catalog,
            schema=self.params.schema,
            http_scheme=self.params.http_scheme,
            auth=auth,
            source="dbagent",
        )

    @staticmethod
    def _parse_jdbc_url(jdbc_url: str) -> ConnectionParams:
        if not jdbc_url:
            raise ValueError("Empty JDBC URL")

        parsed = urlparse(jdbc_url)
        if parsed.scheme.lower() != "jdbc":
            raise ValueError(f"Unsupported JDBC scheme: {parsed.scheme}")

        if not parsed.netloc and parsed.path:
            normalized_path = parsed.path
            lowered_path = normalized_path.lower()
            for prefix in ("trino://", "presto://"):
                if lowered_path.startswith(prefix):
                    remainder = normalized_path[len(prefix) :]
                    reparsed = urlparse(f"jdbc://{remainder}")
                    parsed = parsed._replace(netloc=reparsed.netloc, path=reparsed.path)
                    break

        if not parsed.hostname:
            raise ValueError("JDBC URL must contain host")

        path_parts = [p for p in parsed.path.split("/") if p]
        catalog = path_parts[0] if path_parts else None
        schema_from_path = path_parts[1] if len(path_parts) > 1 else None

        query_params = parse_qs(parsed.query)
        user = TrinoClient._single_param(query_params, "user") or TrinoClient._single_param(query_params, "username")
        if not user:
            raise ValueError("JDBC URL must contain user parameter")

        password = TrinoClient._single_param(query_params, "password")
        schema = TrinoClient._single_param(query_params, "schema") or schema_from_path
        http_scheme = "https" if TrinoClient._is_https(query_params) else "http"

        port = parsed.port or (443 if http_scheme == "https" else 8080)

        return ConnectionParams(
            host=parsed.hostname,
            port=port,
            catalog=catalog,
            schema=schema,
            user=user,
            password=password,
            http_scheme=http_scheme,
        )

    @staticmethod
    def _single_param(params: Dict[str, list[str]], key: str) -> Optional[str]:
        values = params.get(key)
        if not values:
            return None
        return values[0]

    @staticmethod
    def _is_https(params: Dict[str, list[str]]) -> bool:
        for key in ("https", "ssl", "tls", "httpScheme"):
            flag = TrinoClient._single_param(params, key)
            if flag:
                return flag.lower() in {"1", "true", "yes", "https"}
        return False
