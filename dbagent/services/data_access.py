import logging
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..models import DatabaseQueryResponse, QueryIntent, TableDescriptor, TablesResponse
from ..utils.synthetic import classify_query, display_timestamp, synthetic_rows, synthetic_tables
from .trino_client import TrinoClient

logger = logging.getLogger(__name__)

RESTRICTED_WARNING = "Using synthetic data - live database not available in restricted execution context"
FAILURE_WARNING = "Using synthetic data - database connection failed"


class DataAccessShim:
    """Live database access that degrades to sample data instead of failing.

    ``client`` is anything with ``query(sql)`` and ``list_tables()`` returning
    lists of dicts; by default a :class:`TrinoClient` is built lazily from
    ``settings.database_url`` so a malformed URL also degrades.
    """

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = TrinoClient(self.settings.database_url)
        return self._client

    def execute(self, query: str, intent: Optional[QueryIntent] = None) -> DatabaseQueryResponse:
        # Free-text queries are only classified when sample data has to be served.
        if self.settings.is_restricted_execution_context():
            intent = intent or classify_query(query)
            logger.warning("Restricted execution context, serving synthetic %s rows", intent.value)
            return self._synthetic_response(intent, RESTRICTED_WARNING)

        try:
            rows = self.client.query(query)
        except Exception as exc:
            intent = intent or classify_query(query)
            logger.warning("Live query failed (%s), serving synthetic %s rows", exc, intent.value)
            return self._synthetic_response(intent, FAILURE_WARNING, error=str(exc))

        logger.info("Query executed, %d rows", len(rows))
        return DatabaseQueryResponse(rows=rows, row_count=len(rows))

    def list_tables(self) -> TablesResponse:
        if self.settings.is_restricted_execution_context():
            logger.warning("Restricted execution context, serving synthetic table list")
            return TablesResponse(tables=self._descriptors(synthetic_tables()), warning=RESTRICTED_WARNING)

        try:
            last_updated = display_timestamp()
            tables = self._descriptors([
                {
                    "name": row.get("table_name"),
                    "schema": row.get("table_schema"),
                    # Row counts and sizes are not part of the catalog read.
                    "rowCount": 0,
                    "columnCount": _as_int(row.get("column_count")),
                    "tableSize": "Unknown",
                    "lastUpdated": last_updated,
                }
                for row in self.client.list_tables()
            ])
        except Exception as exc:
            logger.warning("Catalog read failed (%s), serving synthetic table list", exc)
            return TablesResponse(
                tables=self._descriptors(synthetic_tables()),
                warning=FAILURE_WARNING,
                error=str(exc),
            )

        logger.info("Returning %d tables from catalog", len(tables))
        return TablesResponse(tables=tables)

    @staticmethod
    def _synthetic_response(intent: QueryIntent, warning: str, error: Optional[str] = None) -> DatabaseQueryResponse:
        rows = synthetic_rows(intent)
        return DatabaseQueryResponse(rows=rows, row_count=len(rows), warning=warning, error=error)

    @staticmethod
    def _descriptors(tables: List[Dict[str, Any]]) -> List[TableDescriptor]:
        return [TableDescriptor(**table) for table in tables]


def _as_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
