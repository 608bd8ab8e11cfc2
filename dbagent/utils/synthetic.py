"""Deterministic sample data served when the live store is unreachable or disallowed.

The rows are intentionally flawed (malformed emails, a negative amount) so the
analysis step has something to report on.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from ..models import QueryIntent

SAMPLE_USER_EMAILS: List[Dict[str, Any]] = [
    {"email": "john@example.com"},
    {"email": "jane@company.co"},
    {"email": "invalid-email"},
    {"email": "user@domain.org"},
]

SAMPLE_ORDERS: List[Dict[str, Any]] = [
    {"order_id": 1, "customer_email": "john@example.com", "amount": 99.99, "order_date": "2024-01-15"},
    {"order_id": 2, "customer_email": "invalid-email", "amount": -10.0, "order_date": "2024-01-16"},
    {"order_id": 3, "customer_email": "jane@company.co", "amount": 150.0, "order_date": "2024-01-17"},
]

SAMPLE_TABLES: List[Dict[str, Any]] = [
    {"name": "orders", "schema": "public", "rowCount": 1250, "columnCount": 8, "tableSize": "2.1 MB"},
    {"name": "users", "schema": "public", "rowCount": 450, "columnCount": 12, "tableSize": "890 KB"},
]


def classify_query(query: str) -> QueryIntent:
    """Guess which sample dataset a free-text query is after, by plain substring match."""
    text = (query or "").lower()
    if "users" in text and "email" in text:
        return QueryIntent.USER_EMAILS
    if "orders" in text:
        return QueryIntent.ORDERS
    return QueryIntent.UNKNOWN


def synthetic_rows(intent: QueryIntent) -> List[Dict[str, Any]]:
    # Copies, so a caller mutating its rows never alters the next response.
    if intent == QueryIntent.USER_EMAILS:
        return [dict(row) for row in SAMPLE_USER_EMAILS]
    if intent == QueryIntent.ORDERS:
        return [dict(row) for row in SAMPLE_ORDERS]
    return []


def synthetic_tables() -> List[Dict[str, Any]]:
    last_updated = display_timestamp()
    return [{**table, "lastUpdated": last_updated} for table in SAMPLE_TABLES]


def display_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")
