import logging
import textwrap
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import orjson

from ..models import QueryIntent, TaskResult, TaskType
from .data_access import DataAccessShim

logger = logging.getLogger(__name__)

# Keeps the embedded dataset small enough for a single prompt.
ROW_LIMIT = 100

EMAIL_QUERY = f"SELECT email FROM users LIMIT {ROW_LIMIT}"
ORDERS_QUERY = (
    "SELECT order_id, customer_email, amount, order_date, COUNT(*) OVER() AS total_count "
    f"FROM orders LIMIT {ROW_LIMIT}"
)


def serialize_rows(rows: List[Dict[str, Any]]) -> str:
    # default=str covers Decimal and other driver types orjson cannot encode.
    return orjson.dumps(rows, default=str).decode()


def email_validation_prompt(rows: List[Dict[str, Any]]) -> str:
    prompt = f"""
    Check if the format of emails is correct. Here are the email addresses from the users table:
    {serialize_rows(rows)}

    Validate that each email follows proper email format (contains a single @ symbol,
    a non-empty local part, a valid domain structure with a dot-separated top-level domain, etc.).
    Report any invalid email formats found with specific examples and counts.
    """
    return textwrap.dedent(prompt).strip()


def data_quality_prompt(rows: List[Dict[str, Any]]) -> str:
    prompt = f"""
    Perform a comprehensive data quality check on this orders table data:
    {serialize_rows(rows)}

    Check for:
    1) NULL or missing values in critical fields
    2) Invalid email formats in customer_email field
    3) Negative or zero amounts
    4) Duplicate order numbers
    5) Invalid dates
    6) Data consistency issues

    Provide a detailed report with counts and examples of each data quality issue found.
    """
    return textwrap.dedent(prompt).strip()


@dataclass(frozen=True)
class PipelineSpec:
    task_type: TaskType
    name: str
    query: str
    intent: QueryIntent
    table: str
    subject: str
    build_prompt: Callable[[List[Dict[str, Any]]], str]


EMAIL_VALIDATION = PipelineSpec(
    task_type=TaskType.EMAIL_VALIDATION,
    name="Email Validation Check",
    query=EMAIL_QUERY,
    intent=QueryIntent.USER_EMAILS,
    table="users",
    subject="email addresses",
    build_prompt=email_validation_prompt,
)

DATA_QUALITY = PipelineSpec(
    task_type=TaskType.DATA_QUALITY,
    name="Data Quality Check",
    query=ORDERS_QUERY,
    intent=QueryIntent.ORDERS,
    table="orders",
    subject="order records",
    build_prompt=data_quality_prompt,
)


class PipelineRunner:
    """Fetch rows, ask the model about them, and record every step.

    ``llm`` only needs a ``generate(prompt) -> str`` method.
    """

    def __init__(self, data_access: DataAccessShim, llm):
        self.data_access = data_access
        self.llm = llm


    def run(self, spec: PipelineSpec) -> TaskResult:
        result = TaskResult.start(spec.task_type.value, spec.name)
        result = result.with_event(f"Starting {spec.name.lower()}...")
        try:
            response = self.data_access.execute(spec.query, intent=spec.intent)
            if response.warning:
                logger.warning("%s: %s", spec.name, response.warning)

            rows = response.rows
            if not rows:
                result = result.with_event(f"No {spec.subject} found in {spec.table} table")
                return result.with_event("Nothing to analyze; skipping AI analysis").completed()

            result = result.with_event(f"Found {len(rows)} {spec.subject} in {spec.table} table")
            analysis = self.llm.generate(spec.build_prompt(rows))
            result = result.with_event("AI analysis completed").with_event(analysis)
            return result.completed()
        except Exception as exc:
            logger.error("%s failed: %s", spec.name, exc)
            return result.failed(f"{spec.name} failed: {exc}")
