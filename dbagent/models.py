from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class TaskType(str, Enum):
    EMAIL_VALIDATION = "email_validation"
    DATA_QUALITY = "data_quality"


class QueryIntent(str, Enum):
    USER_EMAILS = "user_emails"
    ORDERS = "orders"
    UNKNOWN = "unknown"


class TaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Any JSON value is accepted here; TaskDispatcher rejects unregistered ones.
    task_type: Any = Field(default=None, alias="taskType")


class TaskResult(BaseModel):
    """Outcome of one pipeline run. Immutable: every transition returns a new record."""

    model_config = ConfigDict(frozen=True)

    id: str
    task: str
    status: TaskStatus
    events: Tuple[str, ...] = ()
    error: Optional[str] = None

    @classmethod
    def start(cls, task_type: str, name: str) -> "TaskResult":
        return cls(id=task_type, task=name, status=TaskStatus.RUNNING)

    def with_event(self, event: str) -> "TaskResult":
        return self.model_copy(update={"events": self.events + (event,)})

    def completed(self) -> "TaskResult":
        return self.model_copy(update={"status": TaskStatus.COMPLETED})

    def failed(self, message: str) -> "TaskResult":
        return self.with_event(message).model_copy(
            update={"status": TaskStatus.ERROR, "error": message}
        )


class QueryRequest(BaseModel):
    query: str


class DatabaseQueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rows: List[Dict[str, Any]]
    row_count: int = Field(alias="rowCount")
    warning: Optional[str] = None
    error: Optional[str] = None


class TableDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    # "schema" shadows a BaseModel attribute, hence the alias.
    table_schema: str = Field(alias="schema")
    row_count: int = Field(alias="rowCount")
    column_count: int = Field(alias="columnCount")
    table_size: str = Field(alias="tableSize")
    last_updated: str = Field(alias="lastUpdated")


class TablesResponse(BaseModel):
    tables: List[TableDescriptor]
    warning: Optional[str] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    restricted_context: bool = Field(alias="restrictedContext")
    credentials_configured: bool = Field(alias="modelCredentials")
    llm_provider: str = Field(alias="llmProvider")
