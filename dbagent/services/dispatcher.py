import logging
from typing import Dict

from ..config import Settings
from ..models import TaskRequest, TaskResult, TaskStatus, TaskType
from .pipelines import DATA_QUALITY, EMAIL_VALIDATION, PipelineRunner, PipelineSpec

logger = logging.getLogger(__name__)

# Closed set of runnable tasks. A new task needs a PipelineSpec here.
TASK_REGISTRY: Dict[TaskType, PipelineSpec] = {
    EMAIL_VALIDATION.task_type: EMAIL_VALIDATION,
    DATA_QUALITY.task_type: DATA_QUALITY,
}


class InvalidTaskType(ValueError):
    def __init__(self, task_type):
        super().__init__(f"Invalid task type: {task_type!r}")
        self.task_type = task_type


class TaskDispatcher:
    def __init__(self, settings: Settings, runner: PipelineRunner):
        self.settings = settings
        self.runner = runner

    def dispatch(self, request: TaskRequest) -> TaskResult:
        spec = self._resolve(request.task_type)
        logger.info("Running task %s", spec.task_type.value)

        missing = self.settings.missing_credential_name()
        if missing:
            logger.error("Missing %s, refusing to run %s", missing, spec.task_type.value)
            return TaskResult(
                id=spec.task_type.value,
                task=spec.name,
                status=TaskStatus.ERROR,
                error=f"{missing} environment variable is not configured. Please add it to the service configuration.",
            )

        result = self.runner.run(spec)
        logger.info("Task %s finished with status %s", spec.task_type.value, result.status.value)
        return result

    @staticmethod
    def _resolve(raw) -> PipelineSpec:
        if not isinstance(raw, str):
            raise InvalidTaskType(raw)
        try:
            return TASK_REGISTRY[TaskType(raw)]
        except (ValueError, KeyError):
            raise InvalidTaskType(raw) from None
