import asyncio
import logging

from fastapi import APIRouter, Depends

from ..deps import get_dispatcher
from ..models import TaskRequest, TaskResult, TaskStatus
from ..services.dispatcher import InvalidTaskType, TaskDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/agent", tags=["agent"])


@router.post("/run-task", response_model=TaskResult, response_model_exclude_none=True)
async def run_task(payload: TaskRequest, dispatcher: TaskDispatcher = Depends(get_dispatcher)):
    # InvalidTaskType propagates to the 400 handler registered in main.
    try:
        return await asyncio.to_thread(dispatcher.dispatch, payload)
    except InvalidTaskType:
        raise
    except Exception as exc:
        logger.exception("Agent task %s crashed", payload.task_type)
        return TaskResult(id="error", task="Agent Task", status=TaskStatus.ERROR, error=str(exc) or "Unknown error")
