from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings
from .deps import get_settings
from .logging_config import setup_logging
from .models import HealthResponse
from .routers import database, tasks
from .services.data_access import DataAccessShim
from .services.dispatcher import InvalidTaskType, TaskDispatcher
from .services.llm import LLM
from .services.pipelines import PipelineRunner


def create_app(settings: Settings | None = None, client=None, llm=None) -> FastAPI:
    """Build the service. ``client`` and ``llm`` replace the Trino client and LLM gateway."""
    settings = settings or Settings()
    setup_logging(settings.log_level)

    data_access = DataAccessShim(settings, client=client)
    runner = PipelineRunner(data_access, llm or LLM(settings))

    app = FastAPI(title="DB Agent Tasks API", version="1.0.0")
    app.state.settings = settings
    app.state.data_access = data_access
    app.state.dispatcher = TaskDispatcher(settings, runner)

    app.include_router(tasks.router)
    app.include_router(database.router)

    @app.exception_handler(InvalidTaskType)
    async def invalid_task_type(request: Request, exc: InvalidTaskType):
        return JSONResponse(status_code=400, content={"error": "Invalid task type", "taskType": exc.task_type})

    @app.get("/health", response_model=HealthResponse)
    async def health(settings: Settings = Depends(get_settings)):
        return HealthResponse(
            status="ok",
            restricted_context=settings.is_restricted_execution_context(),
            credentials_configured=settings.has_model_credentials(),
            llm_provider=settings.provider,
        )

    return app


app = create_app()
