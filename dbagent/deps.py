from fastapi import Request

from .config import Settings
from .services.data_access import DataAccessShim
from .services.dispatcher import TaskDispatcher


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_dispatcher(request: Request) -> TaskDispatcher:
    return request.app.state.dispatcher


def get_data_access(request: Request) -> DataAccessShim:
    return request.app.state.data_access
