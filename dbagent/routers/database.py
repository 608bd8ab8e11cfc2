import asyncio

from fastapi import APIRouter, Depends

from ..deps import get_data_access
from ..models import DatabaseQueryResponse, QueryRequest, TablesResponse
from ..services.data_access import DataAccessShim

router = APIRouter(prefix="/api", tags=["database"])


@router.post("/database/query", response_model=DatabaseQueryResponse, response_model_exclude_none=True)
async def run_query(payload: QueryRequest, data_access: DataAccessShim = Depends(get_data_access)):
    return await asyncio.to_thread(data_access.execute, payload.query)


@router.get("/tables", response_model=TablesResponse, response_model_exclude_none=True)
async def list_tables(data_access: DataAccessShim = Depends(get_data_access)):
    return await asyncio.to_thread(data_access.list_tables)
