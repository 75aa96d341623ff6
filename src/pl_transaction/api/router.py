"""pl_transaction REST endpoints.

POST /transaction/add        — insert a record
POST /transaction/update     — amend amount, or soft delete with is_delete
POST /transaction/delete     — soft delete (same as update + is_delete)
GET  /transaction/list       — active records in a local-date window
GET  /transaction/overview   — per-type sum/count in a local-date window

The X-API-KEY gate is applied by ApiKeyMiddleware, not here.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.database import get_db_session
from src.pl_common.response import OkResponse
from src.pl_transaction.api.dependencies import (
    get_transaction_cache,
    get_transaction_service,
)
from src.pl_transaction.application.schemas import (
    AddTransactionRequest,
    DeleteTransactionRequest,
    OverviewResponse,
    TransactionListResponse,
    UpdateTransactionRequest,
)
from src.pl_transaction.application.service import TransactionApplicationService
from src.pl_transaction.domain.cache import TransactionCacheProtocol

router = APIRouter(prefix="/transaction", tags=["transaction"])

DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Cache = Annotated[TransactionCacheProtocol, Depends(get_transaction_cache)]
Service = Annotated[TransactionApplicationService, Depends(get_transaction_service)]


@router.post("/add")
async def add_transaction(
    body: AddTransactionRequest, db: DbSession, cache: Cache, service: Service
) -> OkResponse:
    await service.add(db, cache, body)
    return OkResponse()


@router.post("/update")
async def update_transaction(
    body: UpdateTransactionRequest, db: DbSession, cache: Cache, service: Service
) -> OkResponse:
    await service.update(db, cache, body)
    return OkResponse()


@router.post("/delete")
async def delete_transaction(
    body: DeleteTransactionRequest, db: DbSession, cache: Cache, service: Service
) -> OkResponse:
    await service.delete(db, cache, body.id)
    return OkResponse()


@router.get("/list")
async def list_transactions(
    db: DbSession,
    cache: Cache,
    service: Service,
    start_at: str = Query(..., description="Local start date, YYYY-MM-DD"),
    end_at: str = Query(..., description="Local end date, YYYY-MM-DD"),
) -> TransactionListResponse:
    return await service.list_transactions(db, cache, start_at, end_at)


@router.get("/overview")
async def overview(
    db: DbSession,
    cache: Cache,
    service: Service,
    start_at: str = Query(..., description="Local start date, YYYY-MM-DD"),
    end_at: str = Query(..., description="Local end date, YYYY-MM-DD"),
) -> OverviewResponse:
    return await service.overview(db, cache, start_at, end_at)
