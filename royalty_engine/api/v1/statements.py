from typing import Optional

from fastapi import APIRouter, Query, status

from royalty_engine.api.dependencies import ClockDep, SessionDep
from royalty_engine.core.enums import StatementStatus
from royalty_engine.schemas.common import Pagination
from royalty_engine.schemas.statements import (
    StatementCreate,
    StatementListResponse,
    StatementPayment,
    StatementResponse,
)
from royalty_engine.services.statement_service import StatementService

router = APIRouter()


@router.post("", response_model=StatementResponse, status_code=status.HTTP_201_CREATED)
async def create_statement(
    statement_data: StatementCreate, session: SessionDep, clock: ClockDep
) -> StatementResponse:
    async with session.begin():
        service = StatementService(session, clock=clock)
        statement = await service.create_statement(**statement_data.model_dump())
        return StatementResponse.model_validate(statement)


@router.get("", response_model=StatementListResponse)
async def list_statements(
    session: SessionDep,
    artist_id: Optional[int] = None,
    platform: Optional[str] = None,
    status: Optional[StatementStatus] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> StatementListResponse:
    service = StatementService(session)
    statements, total = await service.list_statements(
        artist_id=artist_id, platform=platform, status=status, page=page, limit=limit
    )
    return StatementListResponse(
        statements=[StatementResponse.model_validate(s) for s in statements],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{statement_id}", response_model=StatementResponse)
async def get_statement(statement_id: int, session: SessionDep) -> StatementResponse:
    service = StatementService(session)
    statement = await service.get_statement(statement_id)
    return StatementResponse.model_validate(statement)


@router.post("/{statement_id}/finalize", response_model=StatementResponse)
async def finalize_statement(
    statement_id: int, session: SessionDep, clock: ClockDep
) -> StatementResponse:
    async with session.begin():
        service = StatementService(session, clock=clock)
        statement = await service.finalize_statement(statement_id)
        return StatementResponse.model_validate(statement)


@router.post("/{statement_id}/mark-paid", response_model=StatementResponse)
async def mark_statement_paid(
    statement_id: int,
    payment: StatementPayment,
    session: SessionDep,
    clock: ClockDep,
) -> StatementResponse:
    async with session.begin():
        service = StatementService(session, clock=clock)
        statement = await service.mark_statement_paid(
            statement_id, **payment.model_dump()
        )
        return StatementResponse.model_validate(statement)
