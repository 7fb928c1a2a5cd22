from typing import Optional

from fastapi import APIRouter, Query, status

from royalty_engine.api.dependencies import ClockDep, SessionDep
from royalty_engine.core.enums import PayoutStatus
from royalty_engine.db.models import Payout
from royalty_engine.schemas.common import Pagination
from royalty_engine.schemas.payouts import (
    MinimumPayoutResponse,
    PaymentMethodResponse,
    PayoutCancel,
    PayoutComplete,
    PayoutCreate,
    PayoutFail,
    PayoutListResponse,
    PayoutProcess,
    PayoutResponse,
    PayoutStatistics,
    PayoutStatisticsResponse,
)
from royalty_engine.services.payout_workflow import (
    DEFAULT_STATISTICS_PERIOD,
    STATISTICS_PERIODS,
    PayoutWorkflow,
)

router = APIRouter()


def _to_response(payout: Payout, **extra) -> PayoutResponse:
    result = PayoutResponse.model_validate(payout)
    return result.model_copy(update=extra)


@router.post("", response_model=PayoutResponse, status_code=status.HTTP_201_CREATED)
async def request_payout(
    payout_data: PayoutCreate, session: SessionDep, clock: ClockDep
) -> PayoutResponse:
    async with session.begin():
        workflow = PayoutWorkflow(session, clock=clock)
        payout = await workflow.request_payout(
            user_id=payout_data.user_id,
            amount_cents=payout_data.amount_cents,
            currency=payout_data.currency,
            payment_method=payout_data.payment_method,
            payment_details=payout_data.payment_details,
            statement_ids=payout_data.statement_ids,
        )
        return _to_response(payout, statements_count=len(set(payout_data.statement_ids)))


@router.get("", response_model=PayoutListResponse)
async def list_payouts(
    session: SessionDep,
    user_id: str = Query(..., pattern=r"^usr_"),
    status: Optional[PayoutStatus] = None,
    currency: Optional[str] = Query(default=None, pattern=r"^[A-Z]{3}$"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> PayoutListResponse:
    workflow = PayoutWorkflow(session)
    rows, total = await workflow.list_payouts(
        user_id, status=status, currency=currency, page=page, limit=limit
    )
    return PayoutListResponse(
        payouts=[_to_response(payout, statements_count=count) for payout, count in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/statistics", response_model=PayoutStatisticsResponse)
async def get_payout_statistics(
    session: SessionDep,
    clock: ClockDep,
    user_id: str = Query(..., pattern=r"^usr_"),
    period: str = DEFAULT_STATISTICS_PERIOD,
) -> PayoutStatisticsResponse:
    if period not in STATISTICS_PERIODS:
        period = DEFAULT_STATISTICS_PERIOD
    workflow = PayoutWorkflow(session, clock=clock)
    statistics = await workflow.get_statistics(user_id, period)
    return PayoutStatisticsResponse(
        user_id=user_id,
        period=period,
        statistics=[PayoutStatistics.model_validate(s) for s in statistics],
    )


@router.get("/methods", response_model=list[PaymentMethodResponse])
async def get_payment_methods() -> list[PaymentMethodResponse]:
    return [
        PaymentMethodResponse.model_validate(method)
        for method in PayoutWorkflow.supported_payment_methods()
    ]


@router.get("/minimums/{currency}", response_model=MinimumPayoutResponse)
async def get_minimum_payout(currency: str) -> MinimumPayoutResponse:
    return MinimumPayoutResponse(
        currency=currency.upper(),
        minimum_amount_cents=PayoutWorkflow.minimum_payout_cents(currency),
    )


@router.get("/{payout_id}", response_model=PayoutResponse)
async def get_payout(
    payout_id: int, session: SessionDep, user_id: str = Query(..., pattern=r"^usr_")
) -> PayoutResponse:
    workflow = PayoutWorkflow(session)
    payout, statements = await workflow.get_payout(payout_id, user_id)
    return _to_response(
        payout,
        statements=[PayoutResponse.Statement.model_validate(s) for s in statements],
        statements_count=len(statements),
    )


@router.post("/{payout_id}/cancel", response_model=PayoutResponse)
async def cancel_payout(
    payout_id: int, cancel_data: PayoutCancel, session: SessionDep, clock: ClockDep
) -> PayoutResponse:
    async with session.begin():
        workflow = PayoutWorkflow(session, clock=clock)
        payout = await workflow.cancel_payout(payout_id, cancel_data.user_id)
        return _to_response(payout)


@router.post("/{payout_id}/process", response_model=PayoutResponse)
async def process_payout(
    payout_id: int, process_data: PayoutProcess, session: SessionDep, clock: ClockDep
) -> PayoutResponse:
    async with session.begin():
        workflow = PayoutWorkflow(session, clock=clock)
        payout = await workflow.process_payout(
            payout_id, process_data.processor_id, process_data.payment_reference
        )
        return _to_response(payout)


@router.post("/{payout_id}/complete", response_model=PayoutResponse)
async def complete_payout(
    payout_id: int, complete_data: PayoutComplete, session: SessionDep, clock: ClockDep
) -> PayoutResponse:
    async with session.begin():
        workflow = PayoutWorkflow(session, clock=clock)
        payout = await workflow.complete_payout(
            payout_id, complete_data.processor_id, complete_data.transaction_id
        )
        return _to_response(payout)


@router.post("/{payout_id}/fail", response_model=PayoutResponse)
async def fail_payout(
    payout_id: int, fail_data: PayoutFail, session: SessionDep, clock: ClockDep
) -> PayoutResponse:
    async with session.begin():
        workflow = PayoutWorkflow(session, clock=clock)
        payout = await workflow.fail_payout(
            payout_id, fail_data.processor_id, fail_data.reason
        )
        return _to_response(payout)
