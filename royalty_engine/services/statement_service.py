import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.clock import Clock, SystemClock
from royalty_engine.core.enums import StatementStatus
from royalty_engine.db.models import RoyaltyStatement
from royalty_engine.db.repositories import CatalogRepository, StatementRepository
from royalty_engine.exceptions import (
    DuplicateStatementException,
    EntityNotFoundException,
    InvalidStateTransitionException,
    ValidationException,
)
from royalty_engine.metrics import statements_total

logger = logging.getLogger(__name__)

FINALIZABLE_STATUSES = (StatementStatus.DRAFT, StatementStatus.GENERATED)


class StatementService:
    def __init__(self, session: AsyncSession, clock: Optional[Clock] = None) -> None:
        self.session = session
        self.clock = clock or SystemClock()
        self.statement_repo = StatementRepository(session)
        self.catalog_repo = CatalogRepository(session)

    async def create_statement(
        self,
        artist_id: int,
        platform: str,
        period_start: date,
        period_end: date,
        net_revenue_cents: int,
        currency: str,
        gross_revenue_cents: int = 0,
        platform_commission_cents: int = 0,
        total_streams: int = 0,
        total_sales: int = 0,
        status: StatementStatus = StatementStatus.DRAFT,
        created_by: Optional[str] = None,
    ) -> RoyaltyStatement:
        if period_end < period_start:
            raise ValidationException(
                message="period_end must not be before period_start",
                details={
                    "period_start": period_start.isoformat(),
                    "period_end": period_end.isoformat(),
                },
            )

        if await self.catalog_repo.get_artist(artist_id) is None:
            raise EntityNotFoundException("artist", artist_id)

        if await self.statement_repo.exists_for_period(
            artist_id, platform, period_start, period_end
        ):
            raise DuplicateStatementException(
                artist_id, platform, period_start.isoformat(), period_end.isoformat()
            )

        statement = await self.statement_repo.create_statement(
            artist_id=artist_id,
            platform=platform,
            period_start=period_start,
            period_end=period_end,
            total_streams=total_streams,
            total_sales=total_sales,
            gross_revenue_cents=gross_revenue_cents,
            platform_commission_cents=platform_commission_cents,
            net_revenue_cents=net_revenue_cents,
            currency=currency,
            status=status.value,
            created_by=created_by,
        )

        statements_total.labels(status=status.value).inc()
        logger.info(
            "Statement created statement_id=%s artist_id=%s platform=%s currency=%s net_revenue_cents=%s",
            statement.id,
            artist_id,
            platform,
            currency,
            net_revenue_cents,
            extra={
                "statement_id": statement.id,
                "artist_id": artist_id,
                "platform": platform,
                "currency": currency,
                "net_revenue_cents": net_revenue_cents,
            },
        )
        return statement

    async def finalize_statement(self, statement_id: int) -> RoyaltyStatement:
        updated = await self.statement_repo.transition(
            statement_id, FINALIZABLE_STATUSES, StatementStatus.FINALIZED
        )
        if not updated:
            raise InvalidStateTransitionException(
                "statement", statement_id, "draft or generated"
            )
        return await self._after_transition(statement_id, StatementStatus.FINALIZED)

    async def mark_statement_paid(
        self,
        statement_id: int,
        payment_method: Optional[str] = None,
        payment_reference: Optional[str] = None,
        payment_date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> RoyaltyStatement:
        updated = await self.statement_repo.transition(
            statement_id,
            (StatementStatus.FINALIZED,),
            StatementStatus.PAID,
            payment_date=payment_date or self.clock.now(),
            payment_method=payment_method,
            payment_reference=payment_reference,
            notes=notes,
        )
        if not updated:
            raise InvalidStateTransitionException(
                "statement", statement_id, StatementStatus.FINALIZED.value
            )
        return await self._after_transition(statement_id, StatementStatus.PAID)

    async def _after_transition(
        self, statement_id: int, status: StatementStatus
    ) -> RoyaltyStatement:
        statements_total.labels(status=status.value).inc()
        logger.info(
            "Statement status changed statement_id=%s status=%s",
            statement_id,
            status.value,
            extra={"statement_id": statement_id, "status": status.value},
        )
        return await self.statement_repo.get_by_id(statement_id)

    async def get_statement(self, statement_id: int) -> RoyaltyStatement:
        statement = await self.statement_repo.get_by_id(statement_id)
        if statement is None:
            raise EntityNotFoundException("statement", statement_id)
        return statement

    async def list_statements(
        self,
        artist_id: Optional[int] = None,
        platform: Optional[str] = None,
        status: Optional[StatementStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[RoyaltyStatement], int]:
        return await self.statement_repo.list_statements(
            artist_id=artist_id,
            platform=platform,
            status=status,
            limit=limit,
            offset=(page - 1) * limit,
        )
