from datetime import date
from typing import Any, Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.enums import StatementStatus
from royalty_engine.db.models import Artist, RoyaltyStatement


class StatementRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_statement(self, **values: Any) -> RoyaltyStatement:
        statement = RoyaltyStatement(**values)
        self.session.add(statement)
        await self.session.flush()
        await self.session.refresh(statement)
        return statement

    async def exists_for_period(
        self, artist_id: int, platform: str, period_start: date, period_end: date
    ) -> bool:
        stmt = (
            select(RoyaltyStatement.id)
            .where(RoyaltyStatement.artist_id == artist_id)
            .where(RoyaltyStatement.platform == platform)
            .where(RoyaltyStatement.period_start == period_start)
            .where(RoyaltyStatement.period_end == period_end)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_by_id(self, statement_id: int) -> Optional[RoyaltyStatement]:
        stmt = (
            select(RoyaltyStatement)
            .where(RoyaltyStatement.id == statement_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def transition(
        self,
        statement_id: int,
        from_statuses: Iterable[StatementStatus],
        to_status: StatementStatus,
        **values: Any,
    ) -> bool:
        """Conditional status update; False when no row matched."""
        stmt = (
            update(RoyaltyStatement)
            .where(RoyaltyStatement.id == statement_id)
            .where(RoyaltyStatement.status.in_([s.value for s in from_statuses]))
            .values(status=to_status.value, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_statements(
        self,
        artist_id: Optional[int] = None,
        platform: Optional[str] = None,
        status: Optional[StatementStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[RoyaltyStatement], int]:
        filters = []
        if artist_id is not None:
            filters.append(RoyaltyStatement.artist_id == artist_id)
        if platform:
            filters.append(RoyaltyStatement.platform == platform)
        if status:
            filters.append(RoyaltyStatement.status == status.value)

        stmt = (
            select(RoyaltyStatement)
            .where(*filters)
            .order_by(RoyaltyStatement.period_start.desc(), RoyaltyStatement.id.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count(RoyaltyStatement.id)).where(*filters)

        result = await self.session.execute(stmt)
        total = await self.session.execute(count_stmt)
        return list(result.scalars().all()), int(total.scalar() or 0)

    async def sum_earned(self, user_id: str, currency: str) -> int:
        """Net revenue of the user's finalized statements in one currency."""
        stmt = (
            select(func.coalesce(func.sum(RoyaltyStatement.net_revenue_cents), 0))
            .join(Artist, Artist.id == RoyaltyStatement.artist_id)
            .where(Artist.user_id == user_id)
            .where(RoyaltyStatement.currency == currency)
            .where(RoyaltyStatement.status == StatementStatus.FINALIZED.value)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def filter_owned(self, user_id: str, statement_ids: Iterable[int]) -> set[int]:
        ids = list(statement_ids)
        if not ids:
            return set()
        stmt = (
            select(RoyaltyStatement.id)
            .join(Artist, Artist.id == RoyaltyStatement.artist_id)
            .where(Artist.user_id == user_id)
            .where(RoyaltyStatement.id.in_(ids))
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())
