from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy import case, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.enums import PayoutStatus
from royalty_engine.db.models import Payout, RoyaltyStatement, payout_statements


class PayoutRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_payout(
        self,
        user_id: str,
        amount_cents: int,
        currency: str,
        payment_method: str,
        requested_at: datetime,
        payment_details: Optional[dict] = None,
    ) -> Payout:
        payout = Payout(
            user_id=user_id,
            amount_cents=amount_cents,
            currency=currency,
            payment_method=payment_method,
            payment_details=payment_details,
            status=PayoutStatus.PENDING.value,
            requested_at=requested_at,
        )
        self.session.add(payout)
        await self.session.flush()
        await self.session.refresh(payout)
        return payout

    async def link_statements(self, payout_id: int, statement_ids: Iterable[int]) -> int:
        rows = [
            {"payout_id": payout_id, "statement_id": statement_id}
            for statement_id in statement_ids
        ]
        if not rows:
            return 0
        await self.session.execute(insert(payout_statements), rows)
        return len(rows)

    async def get_by_id(
        self, payout_id: int, user_id: Optional[str] = None
    ) -> Optional[Payout]:
        stmt = (
            select(Payout)
            .where(Payout.id == payout_id)
            .execution_options(populate_existing=True)
        )
        if user_id is not None:
            stmt = stmt.where(Payout.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def transition(
        self,
        payout_id: int,
        from_status: PayoutStatus,
        to_status: PayoutStatus,
        user_id: Optional[str] = None,
        **values: Any,
    ) -> bool:
        """Single-row conditional update. False when the payout is missing,
        owned by someone else, or not in ``from_status``."""
        stmt = (
            update(Payout)
            .where(Payout.id == payout_id)
            .where(Payout.status == from_status.value)
            .values(status=to_status.value, **values)
            .execution_options(synchronize_session=False)
        )
        if user_id is not None:
            stmt = stmt.where(Payout.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def get_committed_totals(self, user_id: str, currency: str) -> tuple[int, int]:
        """
        Sum payout amounts for one user and currency in a single query.

        Returns: (paid_cents, pending_cents). Processing counts as paid.
        """
        stmt = select(
            func.coalesce(
                func.sum(
                    case(
                        (
                            Payout.status.in_(
                                [
                                    PayoutStatus.COMPLETED.value,
                                    PayoutStatus.PROCESSING.value,
                                ]
                            ),
                            Payout.amount_cents,
                        ),
                        else_=0,
                    )
                ),
                0,
            ).label("paid"),
            func.coalesce(
                func.sum(
                    case(
                        (Payout.status == PayoutStatus.PENDING.value, Payout.amount_cents),
                        else_=0,
                    )
                ),
                0,
            ).label("pending"),
        ).where((Payout.user_id == user_id) & (Payout.currency == currency))

        result = await self.session.execute(stmt)
        row = result.one()
        return int(row.paid), int(row.pending)

    async def list_for_user(
        self,
        user_id: str,
        status: Optional[PayoutStatus] = None,
        currency: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[tuple[Payout, int]], int]:
        filters = [Payout.user_id == user_id]
        if status:
            filters.append(Payout.status == status.value)
        if currency:
            filters.append(Payout.currency == currency)

        statements_count = func.count(payout_statements.c.statement_id).label(
            "statements_count"
        )
        stmt = (
            select(Payout, statements_count)
            .outerjoin(payout_statements, payout_statements.c.payout_id == Payout.id)
            .where(*filters)
            .group_by(Payout.id)
            .order_by(Payout.requested_at.desc(), Payout.id.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count(Payout.id)).where(*filters)

        result = await self.session.execute(stmt)
        rows = [(row[0], int(row[1])) for row in result.all()]
        total = await self.session.execute(count_stmt)
        return rows, int(total.scalar() or 0)

    async def get_linked_statements(self, payout_id: int) -> list[RoyaltyStatement]:
        stmt = (
            select(RoyaltyStatement)
            .join(
                payout_statements,
                payout_statements.c.statement_id == RoyaltyStatement.id,
            )
            .where(payout_statements.c.payout_id == payout_id)
            .order_by(RoyaltyStatement.period_start)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_statistics(self, user_id: str, since: datetime) -> list[Any]:
        completed = Payout.status == PayoutStatus.COMPLETED.value
        stmt = (
            select(
                Payout.currency,
                func.count(Payout.id).label("total_payouts"),
                func.coalesce(
                    func.sum(case((completed, Payout.amount_cents), else_=0)), 0
                ).label("total_paid"),
                func.coalesce(
                    func.sum(
                        case(
                            (Payout.status == PayoutStatus.PENDING.value, Payout.amount_cents),
                            else_=0,
                        )
                    ),
                    0,
                ).label("total_pending"),
                func.avg(case((completed, Payout.amount_cents), else_=None)).label(
                    "avg_payout"
                ),
                func.min(case((completed, Payout.amount_cents), else_=None)).label(
                    "min_payout"
                ),
                func.max(case((completed, Payout.amount_cents), else_=None)).label(
                    "max_payout"
                ),
            )
            .where(Payout.user_id == user_id)
            .where(Payout.requested_at >= since)
            .group_by(Payout.currency)
            .order_by(Payout.currency)
        )
        result = await self.session.execute(stmt)
        return list(result.fetchall())
