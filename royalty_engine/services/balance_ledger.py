from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.db.repositories import PayoutRepository, StatementRepository


@dataclass(frozen=True)
class BalanceSnapshot:
    total_earned_cents: int
    total_paid_cents: int
    total_pending_cents: int

    @property
    def available_cents(self) -> int:
        return self.total_earned_cents - self.total_paid_cents - self.total_pending_cents


class BalanceLedger:
    """Derived balance per user and currency.

    Nothing is cached: every call re-reads statements and payouts through the
    caller's session, so inside a locked transaction the figures reflect all
    committed payouts.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.statement_repo = StatementRepository(session)
        self.payout_repo = PayoutRepository(session)

    async def get_available_balance(self, user_id: str, currency: str) -> BalanceSnapshot:
        earned = await self.statement_repo.sum_earned(user_id, currency)
        paid, pending = await self.payout_repo.get_committed_totals(user_id, currency)
        return BalanceSnapshot(
            total_earned_cents=earned,
            total_paid_cents=paid,
            total_pending_cents=pending,
        )
