import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.clock import Clock, SystemClock
from royalty_engine.core.enums import PaymentMethod, PayoutStatus
from royalty_engine.db.models import Payout, RoyaltyStatement
from royalty_engine.db.repositories import (
    PayoutRepository,
    StatementRepository,
    UserRepository,
)
from royalty_engine.exceptions import (
    EntityNotFoundException,
    InsufficientBalanceException,
    InvalidStatementLinkException,
    InvalidStateTransitionException,
    PaymentDetailsException,
    UserNotFoundException,
    ValidationException,
)
from royalty_engine.metrics import payouts_total
from royalty_engine.services.balance_ledger import BalanceLedger

logger = logging.getLogger(__name__)

CANCELLATION_REASON = "User requested cancellation"

DEFAULT_STATISTICS_PERIOD = "1y"
STATISTICS_PERIODS = {
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
    "2y": timedelta(days=730),
}

# Informational per-currency minimums; request_payout does not enforce them.
MINIMUM_PAYOUT_CENTS = {
    "USD": 1000,
    "EUR": 1000,
    "GBP": 800,
    "CAD": 1300,
    "AUD": 1500,
    "PLN": 4000,
}
DEFAULT_MINIMUM_PAYOUT_CENTS = 1000


@dataclass(frozen=True)
class PaymentMethodInfo:
    id: str
    name: str
    minimum_amount_cents: int
    processing_time: str
    fees: str
    required_fields: tuple[str, ...] = field(default_factory=tuple)


PAYMENT_METHODS: dict[str, PaymentMethodInfo] = {
    info.id: info
    for info in (
        PaymentMethodInfo(
            id=PaymentMethod.BANK_TRANSFER.value,
            name="Bank Transfer",
            minimum_amount_cents=1000,
            processing_time="3-5 business days",
            fees="Free",
            required_fields=(
                "bank_name",
                "account_number",
                "routing_number",
                "account_holder_name",
            ),
        ),
        PaymentMethodInfo(
            id=PaymentMethod.PAYPAL.value,
            name="PayPal",
            minimum_amount_cents=500,
            processing_time="1-2 business days",
            fees="2% + $0.30",
            required_fields=("paypal_email",),
        ),
        PaymentMethodInfo(
            id=PaymentMethod.WISE.value,
            name="Wise (formerly TransferWise)",
            minimum_amount_cents=100,
            processing_time="1-3 business days",
            fees="Variable by currency",
            required_fields=("wise_email",),
        ),
        PaymentMethodInfo(
            id=PaymentMethod.CRYPTO.value,
            name="Cryptocurrency",
            minimum_amount_cents=2500,
            processing_time="24 hours",
            fees="Network fees apply",
            required_fields=("wallet_address", "currency_type"),
        ),
    )
}


@dataclass
class CurrencyStatistics:
    currency: str
    total_payouts: int
    total_paid_cents: int
    total_pending_cents: int
    average_payout_cents: int
    min_payout_cents: int
    max_payout_cents: int


def validate_payment_details(payment_method: str, payment_details: Optional[dict]) -> None:
    """Raise PaymentDetailsException listing every missing field."""
    info = PAYMENT_METHODS.get(payment_method)
    if info is None:
        raise PaymentDetailsException(
            payment_method, [f"Unsupported payment method: {payment_method}"]
        )
    details = payment_details or {}
    missing = [
        f"{name} is required"
        for name in info.required_fields
        if not str(details.get(name) or "").strip()
    ]
    if missing:
        raise PaymentDetailsException(payment_method, missing)


class PayoutWorkflow:
    def __init__(self, session: AsyncSession, clock: Optional[Clock] = None) -> None:
        self.session = session
        self.clock = clock or SystemClock()
        self.user_repo = UserRepository(session)
        self.payout_repo = PayoutRepository(session)
        self.statement_repo = StatementRepository(session)
        self.ledger = BalanceLedger(session)

    async def request_payout(
        self,
        user_id: str,
        amount_cents: int,
        currency: str,
        payment_method: str,
        payment_details: Optional[dict] = None,
        statement_ids: Iterable[int] = (),
    ) -> Payout:
        """Must be called within transaction context.

        The user row lock is the first write of the transaction; it holds
        until commit, so concurrent requests for one user are admitted one at
        a time against a balance that includes every earlier pending payout.
        """
        if amount_cents <= 0:
            raise ValidationException(
                message="Payout amount must be positive",
                details={"amount_cents": amount_cents},
            )
        validate_payment_details(payment_method, payment_details)

        logger.info(
            "Starting payout request user_id=%s currency=%s amount_cents=%s",
            user_id,
            currency,
            amount_cents,
            extra={"user_id": user_id, "currency": currency, "amount_cents": amount_cents},
        )

        locked = await self.user_repo.lock_for_payout(user_id)
        if not locked:
            raise UserNotFoundException(user_id)

        balance = await self.ledger.get_available_balance(user_id, currency)
        if amount_cents > balance.available_cents:
            payouts_total.labels(status="rejected").inc()
            logger.warning(
                "Insufficient balance for payout user_id=%s currency=%s available_cents=%s requested_cents=%s",
                user_id,
                currency,
                balance.available_cents,
                amount_cents,
                extra={
                    "user_id": user_id,
                    "currency": currency,
                    "available_cents": balance.available_cents,
                    "requested_cents": amount_cents,
                },
            )
            raise InsufficientBalanceException(
                user_id, currency, balance.available_cents, amount_cents
            )

        linked_ids = list(dict.fromkeys(statement_ids))
        if linked_ids:
            owned = await self.statement_repo.filter_owned(user_id, linked_ids)
            invalid = [sid for sid in linked_ids if sid not in owned]
            if invalid:
                raise InvalidStatementLinkException(user_id, invalid)

        payout = await self.payout_repo.create_payout(
            user_id=user_id,
            amount_cents=amount_cents,
            currency=currency,
            payment_method=payment_method,
            payment_details=payment_details,
            requested_at=self.clock.now(),
        )
        await self.payout_repo.link_statements(payout.id, linked_ids)

        payouts_total.labels(status=PayoutStatus.PENDING.value).inc()
        logger.info(
            "Payout requested payout_id=%s user_id=%s currency=%s amount_cents=%s statements=%s",
            payout.id,
            user_id,
            currency,
            amount_cents,
            len(linked_ids),
            extra={
                "payout_id": payout.id,
                "user_id": user_id,
                "currency": currency,
                "amount_cents": amount_cents,
                "statements": len(linked_ids),
            },
        )
        return payout

    async def _transition(
        self,
        payout_id: int,
        from_status: PayoutStatus,
        to_status: PayoutStatus,
        user_id: Optional[str] = None,
        **values: Any,
    ) -> Payout:
        updated = await self.payout_repo.transition(
            payout_id, from_status, to_status, user_id=user_id, **values
        )
        if not updated:
            logger.warning(
                "Payout transition rejected payout_id=%s required_status=%s target_status=%s",
                payout_id,
                from_status.value,
                to_status.value,
                extra={
                    "payout_id": payout_id,
                    "required_status": from_status.value,
                    "target_status": to_status.value,
                },
            )
            raise InvalidStateTransitionException("payout", payout_id, from_status.value)

        payout = await self.payout_repo.get_by_id(payout_id)
        payouts_total.labels(status=to_status.value).inc()
        logger.info(
            "Payout status changed payout_id=%s status=%s",
            payout_id,
            to_status.value,
            extra={"payout_id": payout_id, "status": to_status.value},
        )
        return payout

    async def cancel_payout(self, payout_id: int, user_id: str) -> Payout:
        return await self._transition(
            payout_id,
            PayoutStatus.PENDING,
            PayoutStatus.CANCELLED,
            user_id=user_id,
            cancelled_at=self.clock.now(),
            cancellation_reason=CANCELLATION_REASON,
        )

    async def process_payout(
        self, payout_id: int, processor_id: str, payment_reference: Optional[str] = None
    ) -> Payout:
        return await self._transition(
            payout_id,
            PayoutStatus.PENDING,
            PayoutStatus.PROCESSING,
            processed_at=self.clock.now(),
            processed_by=processor_id,
            payment_reference=payment_reference,
        )

    async def complete_payout(
        self, payout_id: int, processor_id: str, transaction_id: Optional[str] = None
    ) -> Payout:
        logger.info(
            "Completing payout payout_id=%s processor_id=%s transaction_id=%s",
            payout_id,
            processor_id,
            transaction_id,
            extra={
                "payout_id": payout_id,
                "processor_id": processor_id,
                "transaction_id": transaction_id,
            },
        )
        return await self._transition(
            payout_id,
            PayoutStatus.PROCESSING,
            PayoutStatus.COMPLETED,
            completed_at=self.clock.now(),
            transaction_id=transaction_id,
        )

    async def fail_payout(self, payout_id: int, processor_id: str, reason: str) -> Payout:
        """Mark a processing payout as failed; its amount becomes available again."""
        logger.info(
            "Failing payout payout_id=%s processor_id=%s",
            payout_id,
            processor_id,
            extra={"payout_id": payout_id, "processor_id": processor_id},
        )
        return await self._transition(
            payout_id,
            PayoutStatus.PROCESSING,
            PayoutStatus.FAILED,
            failed_at=self.clock.now(),
            failure_reason=reason,
        )

    async def list_payouts(
        self,
        user_id: str,
        status: Optional[PayoutStatus] = None,
        currency: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[tuple[Payout, int]], int]:
        return await self.payout_repo.list_for_user(
            user_id,
            status=status,
            currency=currency,
            limit=limit,
            offset=(page - 1) * limit,
        )

    async def get_payout(
        self, payout_id: int, user_id: str
    ) -> tuple[Payout, list[RoyaltyStatement]]:
        payout = await self.payout_repo.get_by_id(payout_id, user_id=user_id)
        if payout is None:
            raise EntityNotFoundException("payout", payout_id)
        statements = await self.payout_repo.get_linked_statements(payout_id)
        return payout, statements

    async def get_statistics(
        self, user_id: str, period: str = DEFAULT_STATISTICS_PERIOD
    ) -> list[CurrencyStatistics]:
        window = STATISTICS_PERIODS.get(period, STATISTICS_PERIODS[DEFAULT_STATISTICS_PERIOD])
        since = self.clock.now() - window
        rows = await self.payout_repo.get_statistics(user_id, since)
        return [
            CurrencyStatistics(
                currency=row.currency,
                total_payouts=int(row.total_payouts),
                total_paid_cents=int(row.total_paid or 0),
                total_pending_cents=int(row.total_pending or 0),
                average_payout_cents=int(round(row.avg_payout or 0)),
                min_payout_cents=int(row.min_payout or 0),
                max_payout_cents=int(row.max_payout or 0),
            )
            for row in rows
        ]

    @staticmethod
    def supported_payment_methods() -> list[PaymentMethodInfo]:
        return list(PAYMENT_METHODS.values())

    @staticmethod
    def minimum_payout_cents(currency: str) -> int:
        return MINIMUM_PAYOUT_CENTS.get(currency.upper(), DEFAULT_MINIMUM_PAYOUT_CENTS)
