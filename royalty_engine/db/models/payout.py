from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from royalty_engine.core.enums import PayoutStatus
from royalty_engine.db.base import Base
from royalty_engine.db.types import BigIntPK, JSONType, UTCDateTime

# Informational link between a payout and the statements it intends to cover.
payout_statements = Table(
    "payout_statements",
    Base.metadata,
    Column(
        "payout_id",
        BigIntPK,
        ForeignKey("payouts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "statement_id",
        BigIntPK,
        ForeignKey("royalty_statements.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
)


class Payout(Base):
    """Payout request. Status lifecycle: pending → processing → completed/failed,
    or pending → cancelled. Never deleted."""

    __tablename__ = "payouts"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_details: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    status: Mapped[PayoutStatus] = mapped_column(
        String(20), server_default="pending", nullable=False
    )
    requested_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    processed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    processed_by: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    failed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="positive_payout_amount"),
        CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'cancelled', 'failed')",
            name="valid_payout_status",
        ),
        CheckConstraint(
            "(status = 'completed' AND completed_at IS NOT NULL) OR (status != 'completed')",
            name="completed_at_consistency",
        ),
        Index("idx_payouts_user_currency_status", "user_id", "currency", "status"),
        Index("idx_payouts_requested", "user_id", "requested_at"),
    )
