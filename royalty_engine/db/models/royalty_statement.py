from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from royalty_engine.core.enums import StatementStatus
from royalty_engine.db.base import Base
from royalty_engine.db.types import BigIntPK, UTCDateTime


class RoyaltyStatement(Base):
    """Revenue earned by an artist on one platform over one period.

    Status lifecycle: draft → generated/finalized → paid. Only finalized
    statements count towards the owner's earned balance.
    """

    __tablename__ = "royalty_statements"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    artist_id: Mapped[int] = mapped_column(
        ForeignKey("artists.id", ondelete="RESTRICT"), nullable=False
    )
    platform: Mapped[str] = mapped_column(String(50), nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_streams: Mapped[int] = mapped_column(
        BigInteger, server_default="0", default=0, nullable=False
    )
    total_sales: Mapped[int] = mapped_column(
        BigInteger, server_default="0", default=0, nullable=False
    )
    gross_revenue_cents: Mapped[int] = mapped_column(
        BigInteger, server_default="0", default=0, nullable=False
    )
    platform_commission_cents: Mapped[int] = mapped_column(
        BigInteger, server_default="0", default=0, nullable=False
    )
    net_revenue_cents: Mapped[int] = mapped_column(
        BigInteger, server_default="0", default=0, nullable=False
    )
    currency: Mapped[str] = mapped_column(
        String(3), server_default="USD", nullable=False
    )
    status: Mapped[StatementStatus] = mapped_column(
        String(20), server_default="draft", nullable=False
    )
    payment_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'generated', 'finalized', 'paid')",
            name="valid_statement_status",
        ),
        CheckConstraint("period_end >= period_start", name="statement_period_order"),
        UniqueConstraint(
            "artist_id",
            "platform",
            "period_start",
            "period_end",
            name="uq_statement_artist_platform_period",
        ),
        Index("idx_statements_artist_currency_status", "artist_id", "currency", "status"),
    )
