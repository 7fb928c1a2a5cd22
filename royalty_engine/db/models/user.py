from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from royalty_engine.db.base import Base
from royalty_engine.db.types import UTCDateTime


class User(Base):
    """Account that owns artists and requests payouts. ID must start with 'usr_'.

    ``payout_lock_version`` is bumped by every payout admission; the update
    doubles as the row lock that serializes balance checks per user.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    payout_lock_version: Mapped[int] = mapped_column(
        Integer, server_default="0", default=0, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (CheckConstraint("id LIKE 'usr_%'", name="user_id_format"),)
