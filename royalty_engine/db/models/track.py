from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from royalty_engine.db.base import Base
from royalty_engine.db.types import BigIntPK, UTCDateTime


class Track(Base):
    """Track on a release. ISRC is unique across the catalog when present."""

    __tablename__ = "tracks"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    release_id: Mapped[int] = mapped_column(
        ForeignKey("releases.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    isrc: Mapped[Optional[str]] = mapped_column(String(12), unique=True, nullable=True)
    duration_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    track_number: Mapped[int] = mapped_column(Integer, nullable=False)
    split_lock_version: Mapped[int] = mapped_column(
        Integer, server_default="0", default=0, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("duration_ms > 0", name="positive_track_duration"),
        Index("idx_tracks_release_id", "release_id"),
    )
