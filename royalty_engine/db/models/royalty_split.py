from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from royalty_engine.db.base import Base
from royalty_engine.db.types import BigIntPK, UTCDateTime


class RoyaltySplit(Base):
    """Collaborator share of a release or a track, stored in basis points.

    Exactly one of release_id/track_id is set. The per (scope, split_type)
    sum is capped at 10000 by SplitAllocator, not by the database.
    """

    __tablename__ = "royalty_splits"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    release_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("releases.id", ondelete="CASCADE"), nullable=True
    )
    track_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tracks.id", ondelete="CASCADE"), nullable=True
    )
    artist_id: Mapped[int] = mapped_column(
        ForeignKey("artists.id", ondelete="CASCADE"), nullable=False
    )
    split_type: Mapped[str] = mapped_column(String(30), nullable=False)
    basis_points: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "(release_id IS NULL) <> (track_id IS NULL)", name="split_single_scope"
        ),
        CheckConstraint(
            "basis_points >= 0 AND basis_points <= 10000", name="split_basis_points_range"
        ),
        Index("idx_splits_release_type", "release_id", "split_type"),
        Index("idx_splits_track_type", "track_id", "split_type"),
    )
