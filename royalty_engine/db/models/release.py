from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from royalty_engine.db.base import Base
from royalty_engine.db.types import BigIntPK, UTCDateTime


class Release(Base):
    """Album/single/EP. UPC is unique across the catalog when present."""

    __tablename__ = "releases"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    artist_id: Mapped[int] = mapped_column(
        ForeignKey("artists.id", ondelete="RESTRICT"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    upc: Mapped[Optional[str]] = mapped_column(String(12), unique=True, nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    language: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    copyright_info: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    cover_art: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    cover_art_width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    split_lock_version: Mapped[int] = mapped_column(
        Integer, server_default="0", default=0, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("idx_releases_artist_id", "artist_id"),)
