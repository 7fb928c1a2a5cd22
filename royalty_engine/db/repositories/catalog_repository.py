from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.enums import SplitScope
from royalty_engine.db.models import Artist, Release, Track


class CatalogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_artist(
        self, user_id: str, name: str, email: Optional[str] = None
    ) -> Artist:
        artist = Artist(user_id=user_id, name=name, email=email)
        self.session.add(artist)
        await self.session.flush()
        await self.session.refresh(artist)
        return artist

    async def create_release(
        self,
        artist_id: int,
        title: str,
        upc: Optional[str] = None,
        genre: Optional[str] = None,
        language: Optional[str] = None,
        release_date: Optional[date] = None,
        label: Optional[str] = None,
        description: Optional[str] = None,
        copyright_info: Optional[str] = None,
        cover_art: Optional[str] = None,
        cover_art_width: Optional[int] = None,
    ) -> Release:
        release = Release(
            artist_id=artist_id,
            title=title,
            upc=upc,
            genre=genre,
            language=language,
            release_date=release_date,
            label=label,
            description=description,
            copyright_info=copyright_info,
            cover_art=cover_art,
            cover_art_width=cover_art_width,
        )
        self.session.add(release)
        await self.session.flush()
        await self.session.refresh(release)
        return release

    async def create_track(
        self,
        release_id: int,
        title: str,
        duration_ms: int,
        track_number: int,
        isrc: Optional[str] = None,
    ) -> Track:
        track = Track(
            release_id=release_id,
            title=title,
            duration_ms=duration_ms,
            track_number=track_number,
            isrc=isrc,
        )
        self.session.add(track)
        await self.session.flush()
        await self.session.refresh(track)
        return track

    async def get_artist(self, artist_id: int) -> Optional[Artist]:
        stmt = select(Artist).where(Artist.id == artist_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_release(self, release_id: int) -> Optional[Release]:
        stmt = select(Release).where(Release.id == release_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_track(self, track_id: int) -> Optional[Track]:
        stmt = select(Track).where(Track.id == track_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def code_exists(
        self, field: str, value: str, exclude_id: Optional[int] = None
    ) -> bool:
        """Check whether a UPC (releases) or ISRC (tracks) is already taken."""
        if field == "upc":
            model, column = Release, Release.upc
        elif field == "isrc":
            model, column = Track, Track.isrc
        else:
            raise ValueError(f"No uniqueness index for field: {field}")

        stmt = select(model.id).where(column == value)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def lock_split_scope(self, scope_type: SplitScope, scope_id: int) -> bool:
        """Write-lock a release or track row so split additions on it run
        one at a time. Returns False when the scope does not exist."""
        model = Release if scope_type == SplitScope.RELEASE else Track
        stmt = (
            update(model)
            .where(model.id == scope_id)
            .values(split_lock_version=model.split_lock_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
