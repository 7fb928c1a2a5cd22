from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.enums import SplitScope
from royalty_engine.db.models import RoyaltySplit


class SplitRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _scope_column(scope_type: SplitScope):
        if scope_type == SplitScope.RELEASE:
            return RoyaltySplit.release_id
        return RoyaltySplit.track_id

    async def sum_basis_points(
        self, scope_type: SplitScope, scope_id: int, split_type: str
    ) -> int:
        stmt = (
            select(func.coalesce(func.sum(RoyaltySplit.basis_points), 0))
            .where(self._scope_column(scope_type) == scope_id)
            .where(RoyaltySplit.split_type == split_type)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def allocation_by_type(
        self, scope_type: SplitScope, scope_id: int
    ) -> dict[str, int]:
        stmt = (
            select(
                RoyaltySplit.split_type,
                func.sum(RoyaltySplit.basis_points).label("allocated"),
            )
            .where(self._scope_column(scope_type) == scope_id)
            .group_by(RoyaltySplit.split_type)
            .order_by(RoyaltySplit.split_type)
        )
        result = await self.session.execute(stmt)
        return {row.split_type: int(row.allocated) for row in result.fetchall()}

    async def create_split(
        self,
        scope_type: SplitScope,
        scope_id: int,
        artist_id: int,
        split_type: str,
        basis_points: int,
        role: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> RoyaltySplit:
        split = RoyaltySplit(
            release_id=scope_id if scope_type == SplitScope.RELEASE else None,
            track_id=scope_id if scope_type == SplitScope.TRACK else None,
            artist_id=artist_id,
            split_type=split_type,
            basis_points=basis_points,
            role=role,
            created_by=created_by,
        )
        self.session.add(split)
        await self.session.flush()
        await self.session.refresh(split)
        return split

    async def delete(self, split_id: int) -> bool:
        stmt = delete(RoyaltySplit).where(RoyaltySplit.id == split_id)
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_splits(
        self,
        release_id: Optional[int] = None,
        track_id: Optional[int] = None,
        artist_id: Optional[int] = None,
    ) -> list[RoyaltySplit]:
        stmt = select(RoyaltySplit)
        if release_id is not None:
            stmt = stmt.where(RoyaltySplit.release_id == release_id)
        if track_id is not None:
            stmt = stmt.where(RoyaltySplit.track_id == track_id)
        if artist_id is not None:
            stmt = stmt.where(RoyaltySplit.artist_id == artist_id)
        result = await self.session.execute(stmt.order_by(RoyaltySplit.id))
        return list(result.scalars().all())
