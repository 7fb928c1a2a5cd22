import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.enums import SplitScope
from royalty_engine.db.models import RoyaltySplit
from royalty_engine.db.repositories import CatalogRepository, SplitRepository
from royalty_engine.db.types import FULL_ALLOCATION_BP, percentage_to_basis_points
from royalty_engine.exceptions import (
    AllocationExceededException,
    EntityNotFoundException,
    ValidationException,
)
from royalty_engine.metrics import split_allocations_total

logger = logging.getLogger(__name__)


@dataclass
class SplitTypeAllocation:
    split_type: str
    allocated_basis_points: int
    available_basis_points: int


class SplitAllocator:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.split_repo = SplitRepository(session)
        self.catalog_repo = CatalogRepository(session)

    async def add_split(
        self,
        scope_type: SplitScope,
        scope_id: int,
        split_type: str,
        percentage: Decimal,
        artist_id: int,
        role: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> RoyaltySplit:
        """Must be called within transaction context.

        The scope row is write-locked before the allocation is summed, so two
        concurrent additions for the same scope cannot both see the old total.
        """
        if percentage < 0 or percentage > 100:
            raise ValidationException(
                message="Percentage must be between 0 and 100",
                details={"percentage": str(percentage)},
            )
        try:
            requested = percentage_to_basis_points(percentage)
        except ValueError:
            raise ValidationException(
                message="Percentage may have at most one decimal place",
                details={"percentage": str(percentage)},
            )

        locked = await self.catalog_repo.lock_split_scope(scope_type, scope_id)
        if not locked:
            raise EntityNotFoundException(scope_type.value, scope_id)

        if await self.catalog_repo.get_artist(artist_id) is None:
            raise EntityNotFoundException("artist", artist_id)

        allocated = await self.split_repo.sum_basis_points(
            scope_type, scope_id, split_type
        )
        if allocated + requested > FULL_ALLOCATION_BP:
            split_allocations_total.labels(result="rejected").inc()
            logger.warning(
                "Split allocation exceeded scope_type=%s scope_id=%s split_type=%s allocated_bp=%s requested_bp=%s",
                scope_type.value,
                scope_id,
                split_type,
                allocated,
                requested,
                extra={
                    "scope_type": scope_type.value,
                    "scope_id": scope_id,
                    "split_type": split_type,
                    "allocated_basis_points": allocated,
                    "requested_basis_points": requested,
                },
            )
            raise AllocationExceededException(
                scope_type=scope_type.value,
                scope_id=scope_id,
                split_type=split_type,
                available_basis_points=FULL_ALLOCATION_BP - allocated,
                requested_basis_points=requested,
            )

        split = await self.split_repo.create_split(
            scope_type=scope_type,
            scope_id=scope_id,
            artist_id=artist_id,
            split_type=split_type,
            basis_points=requested,
            role=role,
            created_by=created_by,
        )

        split_allocations_total.labels(result="accepted").inc()
        logger.info(
            "Split created split_id=%s scope_type=%s scope_id=%s split_type=%s basis_points=%s",
            split.id,
            scope_type.value,
            scope_id,
            split_type,
            requested,
            extra={
                "split_id": split.id,
                "scope_type": scope_type.value,
                "scope_id": scope_id,
                "split_type": split_type,
                "basis_points": requested,
            },
        )
        return split

    async def remove_split(self, split_id: int) -> None:
        deleted = await self.split_repo.delete(split_id)
        if not deleted:
            raise EntityNotFoundException("split", split_id)
        logger.info(
            "Split deleted split_id=%s", split_id, extra={"split_id": split_id}
        )

    async def list_splits(
        self,
        release_id: Optional[int] = None,
        track_id: Optional[int] = None,
        artist_id: Optional[int] = None,
    ) -> list[RoyaltySplit]:
        return await self.split_repo.list_splits(
            release_id=release_id, track_id=track_id, artist_id=artist_id
        )

    async def get_allocation(
        self, scope_type: SplitScope, scope_id: int
    ) -> list[SplitTypeAllocation]:
        if scope_type == SplitScope.RELEASE:
            scope = await self.catalog_repo.get_release(scope_id)
        else:
            scope = await self.catalog_repo.get_track(scope_id)
        if scope is None:
            raise EntityNotFoundException(scope_type.value, scope_id)

        by_type = await self.split_repo.allocation_by_type(scope_type, scope_id)
        return [
            SplitTypeAllocation(
                split_type=split_type,
                allocated_basis_points=allocated,
                available_basis_points=FULL_ALLOCATION_BP - allocated,
            )
            for split_type, allocated in by_type.items()
        ]
