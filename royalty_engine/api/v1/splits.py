from typing import Optional

from fastapi import APIRouter, status

from royalty_engine.api.dependencies import SessionDep
from royalty_engine.core.enums import SplitScope
from royalty_engine.db.types import basis_points_to_percentage
from royalty_engine.schemas.splits import (
    AllocationResponse,
    SplitCreate,
    SplitListResponse,
    SplitResponse,
    SplitTypeAllocationResponse,
)
from royalty_engine.services.split_allocator import SplitAllocator

router = APIRouter()


@router.post("", response_model=SplitResponse, status_code=status.HTTP_201_CREATED)
async def create_split(split_data: SplitCreate, session: SessionDep) -> SplitResponse:
    scope_type, scope_id = split_data.scope
    async with session.begin():
        allocator = SplitAllocator(session)
        split = await allocator.add_split(
            scope_type=scope_type,
            scope_id=scope_id,
            split_type=split_data.split_type,
            percentage=split_data.percentage,
            artist_id=split_data.artist_id,
            role=split_data.role,
            created_by=split_data.created_by,
        )
        return SplitResponse.from_split(split)


@router.get("", response_model=SplitListResponse)
async def list_splits(
    session: SessionDep,
    release_id: Optional[int] = None,
    track_id: Optional[int] = None,
    artist_id: Optional[int] = None,
) -> SplitListResponse:
    allocator = SplitAllocator(session)
    splits = await allocator.list_splits(
        release_id=release_id, track_id=track_id, artist_id=artist_id
    )
    return SplitListResponse(splits=[SplitResponse.from_split(s) for s in splits])


@router.get("/allocation/{scope_type}/{scope_id}", response_model=AllocationResponse)
async def get_allocation(
    scope_type: SplitScope, scope_id: int, session: SessionDep
) -> AllocationResponse:
    allocator = SplitAllocator(session)
    allocations = await allocator.get_allocation(scope_type, scope_id)
    return AllocationResponse(
        scope_type=scope_type,
        scope_id=scope_id,
        allocations=[
            SplitTypeAllocationResponse(
                split_type=a.split_type,
                allocated_percentage=basis_points_to_percentage(a.allocated_basis_points),
                available_percentage=basis_points_to_percentage(a.available_basis_points),
            )
            for a in allocations
        ],
    )


@router.delete("/{split_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_split(split_id: int, session: SessionDep) -> None:
    async with session.begin():
        allocator = SplitAllocator(session)
        await allocator.remove_split(split_id)
