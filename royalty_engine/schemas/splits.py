from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from royalty_engine.core.enums import SplitScope
from royalty_engine.db.models import RoyaltySplit
from royalty_engine.db.types import basis_points_to_percentage
from royalty_engine.schemas.common import response_meta


class SplitCreate(BaseModel):
    release_id: Optional[int] = None
    track_id: Optional[int] = None
    artist_id: int
    split_type: str = Field(..., min_length=1, max_length=30)
    percentage: Decimal = Field(..., ge=0, le=100, decimal_places=1)
    role: Optional[str] = Field(default=None, max_length=100)
    created_by: Optional[str] = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def check_single_scope(self) -> "SplitCreate":
        if (self.release_id is None) == (self.track_id is None):
            raise ValueError("Exactly one of release_id or track_id is required")
        return self

    @property
    def scope(self) -> tuple[SplitScope, int]:
        if self.release_id is not None:
            return SplitScope.RELEASE, self.release_id
        return SplitScope.TRACK, self.track_id


class SplitResponse(BaseModel):
    id: int
    release_id: Optional[int] = None
    track_id: Optional[int] = None
    artist_id: int
    split_type: str
    basis_points: int
    percentage: Decimal
    role: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_split(cls, split: RoyaltySplit) -> "SplitResponse":
        return cls(
            id=split.id,
            release_id=split.release_id,
            track_id=split.track_id,
            artist_id=split.artist_id,
            split_type=split.split_type,
            basis_points=split.basis_points,
            percentage=basis_points_to_percentage(split.basis_points),
            role=split.role,
            created_by=split.created_by,
            created_at=split.created_at,
        )


class SplitListResponse(BaseModel):
    splits: list[SplitResponse]
    meta: dict = Field(default_factory=response_meta)


class SplitTypeAllocationResponse(BaseModel):
    split_type: str
    allocated_percentage: Decimal
    available_percentage: Decimal


class AllocationResponse(BaseModel):
    scope_type: SplitScope
    scope_id: int
    allocations: list[SplitTypeAllocationResponse]
    meta: dict = Field(default_factory=response_meta)
