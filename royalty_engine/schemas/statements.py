from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from royalty_engine.core.enums import StatementStatus
from royalty_engine.schemas.common import Pagination, response_meta


class StatementCreate(BaseModel):
    artist_id: int
    platform: str = Field(..., min_length=1, max_length=50)
    period_start: date
    period_end: date
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    total_streams: int = Field(default=0, ge=0)
    total_sales: int = Field(default=0, ge=0)
    gross_revenue_cents: int = Field(default=0, ge=0)
    platform_commission_cents: int = Field(default=0, ge=0)
    net_revenue_cents: int = Field(..., ge=0)
    status: StatementStatus = StatementStatus.DRAFT
    created_by: Optional[str] = Field(default=None, max_length=50)


class StatementPayment(BaseModel):
    payment_method: Optional[str] = Field(default=None, max_length=50)
    payment_reference: Optional[str] = Field(default=None, max_length=255)
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None


class StatementResponse(BaseModel):
    id: int
    artist_id: int
    platform: str
    period_start: date
    period_end: date
    total_streams: int
    total_sales: int
    gross_revenue_cents: int
    platform_commission_cents: int
    net_revenue_cents: int
    currency: str
    status: StatementStatus
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    meta: dict = Field(default_factory=response_meta)

    model_config = ConfigDict(from_attributes=True)


class StatementListResponse(BaseModel):
    statements: list[StatementResponse]
    pagination: Pagination
    meta: dict = Field(default_factory=response_meta)
