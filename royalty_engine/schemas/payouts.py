from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from royalty_engine.core.enums import PayoutStatus
from royalty_engine.schemas.common import Pagination, response_meta


class PayoutCreate(BaseModel):
    user_id: str = Field(..., pattern=r"^usr_")
    amount_cents: int = Field(..., gt=0)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    payment_method: str
    payment_details: dict = Field(default_factory=dict)
    statement_ids: list[int] = Field(default_factory=list)


class PayoutCancel(BaseModel):
    user_id: str = Field(..., pattern=r"^usr_")


class PayoutProcess(BaseModel):
    processor_id: str = Field(..., min_length=1, max_length=50)
    payment_reference: Optional[str] = Field(default=None, max_length=255)


class PayoutComplete(BaseModel):
    processor_id: str = Field(..., min_length=1, max_length=50)
    transaction_id: Optional[str] = Field(default=None, max_length=255)


class PayoutFail(BaseModel):
    processor_id: str = Field(..., min_length=1, max_length=50)
    reason: str = Field(..., min_length=1)


class PayoutResponse(BaseModel):
    class Statement(BaseModel):
        id: int
        platform: str
        period_start: date
        period_end: date
        net_revenue_cents: int
        currency: str

        model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    amount_cents: int
    currency: str
    payment_method: str
    status: PayoutStatus
    requested_at: datetime
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    payment_reference: Optional[str] = None
    completed_at: Optional[datetime] = None
    transaction_id: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    failed_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    statements_count: Optional[int] = None
    statements: list[Statement] = Field(default_factory=list)
    meta: dict = Field(default_factory=response_meta)

    model_config = ConfigDict(from_attributes=True)


class PayoutListResponse(BaseModel):
    payouts: list[PayoutResponse]
    pagination: Pagination
    meta: dict = Field(default_factory=response_meta)


class PayoutStatistics(BaseModel):
    currency: str
    total_payouts: int
    total_paid_cents: int
    total_pending_cents: int
    average_payout_cents: int
    min_payout_cents: int
    max_payout_cents: int

    model_config = ConfigDict(from_attributes=True)


class PayoutStatisticsResponse(BaseModel):
    user_id: str
    period: str
    statistics: list[PayoutStatistics]
    meta: dict = Field(default_factory=response_meta)


class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    minimum_amount_cents: int
    processing_time: str
    fees: str
    required_fields: list[str]

    model_config = ConfigDict(from_attributes=True)


class MinimumPayoutResponse(BaseModel):
    currency: str
    minimum_amount_cents: int
