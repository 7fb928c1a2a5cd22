from pydantic import BaseModel, Field

from royalty_engine.schemas.common import response_meta


class UserBalance(BaseModel):
    user_id: str
    currency: str
    total_earned_cents: int
    total_paid_cents: int
    total_pending_cents: int
    available_cents: int
    meta: dict = Field(default_factory=response_meta)
