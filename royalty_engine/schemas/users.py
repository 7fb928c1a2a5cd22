from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from royalty_engine.schemas.common import response_meta


class UserCreate(BaseModel):
    id: str = Field(..., pattern=r"^usr_", max_length=50)
    display_name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)


class UserResponse(BaseModel):
    id: str
    display_name: str
    email: Optional[str] = None
    created_at: datetime
    meta: dict = Field(default_factory=response_meta)

    model_config = ConfigDict(from_attributes=True)
