from typing import Any

from pydantic import BaseModel, Field

from royalty_engine.core.enums import EntityType
from royalty_engine.schemas.common import response_meta


class MetadataValidationRequest(BaseModel):
    entity_type: EntityType
    metadata: dict[str, Any]
    platforms: list[str] = Field(default_factory=list)


class MetadataValidationResponse(BaseModel):
    valid: bool
    errors: list[str]
    warnings: list[str]
    score: int
    recommendations: list[str] = Field(default_factory=list)
    meta: dict = Field(default_factory=response_meta)
