from fastapi import APIRouter

from royalty_engine.api.dependencies import ClockDep, SessionDep
from royalty_engine.schemas.metadata import (
    MetadataValidationRequest,
    MetadataValidationResponse,
)
from royalty_engine.services.catalog_service import CatalogService
from royalty_engine.services.metadata_validator import MetadataValidator

router = APIRouter()


@router.post("/validate", response_model=MetadataValidationResponse)
async def validate_metadata(
    request: MetadataValidationRequest, session: SessionDep, clock: ClockDep
) -> MetadataValidationResponse:
    service = CatalogService(session, clock=clock)
    result = await service.validate_metadata(
        request.metadata, request.entity_type, request.platforms
    )
    return MetadataValidationResponse(
        valid=result.valid,
        errors=result.errors,
        warnings=result.warnings,
        score=result.score,
        recommendations=MetadataValidator.recommendations(result),
    )
