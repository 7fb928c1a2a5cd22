from fastapi import APIRouter, status

from royalty_engine.api.dependencies import ClockDep, SessionDep
from royalty_engine.schemas.catalog import (
    ArtistCreate,
    ArtistResponse,
    ReleaseCreate,
    ReleaseResponse,
    TrackCreate,
    TrackResponse,
)
from royalty_engine.services.catalog_service import CatalogService

router = APIRouter()


@router.post(
    "/artists", response_model=ArtistResponse, status_code=status.HTTP_201_CREATED
)
async def create_artist(
    artist_data: ArtistCreate, session: SessionDep, clock: ClockDep
) -> ArtistResponse:
    async with session.begin():
        service = CatalogService(session, clock=clock)
        artist = await service.create_artist(
            artist_data.user_id, artist_data.name, artist_data.email
        )
        return ArtistResponse.model_validate(artist)


@router.post(
    "/releases", response_model=ReleaseResponse, status_code=status.HTTP_201_CREATED
)
async def create_release(
    release_data: ReleaseCreate, session: SessionDep, clock: ClockDep
) -> ReleaseResponse:
    async with session.begin():
        service = CatalogService(session, clock=clock)
        release = await service.create_release(**release_data.model_dump())
        return ReleaseResponse.model_validate(release)


@router.post(
    "/tracks", response_model=TrackResponse, status_code=status.HTTP_201_CREATED
)
async def create_track(
    track_data: TrackCreate, session: SessionDep, clock: ClockDep
) -> TrackResponse:
    async with session.begin():
        service = CatalogService(session, clock=clock)
        track = await service.create_track(**track_data.model_dump())
        return TrackResponse.model_validate(track)
