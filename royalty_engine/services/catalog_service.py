import logging
from datetime import date
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from royalty_engine.core.clock import Clock
from royalty_engine.core.enums import EntityType
from royalty_engine.db.models import Artist, Release, Track, User
from royalty_engine.db.repositories import CatalogRepository, UserRepository
from royalty_engine.exceptions import (
    ConflictException,
    DuplicateCodeException,
    EntityNotFoundException,
    MetadataValidationException,
    UserNotFoundException,
    ValidationException,
)
from royalty_engine.services.metadata_rules import DEFAULT_RULES, MetadataRules
from royalty_engine.services.metadata_validator import (
    MetadataValidator,
    ValidationResult,
)

logger = logging.getLogger(__name__)

USER_ID_PREFIX = "usr_"


class CatalogUniquenessChecker:
    """UPC/ISRC uniqueness lookups against the catalog tables."""

    def __init__(self, session: AsyncSession) -> None:
        self.catalog_repo = CatalogRepository(session)

    async def is_unique(
        self, field: str, value: str, exclude_id: Optional[int] = None
    ) -> bool:
        return not await self.catalog_repo.code_exists(field, value, exclude_id)


class CatalogService:
    """Users, artists, releases and tracks.

    Artists, releases and tracks are only persisted after their metadata
    passes validation. A UPC or ISRC clash on otherwise valid metadata is a
    conflict rather than a validation failure.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Optional[Clock] = None,
        rules: MetadataRules = DEFAULT_RULES,
    ) -> None:
        self.session = session
        self.user_repo = UserRepository(session)
        self.catalog_repo = CatalogRepository(session)
        self.validator = MetadataValidator(
            uniqueness=CatalogUniquenessChecker(session), rules=rules, clock=clock
        )

    async def create_user(
        self, user_id: str, display_name: str, email: Optional[str] = None
    ) -> User:
        if not user_id.startswith(USER_ID_PREFIX):
            raise ValidationException(
                message=f"User id must start with {USER_ID_PREFIX}",
                details={"user_id": user_id},
            )
        if await self.user_repo.get_by_id(user_id) is not None:
            raise ConflictException(
                message=f"User already exists: {user_id}",
                details={"user_id": user_id},
            )
        return await self.user_repo.create(user_id, display_name, email)

    async def create_artist(
        self, user_id: str, name: str, email: Optional[str] = None
    ) -> Artist:
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundException(user_id)

        await self._validate(
            {"name": name, "email": email}, EntityType.ARTIST, platforms=()
        )
        artist = await self.catalog_repo.create_artist(user_id, name, email)
        logger.info(
            "Artist created artist_id=%s user_id=%s",
            artist.id,
            user_id,
            extra={"artist_id": artist.id, "user_id": user_id},
        )
        return artist

    async def create_release(
        self,
        artist_id: int,
        title: str,
        release_date: Optional[date] = None,
        genre: Optional[str] = None,
        language: Optional[str] = None,
        upc: Optional[str] = None,
        label: Optional[str] = None,
        description: Optional[str] = None,
        copyright_info: Optional[str] = None,
        cover_art: Optional[str] = None,
        cover_art_width: Optional[int] = None,
        platforms: Sequence[str] = (),
    ) -> Release:
        artist = await self.catalog_repo.get_artist(artist_id)
        if artist is None:
            raise EntityNotFoundException("artist", artist_id)

        fields = {
            "title": title,
            "upc": upc or None,
            "genre": genre,
            "language": language,
            "release_date": release_date,
            "label": label,
            "description": description,
            "copyright_info": copyright_info,
            "cover_art": cover_art,
            "cover_art_width": cover_art_width,
        }
        await self._validate(
            {**fields, "artist": artist.name}, EntityType.RELEASE, platforms
        )
        release = await self.catalog_repo.create_release(artist_id=artist_id, **fields)
        logger.info(
            "Release created release_id=%s artist_id=%s upc=%s",
            release.id,
            artist_id,
            upc,
            extra={"release_id": release.id, "artist_id": artist_id, "upc": upc},
        )
        return release

    async def create_track(
        self,
        release_id: int,
        title: str,
        duration_ms: int,
        track_number: int,
        isrc: Optional[str] = None,
        platforms: Sequence[str] = (),
    ) -> Track:
        if await self.catalog_repo.get_release(release_id) is None:
            raise EntityNotFoundException("release", release_id)

        fields = {
            "title": title,
            "duration_ms": duration_ms,
            "track_number": track_number,
            "isrc": isrc or None,
        }
        await self._validate(fields, EntityType.TRACK, platforms)
        track = await self.catalog_repo.create_track(release_id=release_id, **fields)
        logger.info(
            "Track created track_id=%s release_id=%s isrc=%s",
            track.id,
            release_id,
            isrc,
            extra={"track_id": track.id, "release_id": release_id, "isrc": isrc},
        )
        return track

    async def validate_metadata(
        self,
        entity: dict[str, Any],
        entity_type: EntityType,
        platforms: Sequence[str] = (),
    ) -> ValidationResult:
        return await self.validator.validate(entity, entity_type.value, platforms)

    async def _validate(
        self,
        entity: dict[str, Any],
        entity_type: EntityType,
        platforms: Sequence[str],
    ) -> ValidationResult:
        result = await self.validator.validate(entity, entity_type.value, platforms)
        if result.valid:
            return result

        duplicates = [
            name
            for name in ("upc", "isrc")
            if f"{name} must be unique" in result.errors
        ]
        if duplicates and len(duplicates) == len(result.errors):
            field = duplicates[0]
            raise DuplicateCodeException(field, str(entity[field]))

        raise MetadataValidationException(
            entity_type.value, result.errors, result.warnings, result.score
        )
