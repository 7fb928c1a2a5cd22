from datetime import date, datetime, timezone
from typing import Optional

import pytest

from royalty_engine.core.clock import FixedClock
from royalty_engine.exceptions import ValidationException
from royalty_engine.services.metadata_validator import MetadataValidator, ValidationResult


class StubUniqueness:
    def __init__(self, taken: Optional[set[tuple[str, str]]] = None) -> None:
        self.taken = taken or set()
        self.calls: list[tuple[str, str, Optional[int]]] = []

    async def is_unique(
        self, field: str, value: str, exclude_id: Optional[int] = None
    ) -> bool:
        self.calls.append((field, value, exclude_id))
        return (field, value) not in self.taken


@pytest.fixture
def uniqueness() -> StubUniqueness:
    return StubUniqueness()


@pytest.fixture
def validator(uniqueness: StubUniqueness) -> MetadataValidator:
    clock = FixedClock(datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc))
    return MetadataValidator(uniqueness=uniqueness, clock=clock)


def valid_release(**overrides) -> dict:
    release = {
        "title": "First Light",
        "genre": "Rock",
        "language": "en",
        "release_date": date(2026, 4, 1),
    }
    release.update(overrides)
    return release


def valid_track(**overrides) -> dict:
    track = {"title": "Opening", "duration_ms": 210_000, "track_number": 1}
    track.update(overrides)
    return track


@pytest.mark.unit
class TestBaseRules:
    async def test_valid_release(self, validator: MetadataValidator) -> None:
        result = await validator.validate(valid_release(), "release")

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.score == 100

    async def test_reports_every_violation(self, validator: MetadataValidator) -> None:
        release = {"upc": "123", "genre": "Polka", "language": "EN"}

        result = await validator.validate(release, "release")

        assert result.valid is False
        assert set(result.errors) == {
            "title is required",
            "upc has an invalid format",
            "genre has a value that is not allowed",
            "language has an invalid format",
            "release_date is required",
        }
        # five errors, one populated bonus field (genre)
        assert result.score == 100 - 50 + 2

    async def test_blank_required_field_yields_single_error(
        self, validator: MetadataValidator
    ) -> None:
        result = await validator.validate(valid_release(title="   "), "release")

        assert result.errors == ["title is required"]

    async def test_forbidden_characters(self, validator: MetadataValidator) -> None:
        result = await validator.validate(valid_release(title="Rock & Roll"), "release")

        assert result.errors == ["title contains forbidden characters"]

    async def test_title_too_long(self, validator: MetadataValidator) -> None:
        result = await validator.validate(valid_release(title="x" * 501), "release")

        assert result.errors == ["title must be at most 500 characters"]

    async def test_release_date_too_far_in_future(
        self, validator: MetadataValidator
    ) -> None:
        result = await validator.validate(
            valid_release(release_date=date(2027, 6, 1)), "release"
        )

        assert result.errors == ["release_date may be at most 365 days in the future"]

    async def test_release_date_string_is_parsed(
        self, validator: MetadataValidator
    ) -> None:
        ok = await validator.validate(valid_release(release_date="2026-05-01"), "release")
        bad = await validator.validate(valid_release(release_date="not-a-date"), "release")

        assert ok.valid is True
        assert bad.errors == ["release_date has an invalid format"]

    @pytest.mark.parametrize(
        "duration_ms, message",
        [
            (10_000, "Track must be at least 30 seconds long"),
            (4_000_000, "Track must be at most 60 minutes long"),
        ],
    )
    async def test_track_duration_bounds(
        self, validator: MetadataValidator, duration_ms: int, message: str
    ) -> None:
        result = await validator.validate(valid_track(duration_ms=duration_ms), "track")

        assert result.errors == [message]

    async def test_track_number_bounds(self, validator: MetadataValidator) -> None:
        result = await validator.validate(valid_track(track_number=0), "track")

        assert result.errors == ["track_number must be at least 1"]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("duration_ms", "long"),
            ("duration_ms", "NaN"),
            ("duration_ms", "sNaN"),
            ("track_number", "Infinity"),
            ("track_number", "-Infinity"),
        ],
    )
    async def test_non_numeric_value_is_reported(
        self, validator: MetadataValidator, field: str, value: str
    ) -> None:
        result = await validator.validate(valid_track(**{field: value}), "track")

        assert result.valid is False
        assert result.errors == [f"{field} must be a number"]

    async def test_isrc_format(self, validator: MetadataValidator) -> None:
        ok = await validator.validate(valid_track(isrc="USABC2400001"), "track")
        bad = await validator.validate(valid_track(isrc="us-abc-24"), "track")

        assert ok.valid is True
        assert bad.errors == ["isrc has an invalid format"]

    async def test_artist_email(self, validator: MetadataValidator) -> None:
        result = await validator.validate({"name": "Band", "email": "nope"}, "artist")

        assert result.errors == ["email has an invalid format"]

    async def test_unknown_entity_type(self, validator: MetadataValidator) -> None:
        with pytest.raises(ValidationException):
            await validator.validate({}, "playlist")


@pytest.mark.unit
class TestPlatformRules:
    async def test_missing_cover_art(self, validator: MetadataValidator) -> None:
        result = await validator.validate(valid_release(), "release", ["spotify"])

        assert result.errors == ["spotify: cover_art is required"]
        assert result.warnings == []

    async def test_cover_art_format_and_width(self, validator: MetadataValidator) -> None:
        release = valid_release(cover_art="cover.gif", cover_art_width=500)

        result = await validator.validate(release, "release", ["spotify"])

        assert result.errors == ["spotify: cover_art format must be one of: jpg, png"]
        assert result.warnings == ["spotify: cover_art should be at least 640px wide"]

    @pytest.mark.parametrize("width", ["wide", "NaN", "Infinity"])
    async def test_non_numeric_cover_art_width(
        self, validator: MetadataValidator, width: str
    ) -> None:
        release = valid_release(cover_art="cover.jpg", cover_art_width=width)

        result = await validator.validate(release, "release", ["spotify"])

        assert result.valid is False
        assert result.errors == ["spotify: cover_art_width must be a number"]
        assert result.warnings == []

    async def test_platform_length_is_a_warning(self, validator: MetadataValidator) -> None:
        release = valid_release(
            title="x" * 150, cover_art="cover.jpg", cover_art_width=3000
        )

        result = await validator.validate(release, "release", ["spotify"])

        assert result.valid is True
        assert result.warnings == ["spotify: title may be too long (max 100)"]

    async def test_apple_music_requires_codes(self, validator: MetadataValidator) -> None:
        track_result = await validator.validate(valid_track(), "track", ["apple_music"])

        assert track_result.errors == ["apple_music: isrc is required"]

    async def test_unknown_platform_is_ignored(self, validator: MetadataValidator) -> None:
        result = await validator.validate(valid_release(), "release", ["tidal"])

        assert result.valid is True


@pytest.mark.unit
class TestUniqueness:
    async def test_taken_upc(self) -> None:
        uniqueness = StubUniqueness(taken={("upc", "123456789012")})
        validator = MetadataValidator(
            uniqueness=uniqueness,
            clock=FixedClock(datetime(2026, 3, 15, tzinfo=timezone.utc)),
        )

        result = await validator.validate(
            valid_release(upc="123456789012", id=7), "release"
        )

        assert result.errors == ["upc must be unique"]
        assert uniqueness.calls == [("upc", "123456789012", 7)]

    async def test_absent_code_is_not_checked(
        self, validator: MetadataValidator, uniqueness: StubUniqueness
    ) -> None:
        await validator.validate(valid_release(), "release")

        assert uniqueness.calls == []


@pytest.mark.unit
class TestScore:
    async def test_same_input_same_result(self, validator: MetadataValidator) -> None:
        release = valid_release(title="x" * 150, cover_art="cover.gif")

        first = await validator.validate(release, "release", ["spotify", "youtube"])
        second = await validator.validate(release, "release", ["spotify", "youtube"])

        assert first == second

    def test_penalties_and_bonus(self, validator: MetadataValidator) -> None:
        entity = {"label": "Indie", "description": "Debut album"}

        score = validator.calculate_score(entity, ["e1", "e2"], ["w1"])

        assert score == 100 - 20 - 5 + 4

    def test_score_is_clamped(self, validator: MetadataValidator) -> None:
        assert validator.calculate_score({}, ["e"] * 15, []) == 0
        assert (
            validator.calculate_score(
                {"label": "a", "description": "b", "genre": "Rock", "copyright_info": "c"},
                [],
                [],
            )
            == 100
        )


@pytest.mark.unit
class TestRecommendations:
    def test_hints_are_deduplicated(self) -> None:
        result = ValidationResult(
            valid=False,
            errors=["title is required", "release_date is required"],
            warnings=["spotify: cover_art should be at least 640px wide"],
            score=75,
        )

        hints = MetadataValidator.recommendations(result)

        assert hints == [
            "Fill in all required fields",
            "Consider using higher resolution cover art",
            "Complete additional information to improve metadata quality",
        ]

    def test_clean_result_has_no_hints(self) -> None:
        assert MetadataValidator.recommendations(ValidationResult(valid=True)) == []
