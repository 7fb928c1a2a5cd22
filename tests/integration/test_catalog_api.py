import pytest
from httpx import AsyncClient

from tests.utils import CatalogFactory, UserFactory, create_user_with_artist


@pytest.mark.integration
class TestCatalogAPI:
    async def test_create_user(self, client: AsyncClient) -> None:
        payload = UserFactory.create_user_data(user_id="usr_catalog")

        response = await client.post("/v1/users", json=payload)

        assert response.status_code == 201
        assert response.json()["id"] == "usr_catalog"

        duplicate = await client.post("/v1/users", json=payload)
        assert duplicate.status_code == 409

    async def test_user_id_prefix(self, client: AsyncClient) -> None:
        response = await client.post(
            "/v1/users", json=UserFactory.create_user_data(user_id="abc")
        )

        assert response.status_code == 422

    async def test_artist_for_unknown_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/v1/artists", json=CatalogFactory.create_artist_data("usr_missing")
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    async def test_invalid_release_metadata(
        self, client: AsyncClient, sample_user_id: str
    ) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        payload = CatalogFactory.create_release_data(
            artist_id, title="Rock & Roll", genre="Polka"
        )

        response = await client.post("/v1/releases", json=payload)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "METADATA_INVALID"
        assert set(error["details"]["errors"]) == {
            "title contains forbidden characters",
            "genre has a value that is not allowed",
        }
        assert error["details"]["score"] == 82

    async def test_platform_rules_on_release(
        self, client: AsyncClient, sample_user_id: str
    ) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        payload = CatalogFactory.create_release_data(artist_id, platforms=["youtube"])

        response = await client.post("/v1/releases", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["details"]["errors"] == [
            "youtube: cover_art is required"
        ]

    async def test_duplicate_upc(self, client: AsyncClient, sample_user_id: str) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        payload = CatalogFactory.create_release_data(artist_id, upc="123456789012")

        first = await client.post("/v1/releases", json=payload)
        assert first.status_code == 201

        second = await client.post("/v1/releases", json=payload)
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "CATALOG_DUPLICATE_CODE"
        assert second.json()["error"]["details"] == {
            "field": "upc",
            "value": "123456789012",
        }

    async def test_duplicate_isrc(self, client: AsyncClient, sample_user_id: str) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        release = await client.post(
            "/v1/releases", json=CatalogFactory.create_release_data(artist_id)
        )
        release_id = release.json()["id"]
        payload = CatalogFactory.create_track_data(release_id, isrc="USABC2400001")

        first = await client.post("/v1/tracks", json=payload)
        assert first.status_code == 201

        second = await client.post("/v1/tracks", json=payload)
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "CATALOG_DUPLICATE_CODE"

    async def test_track_for_unknown_release(self, client: AsyncClient) -> None:
        response = await client.post(
            "/v1/tracks", json=CatalogFactory.create_track_data(999999)
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RELEASE_NOT_FOUND"


@pytest.mark.integration
class TestMetadataValidationAPI:
    async def test_validate_without_persisting(self, client: AsyncClient) -> None:
        payload = {
            "entity_type": "track",
            "metadata": {"title": "", "duration_ms": 10000, "track_number": 1},
            "platforms": ["spotify"],
        }

        response = await client.post("/v1/metadata/validate", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["errors"] == [
            "title is required",
            "Track must be at least 30 seconds long",
        ]
        assert data["score"] == 80
        assert data["recommendations"] == ["Fill in all required fields"]

    async def test_malformed_numbers_are_reported(self, client: AsyncClient) -> None:
        release = {
            "entity_type": "release",
            "metadata": {
                "title": "First Light",
                "genre": "Rock",
                "language": "en",
                "release_date": "2026-04-01",
                "cover_art": "cover.jpg",
                "cover_art_width": "wide",
            },
            "platforms": ["spotify"],
        }
        track = {
            "entity_type": "track",
            "metadata": {"title": "A", "duration_ms": "NaN", "track_number": 1},
        }

        release_response = await client.post("/v1/metadata/validate", json=release)
        track_response = await client.post("/v1/metadata/validate", json=track)

        assert release_response.status_code == 200
        assert release_response.json()["valid"] is False
        assert release_response.json()["errors"] == [
            "spotify: cover_art_width must be a number"
        ]
        assert track_response.status_code == 200
        assert track_response.json()["valid"] is False
        assert track_response.json()["errors"] == ["duration_ms must be a number"]

    async def test_unknown_entity_type(self, client: AsyncClient) -> None:
        response = await client.post(
            "/v1/metadata/validate",
            json={"entity_type": "playlist", "metadata": {}},
        )

        assert response.status_code == 422
