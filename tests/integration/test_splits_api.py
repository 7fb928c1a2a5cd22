import pytest
from httpx import AsyncClient

from tests.utils import CatalogFactory, create_user_with_artist


async def create_release(client: AsyncClient, artist_id: int) -> int:
    response = await client.post(
        "/v1/releases", json=CatalogFactory.create_release_data(artist_id)
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def create_track(client: AsyncClient, release_id: int) -> int:
    response = await client.post(
        "/v1/tracks", json=CatalogFactory.create_track_data(release_id)
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def split_payload(artist_id: int, percentage: str, split_type: str = "master", **scope) -> dict:
    return {
        "artist_id": artist_id,
        "split_type": split_type,
        "percentage": percentage,
        "role": "producer",
        **scope,
    }


@pytest.mark.integration
class TestSplitsAPI:
    async def test_create_split(self, client: AsyncClient, sample_user_id: str) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        release_id = await create_release(client, artist_id)

        response = await client.post(
            "/v1/splits", json=split_payload(artist_id, "33.3", release_id=release_id)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["release_id"] == release_id
        assert data["track_id"] is None
        assert data["basis_points"] == 3330
        assert data["percentage"] == "33.3"

    async def test_allocation_ceiling(self, client: AsyncClient, sample_user_id: str) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        release_id = await create_release(client, artist_id)

        first = await client.post(
            "/v1/splits", json=split_payload(artist_id, "60", release_id=release_id)
        )
        assert first.status_code == 201

        rejected = await client.post(
            "/v1/splits", json=split_payload(artist_id, "50", release_id=release_id)
        )
        assert rejected.status_code == 409
        body = rejected.json()
        assert body["success"] is False
        assert body["error"]["code"] == "SPLIT_ALLOCATION_EXCEEDED"
        assert body["error"]["message"] == (
            "Split allocation would exceed 100%. Available: 40.0%"
        )
        assert body["error"]["details"]["available_basis_points"] == 4000
        assert body["error"]["details"]["available_percentage"] == "40.0"

        exact_fit = await client.post(
            "/v1/splits", json=split_payload(artist_id, "40", release_id=release_id)
        )
        assert exact_fit.status_code == 201

        listed = await client.get(f"/v1/splits?release_id={release_id}")
        assert sum(s["basis_points"] for s in listed.json()["splits"]) == 10000

    async def test_split_types_and_scopes_are_independent(
        self, client: AsyncClient, sample_user_id: str
    ) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        release_id = await create_release(client, artist_id)
        track_id = await create_track(client, release_id)

        payloads = [
            split_payload(artist_id, "100", "master", release_id=release_id),
            split_payload(artist_id, "100", "publishing", release_id=release_id),
            split_payload(artist_id, "100", "master", track_id=track_id),
        ]
        for payload in payloads:
            response = await client.post("/v1/splits", json=payload)
            assert response.status_code == 201, response.text

        allocation = await client.get(f"/v1/splits/allocation/release/{release_id}")
        assert allocation.status_code == 200
        assert allocation.json()["allocations"] == [
            {
                "split_type": "master",
                "allocated_percentage": "100.0",
                "available_percentage": "0.0",
            },
            {
                "split_type": "publishing",
                "allocated_percentage": "100.0",
                "available_percentage": "0.0",
            },
        ]

    async def test_scope_must_be_exactly_one(
        self, client: AsyncClient, sample_user_id: str
    ) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)

        response = await client.post("/v1/splits", json=split_payload(artist_id, "10"))

        assert response.status_code == 422

    async def test_percentage_precision(
        self, client: AsyncClient, sample_user_id: str
    ) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        release_id = await create_release(client, artist_id)

        response = await client.post(
            "/v1/splits", json=split_payload(artist_id, "33.33", release_id=release_id)
        )

        assert response.status_code == 422

    async def test_missing_scope(self, client: AsyncClient, sample_user_id: str) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)

        response = await client.post(
            "/v1/splits", json=split_payload(artist_id, "10", release_id=999999)
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RELEASE_NOT_FOUND"

    async def test_remove_split_frees_allocation(
        self, client: AsyncClient, sample_user_id: str
    ) -> None:
        artist_id = await create_user_with_artist(client, sample_user_id)
        release_id = await create_release(client, artist_id)

        created = await client.post(
            "/v1/splits", json=split_payload(artist_id, "100", release_id=release_id)
        )
        split_id = created.json()["id"]

        deleted = await client.delete(f"/v1/splits/{split_id}")
        assert deleted.status_code == 204

        again = await client.delete(f"/v1/splits/{split_id}")
        assert again.status_code == 404
        assert again.json()["error"]["code"] == "SPLIT_NOT_FOUND"

        response = await client.post(
            "/v1/splits", json=split_payload(artist_id, "100", release_id=release_id)
        )
        assert response.status_code == 201
