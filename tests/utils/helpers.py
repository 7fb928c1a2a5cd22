import asyncio
from typing import List

from httpx import AsyncClient, Response

from tests.utils.factories import CatalogFactory, StatementFactory, UserFactory


async def create_user_with_artist(client: AsyncClient, user_id: str) -> int:
    """Create a user and one artist; return the artist id."""
    response = await client.post(
        "/v1/users", json=UserFactory.create_user_data(user_id=user_id)
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        "/v1/artists", json=CatalogFactory.create_artist_data(user_id)
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def add_finalized_statement(
    client: AsyncClient, artist_id: int, net_revenue_cents: int, currency: str = "USD", **kwargs
) -> int:
    response = await client.post(
        "/v1/statements",
        json=StatementFactory.create_statement_data(
            artist_id, net_revenue_cents=net_revenue_cents, currency=currency, **kwargs
        ),
    )
    assert response.status_code == 201, response.text
    statement_id = response.json()["id"]
    response = await client.post(f"/v1/statements/{statement_id}/finalize")
    assert response.status_code == 200, response.text
    return statement_id


async def seed_balance(
    client: AsyncClient, user_id: str, net_revenue_cents: int, currency: str = "USD"
) -> int:
    """Create a user whose available balance equals net_revenue_cents.

    Returns the id of the finalized statement backing the balance.
    """
    artist_id = await create_user_with_artist(client, user_id)
    return await add_finalized_statement(client, artist_id, net_revenue_cents, currency)


async def get_available(client: AsyncClient, user_id: str, currency: str = "USD") -> int:
    response = await client.get(f"/v1/users/{user_id}/balance?currency={currency}")
    assert response.status_code == 200, response.text
    return response.json()["available_cents"]


async def post_concurrent(
    client: AsyncClient, url: str, payloads: List[dict]
) -> List[Response]:
    """POST all payloads at once and return the responses in order."""
    tasks = [client.post(url, json=payload) for payload in payloads]
    return list(await asyncio.gather(*tasks))
