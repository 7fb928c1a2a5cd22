"""Seed a running API with a demo user, catalog, splits and statements."""

import asyncio
import sys

import httpx

API_URL = "http://localhost:8000"
USER_ID = "usr_demo"

STATEMENTS = [
    ("spotify", "2026-01-01", "2026-01-31", 42_150),
    ("apple_music", "2026-01-01", "2026-01-31", 18_900),
    ("youtube", "2026-01-01", "2026-01-31", 6_320),
]


async def post(client: httpx.AsyncClient, path: str, payload: dict) -> dict:
    response = await client.post(f"{API_URL}{path}", json=payload)
    if response.status_code >= 400:
        print(f"POST {path} failed - {response.status_code}: {response.text[:200]}")
        sys.exit(1)
    return response.json()


async def seed_demo() -> None:
    print("Seeding demo data via API...\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        await post(
            client,
            "/v1/users",
            {"id": USER_ID, "display_name": "Demo Label", "email": "demo@example.com"},
        )
        artist = await post(
            client, "/v1/artists", {"user_id": USER_ID, "name": "The Demo Tapes"}
        )
        release = await post(
            client,
            "/v1/releases",
            {
                "artist_id": artist["id"],
                "title": "Night Drive",
                "upc": "036000291452",
                "genre": "Electronic",
                "language": "en",
                "release_date": "2026-02-01",
                "label": "Demo Label",
            },
        )
        print(f"Release created: {release['id']} ({release['title']})")

        for split_type, percentage in (("master", "70"), ("publishing", "50")):
            await post(
                client,
                "/v1/splits",
                {
                    "release_id": release["id"],
                    "artist_id": artist["id"],
                    "split_type": split_type,
                    "percentage": percentage,
                    "role": "primary artist",
                },
            )
            print(f"Split {split_type}: {percentage}%")

        for platform, start, end, net_cents in STATEMENTS:
            statement = await post(
                client,
                "/v1/statements",
                {
                    "artist_id": artist["id"],
                    "platform": platform,
                    "period_start": start,
                    "period_end": end,
                    "net_revenue_cents": net_cents,
                    "gross_revenue_cents": net_cents,
                },
            )
            await post(client, f"/v1/statements/{statement['id']}/finalize", {})
            print(f"Statement finalized: {platform} {net_cents} cents")

        balance = await client.get(f"{API_URL}/v1/users/{USER_ID}/balance")
        print("\n--- Balance ---")
        print(balance.json())


if __name__ == "__main__":
    asyncio.run(seed_demo())
