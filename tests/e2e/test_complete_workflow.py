import pytest
from httpx import AsyncClient

from tests.utils import (
    CatalogFactory,
    PayoutFactory,
    add_finalized_statement,
    create_user_with_artist,
)


@pytest.mark.e2e
class TestCompleteWorkflow:
    async def test_statement_to_payout_lifecycle(self, client: AsyncClient) -> None:
        user_id = "usr_e2e_001"

        # Step 1: catalog and a finalized statement worth 500.00 USD
        artist_id = await create_user_with_artist(client, user_id)
        release = await client.post(
            "/v1/releases",
            json=CatalogFactory.create_release_data(artist_id, upc="036000291452"),
        )
        assert release.status_code == 201
        statement_id = await add_finalized_statement(client, artist_id, 50000)

        balance = await client.get(f"/v1/users/{user_id}/balance?currency=USD")
        assert balance.json()["available_cents"] == 50000

        # Step 2: withdraw everything
        payout = await client.post(
            "/v1/payouts",
            json=PayoutFactory.create_payout_data(
                user_id, 50000, statement_ids=[statement_id]
            ),
        )
        assert payout.status_code == 201
        payout_id = payout.json()["id"]

        balance = (await client.get(f"/v1/users/{user_id}/balance")).json()
        assert balance["total_earned_cents"] == 50000
        assert balance["total_pending_cents"] == 50000
        assert balance["available_cents"] == 0

        # Step 3: nothing left, even for one cent
        overdraw = await client.post(
            "/v1/payouts", json=PayoutFactory.create_payout_data(user_id, 100)
        )
        assert overdraw.status_code == 409
        assert overdraw.json()["error"]["code"] == "PAYOUT_INSUFFICIENT_BALANCE"
        assert overdraw.json()["error"]["details"]["available_cents"] == 0

        # Step 4: cancelling restores the full balance
        cancel = await client.post(
            f"/v1/payouts/{payout_id}/cancel", json={"user_id": user_id}
        )
        assert cancel.status_code == 200

        balance = (await client.get(f"/v1/users/{user_id}/balance")).json()
        assert balance["available_cents"] == 50000

        # Step 5: a second request goes all the way through
        payout = await client.post(
            "/v1/payouts", json=PayoutFactory.create_payout_data(user_id, 30000)
        )
        second_id = payout.json()["id"]
        process = await client.post(
            f"/v1/payouts/{second_id}/process", json={"processor_id": "ops_1"}
        )
        complete = await client.post(
            f"/v1/payouts/{second_id}/complete",
            json={"processor_id": "ops_1", "transaction_id": "tx-1"},
        )
        assert process.status_code == 200
        assert complete.status_code == 200

        balance = (await client.get(f"/v1/users/{user_id}/balance")).json()
        assert balance["total_paid_cents"] == 30000
        assert balance["total_pending_cents"] == 0
        assert balance["available_cents"] == 20000

        listed = await client.get(f"/v1/payouts?user_id={user_id}")
        statuses = sorted(p["status"] for p in listed.json()["payouts"])
        assert statuses == ["cancelled", "completed"]

    async def test_health_and_metrics(self, client: AsyncClient) -> None:
        health = await client.get("/health")
        metrics = await client.get("/metrics")

        assert health.json() == {"status": "healthy"}
        assert metrics.status_code == 200
        assert "royalty_payouts_total" in metrics.text
