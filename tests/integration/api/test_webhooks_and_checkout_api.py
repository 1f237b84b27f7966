"""API tests for the subscription webhook and checkout endpoints"""

import pytest


def renewal(user_id="user_1", event_id="evt_1"):
    return {
        "event": {
            "type": "RENEWAL",
            "id": event_id,
            "app_user_id": user_id,
            "product_id": "pro_monthly",
            "entitlement_ids": ["pantry-chef Pro"],
            "purchased_at_ms": 1704067200000,
        }
    }


@pytest.mark.asyncio
class TestSubscriptionWebhookAPI:

    async def test_renewal_is_acknowledged_and_applied(self, client):
        await client.post("/api/credits/user_1/account")

        response = await client.post("/api/webhooks/subscriptions", json=renewal())

        assert response.status_code == 200
        ack = response.json()
        assert ack["received"] is True
        assert ack["tier"] == "pro"
        assert ack["credits_granted"] == 40

        status = await client.get("/api/credits/user_1/status")
        assert status.json()["balance"] == 65
        assert status.json()["is_pro_user"] is True
        assert status.json()["needs_entitlement_refresh"] is False

    async def test_redelivery_is_a_replay(self, client):
        await client.post("/api/credits/user_1/account")

        await client.post("/api/webhooks/subscriptions", json=renewal())
        response = await client.post("/api/webhooks/subscriptions", json=renewal(event_id="evt_retry"))

        assert response.status_code == 200
        assert response.json()["is_replay"] is True
        balance = await client.get("/api/credits/user_1/balance")
        assert balance.json()["balance"] == 65

    async def test_missing_app_user_id_still_returns_200(self, client):
        payload = renewal()
        del payload["event"]["app_user_id"]

        response = await client.post("/api/webhooks/subscriptions", json=payload)

        assert response.status_code == 200
        assert response.json()["received"] is True
        assert response.json()["error_code"] == "MISSING_APP_USER_ID"

    async def test_unknown_event_type_is_acknowledged(self, client):
        await client.post("/api/credits/user_1/account")

        response = await client.post(
            "/api/webhooks/subscriptions",
            json={"event": {"type": "PRODUCT_CHANGE", "id": "evt_9", "app_user_id": "user_1"}},
        )

        assert response.status_code == 200
        assert response.json()["error_code"] is None

    async def test_malformed_payload_is_acknowledged(self, client):
        response = await client.post(
            "/api/webhooks/subscriptions",
            json={"event": {"type": "RENEWAL", "app_user_id": "user_1", "entitlement_ids": "oops"}},
        )

        assert response.status_code == 200
        assert response.json()["error_code"] == "EVENT_PROCESSING_FAILED"

    async def test_non_object_event_is_acknowledged(self, client):
        response = await client.post("/api/webhooks/subscriptions", json={"event": "oops", "type": "RENEWAL"})

        assert response.status_code == 200
        assert response.json()["received"] is True
        assert response.json()["event_type"] == "RENEWAL"
        assert response.json()["error_code"] == "EVENT_PROCESSING_FAILED"

    async def test_non_object_body_is_acknowledged(self, client):
        response = await client.post("/api/webhooks/subscriptions", json=[1, 2])

        assert response.status_code == 200
        assert response.json()["received"] is True
        assert response.json()["event_type"] == ""
        assert response.json()["error_code"] == "EVENT_PROCESSING_FAILED"

    async def test_unparseable_body_is_acknowledged(self, client):
        response = await client.post(
            "/api/webhooks/subscriptions",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["error_code"] == "EVENT_PROCESSING_FAILED"

    async def test_top_level_type_is_accepted(self, client):
        await client.post("/api/credits/user_1/account")

        response = await client.post(
            "/api/webhooks/subscriptions",
            json={
                "type": "NON_RENEWING_PURCHASE",
                "event": {"id": "evt_pack", "app_user_id": "user_1", "product_id": "credits_10"},
            },
        )

        assert response.status_code == 200
        assert response.json()["credits_granted"] == 10


@pytest.mark.asyncio
class TestCheckoutAPI:

    async def test_complete_checkout_rewards(self, client):
        await client.post("/api/credits/user_1/account")

        first = await client.post("/api/checkout/user_1/complete")
        second = await client.post("/api/checkout/user_1/complete")

        assert first.status_code == 200
        assert first.json()["reward"]["credits_granted"] == 15
        assert first.json()["reward"]["balance_after"] == 40
        assert first.json()["usages_marked"] == 0
        assert second.json()["reward"]["checkout_number"] == 2
        assert second.json()["reward"]["credits_granted"] == 10
        assert second.json()["reward"]["next_reward"] == 5

    async def test_complete_checkout_unknown_user(self, client):
        response = await client.post("/api/checkout/ghost/complete")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    async def test_reward_info(self, client):
        await client.post("/api/credits/user_1/account")
        await client.post("/api/checkout/user_1/complete")

        response = await client.get("/api/checkout/user_1/reward-info")

        assert response.status_code == 200
        data = response.json()
        assert data["total_checkouts"] == 1
        assert data["checkout_number"] == 2
        assert data["next_reward"] == 10
        assert data["is_steady_state"] is False
