"""End-to-end tests of the HTTP surface and the error envelope."""

import pytest

from connect_platform.api.deps import get_payment_orchestrator
from connect_platform.providers.errors import GatewayError


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "processor": "mock"}


@pytest.mark.asyncio
async def test_onboarding_callbacks(client):
    assert (await client.get("/return")).status_code == 200
    assert (await client.get("/refresh")).status_code == 200


class TestAccounts:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, gateway):
        created = await client.post("/accounts")
        assert created.status_code == 200
        account_id = created.json()["id"]

        state = (await client.get("/api/state")).json()
        assert [a["id"] for a in state["accounts"]] == [account_id]
        assert state["root_url"] == "https://platform.example.test"

    @pytest.mark.asyncio
    async def test_treasury_twice(self, client, gateway):
        first = (await client.post("/accounts/treasury", params={"country": "FR"})).json()
        second = (await client.post("/accounts/treasury")).json()

        assert first["id"] == second["id"]
        assert "message" not in first
        assert second["already_exists"] is True
        assert gateway.call_count("accounts.create") == 1

    @pytest.mark.asyncio
    async def test_treasury_onboard_without_treasury(self, client):
        response = await client.post("/accounts/treasury/onboard")
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "BAD_REQUEST"
        assert body["message"] == "Treasury account not set"
        assert "details" not in body
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_onboard_account(self, client, gateway):
        gateway.add_account("acct_abc", transfers="inactive")
        response = await client.post("/accounts/acct_abc/onboard")
        assert response.status_code == 200
        assert response.json()["url"].startswith("https://")

    @pytest.mark.asyncio
    async def test_verify_unknown_account(self, client):
        response = await client.post("/accounts/acct_nope/verify")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_verify_treasury_missing_id(self, client):
        response = await client.post("/accounts/treasury/verify")
        assert response.status_code == 400
        assert response.json()["message"] == "Missing id"

    @pytest.mark.asyncio
    async def test_verify_treasury(self, client, gateway):
        gateway.add_account("acct_tr")
        response = await client.post("/accounts/treasury/verify", params={"id": "acct_tr"})
        assert response.status_code == 200
        assert response.json()["id"] == "acct_tr"

        state = (await client.get("/api/state")).json()
        assert state["treasury"]["id"] == "acct_tr"

    @pytest.mark.asyncio
    async def test_request_transfers(self, client, gateway, active_treasury):
        response = await client.post("/accounts/treasury/request-transfers")
        assert response.status_code == 200
        body = response.json()
        assert body["account_id"] == active_treasury
        assert body["transfers_status"] == "active"
        assert body["onboarding_url"]


class TestPayments:
    @pytest.mark.asyncio
    async def test_split_payment(self, client, gateway):
        gateway.add_account("acct_123", transfers="active")

        response = await client.post("/payments", json={
            "amount": 1000,
            "currency": "eur",
            "destination_account_id": "acct_123",
            "application_fee_amount": 50,
        })

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "client_secret", "status"}

        fetched = (await client.get(f"/payments/{body['id']}")).json()
        assert fetched["application_fee_amount"] == 50
        assert fetched["amount"] == 1000

    @pytest.mark.asyncio
    async def test_connected_account_id_alias(self, client, gateway):
        gateway.add_account("acct_123", transfers="active")
        response = await client.post("/payments", json={
            "amount": 1000,
            "currency": "eur",
            "connected_account_id": "acct_123",
        })
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_split_without_destination(self, client):
        response = await client.post("/payments", json={"amount": 1000, "currency": "eur"})
        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_platform_payment(self, client):
        response = await client.post("/payments/platform", json={"amount": 1000, "currency": "eur"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_malformed_body_is_validation_error(self, client):
        response = await client.post("/payments", json={"amount": "lots", "currency": "eur"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "amount" in body["details"]

    @pytest.mark.asyncio
    async def test_unknown_intent(self, client):
        response = await client.get("/payments/pi_missing")
        assert response.status_code == 502
        assert response.json()["code"] == "PROCESSOR_API_ERROR"


class TestTransfers:
    @pytest.mark.asyncio
    async def test_insufficient_funds(self, client, gateway, active_treasury):
        gateway.set_balance(available={"eur": 500})

        response = await client.post("/transfers/treasury", json={"amount": 1000, "currency": "eur"})

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "INSUFFICIENT_FUNDS"
        assert body["details"] == {
            "available_by_currency": {"eur": 500},
            "requested": 1000,
            "currency": "eur",
        }

    @pytest.mark.asyncio
    async def test_onboarding_required(self, client, gateway, registry):
        gateway.add_account("acct_t", transfers="inactive")
        registry.set_treasury("acct_t")

        response = await client.post("/transfers/treasury", json={"amount": 1000, "currency": "eur"})

        assert response.status_code == 409
        assert response.json()["code"] == "ONBOARDING_REQUIRED"

    @pytest.mark.asyncio
    async def test_rate_limited(self, client, gateway, active_treasury):
        from connect_platform.providers.errors import GatewayRateLimitError

        gateway.inject_failure("balance.retrieve", GatewayRateLimitError("slow down"))

        response = await client.post("/transfers/treasury", json={"amount": 1, "currency": "eur"})

        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMITED"

    @pytest.mark.asyncio
    async def test_success(self, client, gateway, active_treasury):
        gateway.set_balance(available={"eur": 5000})

        response = await client.post("/transfers/treasury", json={
            "amount": 1000,
            "currency": "eur",
            "description": "March fees",
        })

        assert response.status_code == 200
        assert response.json()["destination"] == active_treasury


class TestStateAndBalance:
    @pytest.mark.asyncio
    async def test_state_degrades_per_account(self, client, gateway, registry):
        gateway.add_account("acct_ok")
        registry.add("acct_ok")
        registry.add("acct_broken")

        response = await client.get("/api/state")

        assert response.status_code == 200
        accounts = response.json()["accounts"]
        assert accounts[0]["charges_enabled"] is True
        assert set(accounts[1]) == {"id", "error"}

    @pytest.mark.asyncio
    async def test_state_omits_balance_on_failure(self, client, gateway):
        gateway.inject_failure("balance.retrieve", GatewayError("down"))

        body = (await client.get("/api/state")).json()

        assert "platform_balance" not in body
        assert "platform_balance_pending" not in body
        assert "treasury" not in body

    @pytest.mark.asyncio
    async def test_state_reports_empty_balance(self, client):
        body = (await client.get("/api/state")).json()
        assert body["platform_balance"] == {}

    @pytest.mark.asyncio
    async def test_balance_endpoint(self, client, gateway):
        gateway.set_balance(available={"eur": 500})
        body = (await client.get("/api/balance")).json()
        assert body == {"available": [{"currency": "eur", "amount": 500}], "pending": []}

    @pytest.mark.asyncio
    async def test_balance_endpoint_failure(self, client, gateway):
        gateway.inject_failure("balance.retrieve", GatewayError("down"))
        response = await client.get("/api/balance")
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_checkout_config(self, client):
        body = (await client.get("/api/checkout-config", params={"amount": 1000, "currency": "eur"})).json()
        assert body == {"publishable_key": "pk_test_123", "amount": 1000, "currency": "eur"}


class TestTranslationPoint:
    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/nope")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_wrong_method_keeps_405(self, client):
        response = await client.get("/transfers/treasury")
        assert response.status_code == 405
        assert response.json()["code"] == "BAD_REQUEST"
        assert "POST" in response.headers["allow"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_internal_error(self, app, client):
        class Exploding:
            async def create_platform_payment(self, req):
                raise RuntimeError("secret stack detail")

        app.dependency_overrides[get_payment_orchestrator] = lambda: Exploding()

        response = await client.post("/payments/platform", json={"amount": 1, "currency": "eur"})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert "secret stack detail" not in body["message"]

    @pytest.mark.asyncio
    async def test_leaked_gateway_error(self, app, client):
        class Leaky:
            async def get_payment_intent(self, payment_intent_id):
                raise GatewayError("raw upstream failure", code="api_error", request_id="req_7")

        app.dependency_overrides[get_payment_orchestrator] = lambda: Leaky()

        response = await client.get("/payments/pi_1")

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "PROCESSOR_API_ERROR"
        assert body["details"] == {"processor_code": "api_error", "request_id": "req_7"}
