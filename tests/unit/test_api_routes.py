"""HTTP-level tests: envelopes, status codes and validation, no database.

Router services are swapped for ones wired to in-memory repositories; the
``client`` fixture stubs the database session.
"""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.econ_bank.api import router as bank_router
from src.econ_bank.application.service import BankApplicationService
from src.econ_bank.domain.models import CharacterProfile
from src.econ_supply.api import router as supply_router
from src.econ_supply.application.service import SupplyApplicationService
from tests.fake_repositories import FakeAccountRepository, FakeSupplyRepository


@pytest.fixture
def bank(monkeypatch) -> FakeAccountRepository:
    accounts = FakeAccountRepository()
    characters = AsyncMock()
    characters.get_profile.return_value = CharacterProfile(
        character_id="hero-1", level=10, character_class="WARRIOR", gold=1500, luck=50
    )
    monkeypatch.setattr(
        bank_router, "_service", BankApplicationService(repo=accounts, characters=characters)
    )
    return accounts


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": "0.1.0"}

    async def test_request_id_header(self, client: AsyncClient) -> None:
        resp = await client.get("/health")

        assert resp.headers["X-Request-ID"].startswith("req_")


class TestBankRoutes:
    async def test_open_and_deposit(self, client: AsyncClient, bank) -> None:
        opened = await client.post("/api/v1/bank/accounts/hero-1", json={})
        deposited = await client.post(
            "/api/v1/bank/accounts/hero-1/deposit", json={"amount_cents": 25000}
        )

        assert opened.status_code == 200
        assert opened.json()["data"]["credit_score"] == 670
        body = deposited.json()
        assert body["code"] == 0
        assert body["request_id"] == deposited.headers["X-Request-ID"]
        assert bank.accounts["hero-1"].balance == 25000

    async def test_missing_account_is_404_envelope(self, client: AsyncClient, bank) -> None:
        resp = await client.get("/api/v1/bank/accounts/nobody/balance")

        assert resp.status_code == 404
        body = resp.json()
        assert body["code"] == 2002
        assert body["data"] is None

    async def test_overdraft_is_422(self, client: AsyncClient, bank) -> None:
        await client.post("/api/v1/bank/accounts/hero-1", json={})

        resp = await client.post(
            "/api/v1/bank/accounts/hero-1/withdraw", json={"amount_cents": 100}
        )

        assert resp.status_code == 422
        assert resp.json()["code"] == 2001

    async def test_non_positive_amount_fails_validation(self, client: AsyncClient, bank) -> None:
        resp = await client.post(
            "/api/v1/bank/accounts/hero-1/deposit", json={"amount_cents": 0}
        )

        assert resp.status_code == 422

    async def test_unknown_account_type_fails_validation(self, client: AsyncClient, bank) -> None:
        resp = await client.post("/api/v1/bank/accounts/hero-1", json={"account_type": "GOLD"})

        assert resp.status_code == 422


class TestReadOnlyRoutes:
    async def test_event_templates(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/events/templates")

        assert resp.status_code == 200
        assert len(resp.json()["data"]) == 14

    async def test_gift_catalog(self, client: AsyncClient, monkeypatch) -> None:
        monkeypatch.setattr(
            supply_router, "_service", SupplyApplicationService(repo=FakeSupplyRepository())
        )

        resp = await client.get("/api/v1/supply/gifts/WARRIOR")

        assert resp.status_code == 200
        assert len(resp.json()["data"]) == 4

    async def test_service_request_rejects_unknown_payment(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/economy/services/hero-1",
            json={"target_class": "WARRIOR", "npc_id": "npc-1", "payment_type": "BARTER"},
        )

        assert resp.status_code == 422
