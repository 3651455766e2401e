"""Integration tests for the balance ledger (requires running PostgreSQL).

Pre-condition: alembic upgrade head
"""

import asyncio

import pytest
from httpx import AsyncClient

from tests.integration.conftest import register_and_login

pytestmark = [pytest.mark.asyncio(loop_scope="session"), pytest.mark.integration]


async def _create_client(client: AsyncClient, headers: dict[str, str], name: str) -> str:
    resp = await client.post("/api/v1/clients", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


async def _credit_sale(
    client: AsyncClient, headers: dict[str, str], client_id: str, amount: int
) -> dict:
    resp = await client.post(
        "/api/v1/sales",
        json={"amount": amount, "payment_mode": "credit", "client_id": client_id},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestCreditLifecycle:
    async def test_sale_payment_reversal_and_delete(self, client: AsyncClient) -> None:
        headers = await register_and_login(client)
        client_id = await _create_client(client, headers, "Awa Diop")

        sale = await _credit_sale(client, headers, client_id, 1000)
        assert sale["client"]["total_credit"] == 1000

        over = await client.post(
            "/api/v1/clients/payments",
            json={"client_id": client_id, "amount": 1500},
            headers=headers,
        )
        assert over.status_code == 422
        assert over.json()["error"] == "OVERPAYMENT_REJECTED"

        paid = await client.post(
            "/api/v1/clients/payments",
            json={"client_id": client_id, "amount": 400},
            headers=headers,
        )
        assert paid.json()["data"]["client"]["total_credit"] == 600

        blocked = await client.delete(f"/api/v1/clients/{client_id}", headers=headers)
        assert blocked.status_code == 409
        assert blocked.json()["error"] == "OUTSTANDING_BALANCE"

        extra = await _credit_sale(client, headers, client_id, 250)
        reversed_ = await client.delete(f"/api/v1/sales/{extra['sale']['id']}", headers=headers)
        assert reversed_.json()["data"]["client"]["total_credit"] == 600

        audit = await client.get(f"/api/v1/clients/{client_id}/audit", headers=headers)
        assert audit.json()["data"]["consistent"] is True

        await client.post(
            "/api/v1/clients/payments",
            json={"client_id": client_id, "amount": 600},
            headers=headers,
        )
        deleted = await client.delete(f"/api/v1/clients/{client_id}", headers=headers)
        assert deleted.status_code == 200

    async def test_concurrent_payments(self, client: AsyncClient) -> None:
        headers = await register_and_login(client)
        client_id = await _create_client(client, headers, "Moussa")
        await _credit_sale(client, headers, client_id, 1000)

        responses = await asyncio.gather(
            client.post(
                "/api/v1/clients/payments",
                json={"client_id": client_id, "amount": 600},
                headers=headers,
            ),
            client.post(
                "/api/v1/clients/payments",
                json={"client_id": client_id, "amount": 700},
                headers=headers,
            ),
        )
        codes = sorted(r.status_code for r in responses)
        assert codes == [201, 422]

        detail = await client.get(f"/api/v1/clients/{client_id}", headers=headers)
        assert detail.json()["data"]["client"]["total_credit"] in (400, 300)


class TestCommandsAndStats:
    async def test_voice_commands_feed_reports(self, client: AsyncClient) -> None:
        headers = await register_and_login(client)

        missing = await client.post(
            "/api/v1/commands/apply",
            json={"type": "vente", "montant": 2000, "modePaiement": "credit", "nomClient": "Fatou"},
            headers=headers,
        )
        assert missing.status_code == 404
        assert missing.json()["error"] == "CLIENT_NOT_FOUND"

        created = await client.post(
            "/api/v1/commands/apply",
            json={"type": "nouveau_client", "nom": "Fatou"},
            headers=headers,
        )
        assert created.status_code == 201

        duplicate = await client.post(
            "/api/v1/commands/apply",
            json={"type": "nouveau_client", "nom": "FATOU"},
            headers=headers,
        )
        assert duplicate.json()["error"] == "DUPLICATE_CLIENT"

        for cmd in (
            {"type": "vente", "montant": 2000, "modePaiement": "credit", "nomClient": "fatou"},
            {"type": "vente", "montant": 5000, "modePaiement": "cash"},
            {"type": "depense", "montant": 1500, "motif": "Transport"},
        ):
            resp = await client.post("/api/v1/commands/apply", json=cmd, headers=headers)
            assert resp.status_code == 201, resp.text

        summary = (await client.get("/api/v1/stats/summary", headers=headers)).json()["data"]
        assert summary["today_sales"] == 7000
        assert summary["today_expenses"] == 1500
        assert summary["outstanding_credit"] == 2000
        assert summary["debtor_count"] == 1

        day = (await client.get("/api/v1/stats/day", headers=headers)).json()["data"]
        assert day["profit"] == 3500

        rejected = await client.post(
            "/api/v1/commands/apply",
            json={"type": "erreur", "message": "Commande non comprise"},
            headers=headers,
        )
        assert rejected.status_code == 422
        assert rejected.json()["error"] == "COMMAND_REJECTED"
