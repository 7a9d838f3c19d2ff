"""Integration tests for the HTTP API over a fake chain and in-memory ledger."""

from unittest.mock import AsyncMock

import pytest
from web3.exceptions import TransactionNotFound

from chainvalue.api import create_app
from chainvalue.models.enums import ValueSource
from chainvalue.services.contract_value_service import ContractValueService
from chainvalue.utils.exceptions import StoreWriteError
from chain_fakes import TEST_TX_HASH


@pytest.fixture
async def client(aiohttp_client, service):
    return await aiohttp_client(create_app(service))


class TestSetValue:
    """POST /api/set"""

    @pytest.mark.asyncio
    async def test_set_and_record(self, client, ledger):
        resp = await client.post("/api/set", json={"value": 42})
        body = await resp.json()

        assert resp.status == 200
        assert body["success"] is True
        assert body["message"] == "Value set successfully"
        assert body["data"] == {"value": "42", "tx_hash": TEST_TX_HASH}

        latest = await ledger.latest()
        assert (latest.value, latest.source, latest.tx_hash) == ("42", "blockchain", TEST_TX_HASH)

    @pytest.mark.asyncio
    async def test_set_with_wait_includes_receipt(self, client):
        resp = await client.post("/api/set", json={"value": 7, "wait": True})
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["block_number"] == 12
        assert body["data"]["status"] == "confirmed"

    @pytest.mark.asyncio
    async def test_partial_success(self, client, service, monkeypatch):
        monkeypatch.setattr(
            service.ledger,
            "append",
            AsyncMock(side_effect=StoreWriteError("failed to store value: disk I/O error")),
        )

        resp = await client.post("/api/set", json={"value": 42})
        body = await resp.json()

        assert resp.status == 206
        assert body["success"] is False
        assert body["error"].startswith("Value set on blockchain but failed to store in database")
        assert body["data"]["tx_hash"] == TEST_TX_HASH

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"value": -1}, {"value": "42"}, {"value": True}, {"value": 1.5}, {}, [42]],
    )
    async def test_invalid_body(self, client, fake_eth, payload):
        resp = await client.post("/api/set", json=payload)
        body = await resp.json()

        assert resp.status == 400
        assert body["success"] is False
        assert body["error"].startswith("Invalid request body")
        fake_eth.send_raw_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        resp = await client.post(
            "/api/set", data="not json", headers={"Content-Type": "application/json"}
        )

        assert resp.status == 400

    @pytest.mark.asyncio
    async def test_estimation_failure_is_bad_gateway(self, client, fake_eth, ledger):
        fake_eth.estimate_gas.side_effect = ValueError("execution reverted")

        resp = await client.post("/api/set", json={"value": 42})
        body = await resp.json()

        assert resp.status == 502
        assert body["error"] == (
            "Failed to set value on blockchain: failed to estimate gas: execution reverted"
        )
        assert await ledger.count() == 0


class TestReads:
    """GET /api/get, /api/check, /api/history, /api/status"""

    @pytest.mark.asyncio
    async def test_get(self, client, fake_eth):
        fake_eth.set_stored_value(25)

        resp = await client.get("/api/get")
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["value"] == "25"
        assert body["data"]["source"] == "blockchain"

    @pytest.mark.asyncio
    async def test_get_chain_failure(self, client, fake_eth):
        fake_eth.call.side_effect = ConnectionError("refused")

        resp = await client.get("/api/get")
        body = await resp.json()

        assert resp.status == 502
        assert body["success"] is False
        assert body["error"].startswith("Failed to get value from blockchain")

    @pytest.mark.asyncio
    async def test_get_unconfigured_contract(self, aiohttp_client, unconfigured_connector, ledger):
        client = await aiohttp_client(
            create_app(ContractValueService(unconfigured_connector, ledger))
        )

        resp = await client.get("/api/get")
        body = await resp.json()

        assert resp.status == 400
        assert "contract address not set" in body["error"]

    @pytest.mark.asyncio
    async def test_check(self, client, ledger, fake_eth):
        await ledger.append("10", ValueSource.BLOCKCHAIN, tx_hash="0x1")
        fake_eth.set_stored_value(25)

        resp = await client.get("/api/check")
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["in_sync"] is False
        assert body["data"]["last_sync_time"] == ""

    @pytest.mark.asyncio
    async def test_history_pagination(self, client, ledger):
        for value in range(3):
            await ledger.append(str(value), ValueSource.SYNC)

        resp = await client.get("/api/history", params={"limit": "2", "offset": "0"})
        body = await resp.json()

        assert resp.status == 200
        assert [r["value"] for r in body["data"]["history"]] == ["2", "1"]
        assert body["data"]["pagination"] == {"limit": 2, "offset": 0, "count": 2}

    @pytest.mark.asyncio
    async def test_history_out_of_range_params_normalized(self, client):
        resp = await client.get("/api/history", params={"limit": "1000", "offset": "-5"})
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["pagination"]["limit"] == 10
        assert body["data"]["pagination"]["offset"] == 0

    @pytest.mark.asyncio
    async def test_status(self, client):
        resp = await client.get("/api/status")
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["network"]["chain_id"] == "1337"
        assert body["data"]["contract"]["status"] == "configured"


class TestSync:
    """POST /api/sync"""

    @pytest.mark.asyncio
    async def test_sync_message(self, client, fake_eth):
        fake_eth.set_stored_value(25)

        first = await (await client.post("/api/sync")).json()
        second = await (await client.post("/api/sync")).json()

        assert first["message"] == "Sync completed. Updated: true"
        assert second["message"] == "Sync completed. Updated: false"
        assert second["data"]["previous_value"] == "25"


class TestReceipt:
    """GET /api/tx/{tx_hash}"""

    @pytest.mark.asyncio
    async def test_found(self, client):
        resp = await client.get(f"/api/tx/{TEST_TX_HASH}")
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["status"] == "confirmed"

    @pytest.mark.asyncio
    async def test_not_found(self, client, fake_eth):
        fake_eth.get_transaction_receipt.side_effect = TransactionNotFound("unknown")

        resp = await client.get(f"/api/tx/{TEST_TX_HASH}")

        assert resp.status == 404

    @pytest.mark.asyncio
    async def test_malformed_hash(self, client, fake_eth):
        resp = await client.get("/api/tx/0x1234")

        assert resp.status == 400
        fake_eth.get_transaction_receipt.assert_not_awaited()


class TestServiceEndpoints:
    """Health, index, CORS and error recovery."""

    @pytest.mark.asyncio
    async def test_health_ok(self, client):
        resp = await client.get("/api/health")
        body = await resp.json()

        assert resp.status == 200
        assert body["data"]["status"] == "ok"

    @pytest.mark.asyncio
    async def test_health_degraded(self, client, fake_eth):
        fake_eth.chain_id_value = ConnectionError("refused")

        resp = await client.get("/api/health")
        body = await resp.json()

        assert resp.status == 503
        assert body["success"] is False
        assert body["data"]["services"]["chain"]["status"] == "error"

    @pytest.mark.asyncio
    async def test_index(self, client):
        resp = await client.get("/")
        body = await resp.json()

        assert resp.status == 200
        assert "set" in body["data"]["endpoints"]

    @pytest.mark.asyncio
    async def test_cors_preflight(self, client):
        resp = await client.options("/api/set")

        assert resp.status == 204
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.asyncio
    async def test_cors_headers_on_response(self, client):
        resp = await client.get("/")
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500(self, client, service, monkeypatch):
        monkeypatch.setattr(service, "get_value", AsyncMock(side_effect=RuntimeError("boom")))

        resp = await client.get("/api/get")
        body = await resp.json()

        assert resp.status == 500
        assert body == {"success": False, "error": "Internal server error"}
