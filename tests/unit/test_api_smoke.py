"""
API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /generate-merkle returns the distribution dump
3. POST /update-merkle is idempotent and validates the root first
4. GET /claims/{address} reports allocation, claimed and proof
5. Engine errors map to their HTTP statuses
"""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.deps import get_distribution, get_ledger, get_ledger_reader
from core.claims import MESSAGE_UNCHANGED, MESSAGE_UPDATED
from core.distribution import Distribution

from fixtures import (
    ALICE,
    BOB,
    CAROL,
    DAVE,
    OWNER,
    RecordingLedger,
    make_allocations,
    make_distribution,
    make_ledger,
)


client = TestClient(app)


@pytest.fixture(autouse=True)
def _reset_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    yield
    app.dependency_overrides.clear()


def _use_ledger(ledger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_ledger_reader] = lambda: ledger


def _use_distribution(distribution):
    app.dependency_overrides[get_distribution] = lambda: distribution


class TestHealth:
    """Tests for GET /health."""

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "service": "airdrop-api",
            "version": "v1",
            "chainId": 97,
            "ledgerConfigured": False,
        }

    def test_health_reports_ledger(self, monkeypatch):
        monkeypatch.setenv("AIRDROP_RPC_URL", "https://rpc.test")
        monkeypatch.setenv("AIRDROP_SENDER", OWNER)
        assert client.get("/health").json()["ledgerConfigured"] is True

    def test_root(self):
        assert client.get("/").json()["ok"] is True


class TestGenerate:
    """Tests for POST /generate-merkle."""

    def test_generate(self):
        response = client.post("/generate-merkle", json={"allocations": make_allocations()})
        assert response.status_code == 200

        data = response.json()
        expected = make_distribution()
        assert data["format"] == "standard-v1"
        assert data["leafEncoding"] == ["address", "uint256"]
        assert data["root"] == expected.root_hex
        assert data["values"][2]["treeIndex"] == 2
        assert Distribution.parse(data) == expected

    def test_generate_ether_unit(self):
        response = client.post("/generate-merkle", json={
            "allocations": [{"address": ALICE, "amount": "1.5"}],
            "unit": "ether",
        })
        assert response.status_code == 200
        assert response.json()["values"][0]["value"] == [ALICE, "1500000000000000000"]

    def test_invalid_address(self):
        entries = make_allocations()
        entries[1]["address"] = "0x123"
        response = client.post("/generate-merkle", json={"allocations": entries})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["index"] == 1
        assert error["details"]["value"] == "0x123"

    def test_address_with_trailing_newline(self):
        entries = make_allocations()
        entries[1]["address"] += "\n"
        response = client.post("/generate-merkle", json={"allocations": entries})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["index"] == 1
        assert error["details"]["field"] == "address"

    def test_amount_with_trailing_newline(self):
        entries = make_allocations()
        entries[2]["amount"] += "\n"
        response = client.post("/generate-merkle", json={"allocations": entries})

        assert response.status_code == 400
        assert response.json()["error"]["details"]["index"] == 2

    def test_invalid_amount(self):
        entries = make_allocations()
        entries[0]["amount"] = "-5"
        response = client.post("/generate-merkle", json={"allocations": entries})
        assert response.status_code == 400
        assert response.json()["error"]["details"]["field"] == "amount"

    def test_empty_allocations(self):
        response = client.post("/generate-merkle", json={"allocations": []})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_missing_allocations(self):
        response = client.post("/generate-merkle", json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


class TestUpdateMerkle:
    """Tests for POST /update-merkle."""

    def test_update(self, distribution):
        ledger = make_ledger()
        _use_ledger(ledger)

        response = client.post("/update-merkle", json={"merkleRoot": distribution.root_hex})

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == MESSAGE_UPDATED
        assert data["updatedMerkleRoot"] == distribution.root_hex
        assert data["txHash"].startswith("0x")
        assert "currentMerkleRoot" not in data
        assert ledger.read_root() == distribution.root

    def test_same_root_is_noop(self, distribution):
        ledger = RecordingLedger(make_ledger(distribution))
        _use_ledger(ledger)

        response = client.post("/update-merkle", json={"merkleRoot": distribution.root_hex})

        assert response.status_code == 200
        assert response.json() == {
            "message": MESSAGE_UNCHANGED,
            "txHash": None,
            "currentMerkleRoot": distribution.root_hex,
        }
        assert ledger.write_calls() == []

    def test_missing_root(self):
        _use_ledger(make_ledger())
        response = client.post("/update-merkle", json={})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Missing required parameter: merkleRoot"

    def test_malformed_root(self):
        ledger = RecordingLedger(make_ledger())
        _use_ledger(ledger)
        response = client.post("/update-merkle", json={"merkleRoot": "0xabc"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert ledger.calls == []

    def test_malformed_root_before_configuration(self):
        response = client.post("/update-merkle", json={"merkleRoot": "0xabc"})
        assert response.status_code == 400

    def test_missing_configuration(self, distribution):
        response = client.post("/update-merkle", json={"merkleRoot": distribution.root_hex})
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "CONFIGURATION_ERROR"
        assert "rpc_url" in error["details"]["missing"]
        assert "sender" in error["details"]["missing"]

    def test_read_back_mismatch(self, distribution):
        _use_ledger(RecordingLedger(make_ledger(), drop_writes=True))

        response = client.post("/update-merkle", json={"merkleRoot": distribution.root_hex})

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INCONSISTENT_STATE"
        assert error["details"]["requested"] == distribution.root_hex
        assert error["details"]["observed"] == "0x" + "00" * 32

    def test_ledger_failure(self, distribution):
        _use_ledger(make_ledger(account=ALICE))
        response = client.post("/update-merkle", json={"merkleRoot": distribution.root_hex})
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "LEDGER_ERROR"


class TestClaims:
    """Tests for GET /claims/{address}."""

    def test_claimable(self, distribution):
        _use_distribution(distribution)
        _use_ledger(make_ledger(distribution, claimed={BOB: 50}))

        response = client.get(f"/claims/{BOB}")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "claimable"
        assert data["allocation"] == "200"
        assert data["claimed"] == "50"
        assert data["claimable"] == "150"
        assert data["treeIndex"] == 1
        assert data["proof"] == distribution.entry(1).proof_hex
        assert data["root"] == distribution.root_hex

    def test_fully_claimed(self, distribution):
        _use_distribution(distribution)
        _use_ledger(make_ledger(distribution, claimed={ALICE: 100}))
        data = client.get(f"/claims/{ALICE}").json()
        assert data["status"] == "fully_claimed"
        assert data["claimable"] == "0"

    def test_not_found(self, distribution):
        _use_distribution(distribution)
        _use_ledger(make_ledger(distribution))
        response = client.get(f"/claims/{DAVE}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_ambiguous(self):
        dist = make_distribution(amounts=["1", "2"], addresses=[ALICE, ALICE])
        _use_distribution(dist)
        _use_ledger(make_ledger(dist))
        response = client.get(f"/claims/{ALICE}")
        assert response.status_code == 409
        assert response.json()["error"]["details"]["tree_indices"] == [0, 1]

    def test_bad_address(self, distribution):
        _use_distribution(distribution)
        _use_ledger(make_ledger(distribution))
        response = client.get("/claims/0x12")
        assert response.status_code == 400

    def test_distribution_missing(self):
        _use_ledger(make_ledger())
        response = client.get(f"/claims/{ALICE}")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"

    def test_distribution_from_configured_path(self, monkeypatch, tmp_path, distribution):
        from core.distribution import save_distribution

        path = save_distribution(distribution, tmp_path / "served.json")
        monkeypatch.setenv("AIRDROP_DISTRIBUTION_PATH", str(path))
        _use_ledger(make_ledger(distribution))

        response = client.get(f"/claims/{CAROL}")
        assert response.status_code == 200
        assert response.json()["allocation"] == "300"
