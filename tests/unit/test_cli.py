"""
CLI Unit Tests
Tests for airdrop_cli/main.py and airdrop_cli/commands/

Ledger-backed commands run against an InMemoryLedger by replacing
common.build_ledger.
"""

import json

import pytest

from airdrop_cli.commands import common
from airdrop_cli.main import main
from core.distribution import load_distribution

from fixtures import ALICE, BOB, DAVE, OWNER, make_distribution, make_ledger


@pytest.fixture(autouse=True)
def _workdir(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def alloc_csv(tmp_path):
    path = tmp_path / "alloc.csv"
    path.write_text(f"address,amount\n{ALICE},100\n{BOB},200\n")
    return path


@pytest.fixture
def use_ledger(monkeypatch):
    """Route build_ledger to the given in-memory ledger, rebinding the signer."""
    def _use(ledger):
        def fake_build_ledger(args, *, sender=None, require_sender=False):
            if require_sender and not sender:
                raise common.CLIError("No sender account configured")
            return ledger.as_account(sender) if sender else ledger.as_account(None)
        monkeypatch.setattr(common, "build_ledger", fake_build_ledger)
    return _use


class TestGenerate:
    """Tests for `airdrop generate`."""

    def test_generate_to_file(self, tmp_path, alloc_csv, capsys):
        out = tmp_path / "dist.json"
        assert main(["generate", str(alloc_csv), "--out", str(out)]) == 0

        expected = make_distribution(amounts=["100", "200"])
        assert load_distribution(out) == expected
        assert f"root: {expected.root_hex}" in capsys.readouterr().out

    def test_generate_to_stdout(self, alloc_csv, capsys):
        assert main(["generate", str(alloc_csv)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["format"] == "standard-v1"
        assert len(data["values"]) == 2

    def test_generate_ether(self, tmp_path, capsys):
        path = tmp_path / "alloc.json"
        path.write_text(json.dumps([{"address": ALICE, "amount": "0.5"}]))
        assert main(["generate", str(path), "--unit", "ether"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["values"][0]["value"] == [ALICE, "500000000000000000"]

    def test_generate_invalid_entry(self, tmp_path, capsys):
        path = tmp_path / "alloc.csv"
        path.write_text(f"address,amount\n{ALICE},100\n0xnope,5\n")
        assert main(["generate", str(path)]) == 1
        assert "VALIDATION_ERROR" in capsys.readouterr().err

    def test_generate_invalid_entry_json_output(self, tmp_path, capsys):
        path = tmp_path / "alloc.csv"
        path.write_text(f"address,amount\n{ALICE},abc\n")
        out = tmp_path / "dist.json"
        assert main(["generate", str(path), "--out", str(out), "--json"]) == 1
        error = json.loads(capsys.readouterr().out)["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["index"] == 0
        assert not out.exists()

    def test_generate_missing_file(self, tmp_path, capsys):
        assert main(["generate", str(tmp_path / "missing.csv")]) == 1
        assert "File not found" in capsys.readouterr().err


class TestProofAndVerify:
    """Tests for the offline commands."""

    def test_proof(self, dump_path, distribution, capsys):
        assert main(["proof", BOB, "--dist", str(dump_path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["amount"] == "200"
        assert data["treeIndex"] == 1
        assert data["proof"] == distribution.entry(1).proof_hex

    def test_proof_not_found(self, dump_path, capsys):
        assert main(["proof", DAVE, "--dist", str(dump_path)]) == 1
        assert "NOT_FOUND" in capsys.readouterr().err

    def test_proof_uses_configured_path(self, tmp_path, distribution, capsys):
        from core.distribution import save_distribution
        save_distribution(distribution, tmp_path / "distribution.json")
        assert main(["proof", ALICE]) == 0
        assert "tree_index: 0" in capsys.readouterr().out

    def test_verify_ok(self, dump_path, capsys):
        assert main(["verify", str(dump_path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["ok"] is True
        assert data["count"] == 3

    def test_verify_expected_root(self, dump_path, distribution, capsys):
        assert main(["verify", str(dump_path), "--root", distribution.root_hex]) == 0
        assert main(["verify", str(dump_path), "--root", "0x" + "11" * 32]) == 2
        assert "does not match expected" in capsys.readouterr().out

    def test_verify_tampered(self, tmp_path, distribution, capsys):
        data = distribution.dump()
        data["values"][1]["value"][1] = "201"
        path = tmp_path / "tampered.json"
        path.write_text(json.dumps(data))

        assert main(["verify", str(path), "--json", "--debug"]) == 2
        summary = json.loads(capsys.readouterr().out)
        failed = [c["check_id"] for c in summary["checks"] if not c["ok"]]
        assert failed == ["leaf_digests", "root"]

    def test_verify_unknown_format(self, tmp_path, distribution, capsys):
        data = distribution.dump()
        data["format"] = "standard-v2"
        path = tmp_path / "future.json"
        path.write_text(json.dumps(data))
        assert main(["verify", str(path)]) == 1
        assert "UNSUPPORTED_FORMAT_VERSION" in capsys.readouterr().err


class TestLedgerCommands:
    """Tests for status, claim and root commands."""

    def test_status(self, dump_path, distribution, use_ledger, capsys):
        use_ledger(make_ledger(distribution, claimed={BOB: 50}))
        assert main(["status", BOB, "--dist", str(dump_path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "claimable"
        assert data["claimable"] == "150"
        assert data["unlocked"] == "50"

    def test_status_no_allocation(self, dump_path, distribution, use_ledger, capsys):
        use_ledger(make_ledger(distribution))
        assert main(["status", DAVE, "--dist", str(dump_path)]) == 0
        assert "No allocation found" in capsys.readouterr().out

    def test_claim(self, dump_path, distribution, use_ledger, capsys):
        ledger = make_ledger(distribution)
        use_ledger(ledger)

        assert main(["claim", "--from", ALICE, "--dist", str(dump_path), "--json"]) == 0

        receipt = json.loads(capsys.readouterr().out)
        assert receipt["cumulativeAmount"] == "100"
        assert receipt["delta"] == "100"
        assert ledger.cumulative_claimed(ALICE) == 100

    def test_claim_twice(self, dump_path, distribution, use_ledger, capsys):
        ledger = make_ledger(distribution)
        use_ledger(ledger)
        assert main(["claim", "--from", ALICE, "--dist", str(dump_path)]) == 0
        assert main(["claim", "--from", ALICE, "--dist", str(dump_path)]) == 1
        assert "FULLY_CLAIMED" in capsys.readouterr().err
        assert ledger.unlocked_balance(ALICE) == 100

    def test_claim_requires_sender(self, dump_path, distribution, use_ledger, capsys):
        use_ledger(make_ledger(distribution))
        assert main(["claim", "--dist", str(dump_path)]) == 1
        assert "sender" in capsys.readouterr().err

    def test_claim_root_mismatch(self, dump_path, use_ledger, capsys):
        use_ledger(make_ledger(make_distribution(amounts=["9"])))
        assert main(["claim", "--from", ALICE, "--dist", str(dump_path)]) == 1
        assert "INCONSISTENT_STATE" in capsys.readouterr().err

    def test_root_show(self, dump_path, distribution, use_ledger, capsys):
        use_ledger(make_ledger(distribution))
        assert main(["root", "show", "--dist", str(dump_path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "root": distribution.root_hex,
            "distributionRoot": distribution.root_hex,
            "matches": True,
        }

    def test_root_show_mismatch(self, dump_path, use_ledger):
        use_ledger(make_ledger())
        assert main(["root", "show", "--dist", str(dump_path)]) == 2

    def test_root_publish_from_dump(self, dump_path, distribution, use_ledger, capsys):
        ledger = make_ledger()
        use_ledger(ledger)

        assert main(["root", "publish", "--from", OWNER, "--dist", str(dump_path), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["updatedMerkleRoot"] == distribution.root_hex
        assert ledger.read_root() == distribution.root

    def test_root_publish_is_idempotent(self, distribution, use_ledger, capsys):
        ledger = make_ledger(distribution)
        use_ledger(ledger)
        assert main(["root", "publish", distribution.root_hex, "--from", OWNER]) == 0
        assert "No update needed" in capsys.readouterr().out
        assert len(ledger.state.transactions) == 1

    def test_root_publish_malformed(self, use_ledger, capsys):
        use_ledger(make_ledger())
        assert main(["root", "publish", "0x1234", "--from", OWNER]) == 1
        assert "Invalid merkle root format" in capsys.readouterr().err


class TestBuildLedger:
    """Tests for the real build_ledger configuration checks."""

    def test_requires_rpc_url(self, dump_path, capsys):
        assert main(["status", ALICE, "--dist", str(dump_path)]) == 1
        assert "No RPC URL configured" in capsys.readouterr().err

    def test_requires_sender_for_writes(self, monkeypatch, dump_path, capsys):
        monkeypatch.setenv("AIRDROP_RPC_URL", "https://rpc.test")
        assert main(["claim", "--dist", str(dump_path)]) == 1
        assert "No sender account configured" in capsys.readouterr().err


class TestConfigCommand:
    """Tests for `airdrop config`."""

    def test_init_and_show(self, tmp_path, capsys):
        assert main(["config", "--init"]) == 0
        assert (tmp_path / "airdrop.json").exists()
        assert main(["config", "--init"]) == 1

        capsys.readouterr()
        assert main(["config", "--show"]) == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["network"]["chain_id"] == 97
        assert shown["check_root"] is True

    def test_no_command(self):
        assert main([]) == 1
